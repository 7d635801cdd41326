"""Authentication against the pollution source."""

from .service import AUTH_TOKEN_CACHE_KEY, TokenAuthenticator

__all__ = ["AUTH_TOKEN_CACHE_KEY", "TokenAuthenticator"]
