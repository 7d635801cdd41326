"""Process-local caching with per-entry TTL."""

from .store import TTLCache

__all__ = ["TTLCache"]
