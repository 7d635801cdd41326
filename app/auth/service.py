"""Bearer token acquisition and caching for the pollution source."""

import threading
from typing import Callable, Optional

from app.adapters.exceptions import AdapterError, AdapterHTTPError
from app.adapters.pollution import PollutionApiAdapter
from app.cache import TTLCache
from app.domain.exceptions import AuthError, AuthErrorReason
from app.domain.models import AuthToken
from app.logging import get_logger
from app.utils.timestamps import epoch_now

logger = get_logger(__name__, component="auth")

AUTH_TOKEN_CACHE_KEY = "authToken"


class TokenAuthenticator:
    """Obtains a bearer token for the pollution API and keeps it cached.

    A cached token is served while it outlives now + refresh_buffer_seconds.
    Otherwise a single login is performed; concurrent callers that miss the
    cache at the same time wait for that login instead of issuing their own.
    """

    def __init__(
        self,
        adapter: PollutionApiAdapter,
        cache: TTLCache,
        username: str,
        password: str,
        refresh_buffer_seconds: int = 60,
        min_token_ttl_seconds: int = 10,
        clock: Optional[Callable[[], float]] = None,
    ):
        """Initialize TokenAuthenticator.

        Args:
            adapter: Pollution API adapter used for the login call
            cache: Shared cache store
            username: Pollution API username
            password: Pollution API password
            refresh_buffer_seconds: Safety buffer subtracted from the expiry
            min_token_ttl_seconds: Cache TTL when expiry minus buffer is not positive
            clock: Epoch-seconds clock (defaults to time.time)
        """
        self.adapter = adapter
        self.cache = cache
        self.username = username
        self.password = password
        self.refresh_buffer_seconds = refresh_buffer_seconds
        self.min_token_ttl_seconds = min_token_ttl_seconds
        self._clock = clock or epoch_now
        self._refresh_lock = threading.Lock()

    def get_token(self) -> str:
        """Return a valid bearer token, logging in if needed.

        Raises:
            AuthError: INVALID_CREDENTIALS on 401, MALFORMED_RESPONSE if the
                login payload lacks a usable token/expiry, LOGIN_FAILED otherwise
        """
        token = self._cached_token()
        if token is not None:
            logger.debug("Serving auth token from cache", extra={"event": "auth.token.cache_hit"})
            return token.value

        with self._refresh_lock:
            # Another thread may have refreshed while we waited
            token = self._cached_token()
            if token is not None:
                return token.value

            logger.info(
                "Auth token not in cache or expiring, logging in",
                extra={"event": "auth.token.refresh"},
            )
            return self._login()

    def invalidate(self) -> None:
        """Drop the cached token so the next call logs in again."""
        self.cache.delete(AUTH_TOKEN_CACHE_KEY)

    def _cached_token(self) -> Optional[AuthToken]:
        token = self.cache.get(AUTH_TOKEN_CACHE_KEY)
        if token is not None and token.is_valid(self._clock(), self.refresh_buffer_seconds):
            return token
        return None

    def _login(self) -> str:
        try:
            payload = self.adapter.login(self.username, self.password)
        except AdapterHTTPError as e:
            if e.status_code == 401:
                logger.error(
                    "Login rejected: invalid username or password",
                    extra={"event": "auth.login.unauthorized", "status_code": e.status_code},
                )
                raise AuthError(
                    "Login failed: Invalid username or password for pollution API.",
                    AuthErrorReason.INVALID_CREDENTIALS,
                ) from e
            logger.error(
                f"Login request failed: {e}",
                extra={
                    "event": "auth.login.failed",
                    "status_code": e.status_code,
                    "response_body": e.body,
                },
            )
            raise AuthError(
                "Failed to obtain authentication token from login API.",
                AuthErrorReason.LOGIN_FAILED,
            ) from e
        except AdapterError as e:
            logger.error(
                f"Login request failed: {e}",
                extra={"event": "auth.login.failed", "error_type": type(e).__name__},
            )
            raise AuthError(
                "Failed to obtain authentication token from login API.",
                AuthErrorReason.LOGIN_FAILED,
            ) from e

        token_value = payload.get("token")
        expires_in = self._parse_expires_in(payload.get("expiresIn"))
        if not token_value or not isinstance(token_value, str) or expires_in is None:
            logger.error(
                "Login response lacks a valid token or expiresIn",
                extra={"event": "auth.login.malformed", "keys": sorted(payload.keys())},
            )
            raise AuthError(
                "Login API did not return a valid token or expiry (expiresIn).",
                AuthErrorReason.MALFORMED_RESPONSE,
            )

        ttl = self.compute_cache_ttl(expires_in)
        token = AuthToken(value=token_value, expires_at=self._clock() + expires_in)
        self.cache.set(AUTH_TOKEN_CACHE_KEY, token, ttl)

        logger.info(
            f"Obtained and cached new auth token. Expires in {expires_in} seconds.",
            extra={
                "event": "auth.token.cached",
                "expires_in": expires_in,
                "cache_ttl": ttl,
            },
        )
        return token_value

    def compute_cache_ttl(self, expires_in: int) -> int:
        """Cache TTL for a token valid for expires_in seconds.

        expires_in minus the refresh buffer, or the minimum TTL when that
        would not be positive.
        """
        ttl = expires_in - self.refresh_buffer_seconds
        if ttl <= 0:
            logger.warning(
                "Token expiry is too short for the refresh buffer, using minimum cache TTL",
                extra={
                    "event": "auth.token.short_expiry",
                    "expires_in": expires_in,
                    "refresh_buffer_seconds": self.refresh_buffer_seconds,
                    "min_token_ttl_seconds": self.min_token_ttl_seconds,
                },
            )
            return self.min_token_ttl_seconds
        return ttl

    @staticmethod
    def _parse_expires_in(value) -> Optional[int]:
        """Positive integer seconds, or None if missing/invalid."""
        if value is None or isinstance(value, bool):
            return None
        try:
            seconds = int(value)
        except (TypeError, ValueError):
            return None
        return seconds if seconds > 0 else None
