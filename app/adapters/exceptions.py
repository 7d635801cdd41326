"""Custom exceptions for upstream HTTP adapters."""

from typing import Any, Optional


class AdapterError(Exception):
    """Base exception for all adapter errors.

    Services catch this and translate it into the request-level taxonomy
    (AuthError, UpstreamError) or into a per-record drop decision.
    """

    pass


class AdapterHTTPError(AdapterError):
    """HTTP request failed with a 4xx/5xx status, or never reached the server.

    A status_code of 0 means a connection-level failure.
    """

    def __init__(self, message: str, status_code: int, url: str, body: Optional[Any] = None) -> None:
        """Initialize HTTP error.

        Args:
            message: Human-readable error message
            status_code: HTTP status code (e.g., 401, 500), 0 for connection errors
            url: URL that failed
            body: Decoded error body, if any
        """
        super().__init__(message)
        self.status_code = status_code
        self.url = url
        self.body = body


class AdapterTimeoutError(AdapterError):
    """HTTP request timed out."""

    def __init__(self, message: str, url: str) -> None:
        super().__init__(message)
        self.url = url


class AdapterResponseError(AdapterError):
    """Response parsing or validation failed (invalid JSON, unexpected shape)."""

    pass


class AdapterConfigurationError(AdapterError):
    """Invalid adapter configuration (timeout out of range, empty base URL, ...)."""

    pass
