"""Request-level exceptions raised by the pipeline services.

Normalization and description failures are never raised; they are per-record
drop decisions. Only the errors below propagate to the HTTP boundary.
"""

from enum import Enum
from typing import Optional


class AuthErrorReason(str, Enum):
    """Why the login exchange with the pollution source failed."""

    INVALID_CREDENTIALS = "invalid_credentials"
    MALFORMED_RESPONSE = "malformed_response"
    LOGIN_FAILED = "login_failed"


class UpstreamErrorReason(str, Enum):
    """Why a pollution fetch failed."""

    NETWORK_FAILURE = "network_failure"
    UNAUTHORIZED = "unauthorized"
    BAD_REQUEST = "bad_request"


class InvalidRequestReason(str, Enum):
    """Why a client request was rejected before any upstream call."""

    BAD_PAGINATION = "bad_pagination"


class CityInsightsError(Exception):
    """Base exception for all request-level pipeline errors."""

    pass


class AuthError(CityInsightsError):
    """Obtaining a bearer token from the pollution source failed."""

    def __init__(self, message: str, reason: AuthErrorReason) -> None:
        """Initialize auth error.

        Args:
            message: Human-readable error message
            reason: Failure category
        """
        super().__init__(message)
        self.reason = reason


class UpstreamError(CityInsightsError):
    """Fetching pollution data failed for at least one country.

    Attributes:
        reason: Failure category
        detail: Extra context for operators (e.g. authentication hint)
        status_code: Upstream HTTP status, 0 for transport failures, None if unknown
    """

    def __init__(
        self,
        message: str,
        reason: UpstreamErrorReason,
        detail: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.reason = reason
        self.detail = detail
        self.status_code = status_code


class InvalidRequestError(CityInsightsError):
    """Client supplied invalid query parameters."""

    def __init__(self, message: str, reason: InvalidRequestReason) -> None:
        super().__init__(message)
        self.reason = reason
