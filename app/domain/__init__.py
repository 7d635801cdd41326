"""Domain models and request-level exceptions."""

from .exceptions import (
    AuthError,
    AuthErrorReason,
    CityInsightsError,
    InvalidRequestError,
    InvalidRequestReason,
    UpstreamError,
    UpstreamErrorReason,
)
from .models import (
    AuthToken,
    CitiesResponse,
    CityDescription,
    CountryCode,
    EnrichedCity,
    NormalizedCity,
    PollutionPage,
    RawCityRecord,
)

__all__ = [
    # Models
    "AuthToken",
    "CitiesResponse",
    "CityDescription",
    "CountryCode",
    "EnrichedCity",
    "NormalizedCity",
    "PollutionPage",
    "RawCityRecord",
    # Exceptions
    "AuthError",
    "AuthErrorReason",
    "CityInsightsError",
    "InvalidRequestError",
    "InvalidRequestReason",
    "UpstreamError",
    "UpstreamErrorReason",
]
