"""Core domain models for pollution readings, cities, and descriptions.

This module defines the data structures used throughout the application:
- CountryCode: closed set of countries the pollution source knows about
- AuthToken: bearer credential for the pollution source
- RawCityRecord: upstream entry before validation
- PollutionPage: aggregated fetch result across countries
- NormalizedCity: validated candidate awaiting description lookup
- CityDescription: description/title pair returned by Wikipedia
- EnrichedCity / CitiesResponse: final response shape
"""

import re
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CountryCode(str, Enum):
    """Countries supported by the pollution source."""

    PL = "PL"
    DE = "DE"
    ES = "ES"
    FR = "FR"

    @classmethod
    def is_supported(cls, code: str) -> bool:
        """Check whether a (case-sensitive) code belongs to the enumeration."""
        return code in cls._value2member_map_


class AuthToken(BaseModel):
    """Bearer token plus its absolute expiry (epoch seconds)."""

    value: str = Field(..., min_length=1, description="Bearer token")
    expires_at: float = Field(..., description="Absolute expiry as epoch seconds")

    def is_valid(self, now: float, buffer_seconds: float) -> bool:
        """True if the token outlives now + buffer_seconds."""
        return self.expires_at > now + buffer_seconds


class RawCityRecord(BaseModel):
    """City entry as delivered by the pollution source.

    Every field is optional and loosely typed on purpose: malformed entries
    must reach the normalizer so they can be dropped with a logged reason.
    Unknown upstream fields are preserved.
    """

    name: Optional[Any] = None
    country: Optional[Any] = None
    pollution: Optional[Any] = None

    model_config = ConfigDict(extra="allow")


class PollutionPage(BaseModel):
    """Aggregated pollution readings for one (country set, page, limit) query."""

    cities: List[RawCityRecord] = Field(default_factory=list)
    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1)
    total: int = Field(0, ge=0, description="Sum of totalPages * limit over queried countries")


class NormalizedCity(BaseModel):
    """Validated city candidate.

    lookup_name is derived from original_name by the normalizer and is used
    for Wikipedia queries; original_name is what the client sees.
    """

    original_name: str = Field(..., min_length=1)
    lookup_name: str = Field(..., min_length=2)
    country: str = Field(..., min_length=1)
    pollution_value: float = Field(..., ge=0)

    @field_validator("lookup_name")
    @classmethod
    def reject_numeric_lookup_name(cls, v: str) -> str:
        """Lookup names made only of digits are never city names."""
        if re.fullmatch(r"[0-9]+", v):
            raise ValueError("lookup_name cannot be purely numeric")
        return v


class CityDescription(BaseModel):
    """Short description and page title fetched from Wikipedia."""

    description: str
    title: str


class EnrichedCity(BaseModel):
    """City that passed description resolution."""

    name: str
    country: str
    pollution: float
    description: str

    model_config = {"json_schema_extra": {"example": {
        "name": "Warsaw",
        "country": "PL",
        "pollution": 42.5,
        "description": "Warsaw is the capital and largest city of Poland.",
    }}}


class CitiesResponse(BaseModel):
    """Body returned by GET /cities."""

    page: int
    limit: int
    total: int
    cities: List[EnrichedCity] = Field(default_factory=list)
