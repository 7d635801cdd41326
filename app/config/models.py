"""Configuration schema models using Pydantic."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from app.domain.models import CountryCode

from .duration import DurationParseError, parse_duration, validate_duration_range


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class AuthConfig(BaseModel):
    """Bearer token caching policy for the pollution source."""

    refresh_buffer_seconds: int = Field(
        60, ge=0, le=3600, description="Refresh this many seconds before the token expires"
    )
    min_token_ttl_seconds: int = Field(
        10, ge=1, le=3600, description="Cache TTL used when expiry minus buffer is not positive"
    )


class PaginationConfig(BaseModel):
    """Defaults applied when the client omits page/limit."""

    default_page: int = Field(1, ge=1)
    default_limit: int = Field(10, ge=1, le=1000)


class CacheConfig(BaseModel):
    """Cache lifetimes, as human-readable or ISO-8601 durations."""

    pollution_ttl: str = Field("10m", description="Lifetime of aggregated pollution pages")
    description_ttl: str = Field("1h", description="Lifetime of accepted descriptions")
    clear_interval: str = Field("30m", description="Interval of the periodic full cache clear")

    # Computed fields
    pollution_ttl_seconds: Optional[int] = None
    description_ttl_seconds: Optional[int] = None
    clear_interval_seconds: Optional[int] = None

    @field_validator("pollution_ttl", "description_ttl", "clear_interval")
    @classmethod
    def validate_duration(cls, v: str) -> str:
        """Validate that the duration parses."""
        try:
            parse_duration(v)
            return v
        except DurationParseError as e:
            raise ValueError(str(e)) from e

    @model_validator(mode="after")
    def compute_seconds(self):
        """Compute second values for every duration field."""
        self.pollution_ttl_seconds = parse_duration(self.pollution_ttl)
        self.description_ttl_seconds = parse_duration(self.description_ttl)
        self.clear_interval_seconds = parse_duration(self.clear_interval)
        try:
            validate_duration_range(
                self.clear_interval_seconds,
                min_seconds=60,
                max_seconds=86400,
                label="Cache clear interval",
            )
        except DurationParseError as e:
            raise ValueError(str(e)) from e
        return self


class WikipediaConfig(BaseModel):
    """Wikipedia lookup settings."""

    api_url: str = Field(
        "https://en.wikipedia.org/w/api.php", min_length=1, description="MediaWiki action API endpoint"
    )
    max_description_length: int = Field(
        250, ge=20, le=2000, description="Descriptions longer than this are truncated"
    )

    @field_validator("api_url")
    @classmethod
    def strip_api_url(cls, v: str) -> str:
        """Strip whitespace from the API URL."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("api_url cannot be empty")
        return stripped


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True}


class AdvancedConfig(BaseModel):
    """Advanced runtime settings."""

    http_request_timeout: int = Field(
        30, ge=5, le=300, description="Request timeout for upstream API calls (seconds)"
    )
    user_agent: str = Field(
        "UrbanAirQualityInsightsAPI/1.0 (contact@example.com) Python",
        min_length=1,
        description="User-Agent string for HTTP requests",
    )
    max_workers: int = Field(
        8, ge=1, le=64, description="Thread pool size for concurrent upstream calls"
    )

    @field_validator("user_agent")
    @classmethod
    def strip_user_agent(cls, v: str) -> str:
        """Strip whitespace from user agent."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("user_agent cannot be empty")
        return stripped


class AppConfig(BaseModel):
    """Root configuration object for Urban Air Quality Insights."""

    countries: List[CountryCode] = Field(
        default_factory=lambda: [country.value for country in CountryCode],
        min_length=1,
        description="Countries queried when the client does not name one",
    )
    auth: AuthConfig = Field(default_factory=AuthConfig)
    pagination: PaginationConfig = Field(default_factory=PaginationConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    wikipedia: WikipediaConfig = Field(default_factory=WikipediaConfig)
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    advanced: AdvancedConfig = Field(
        default_factory=AdvancedConfig, description="Advanced runtime settings"
    )

    model_config = {"use_enum_values": True}

    @field_validator("countries", mode="before")
    @classmethod
    def uppercase_countries(cls, v):
        """Accept lowercase country codes in YAML."""
        if isinstance(v, list):
            return [c.strip().upper() if isinstance(c, str) else c for c in v]
        return v

    @model_validator(mode="after")
    def validate_countries(self):
        """Reject duplicate country codes."""
        seen = set()
        for country in self.countries:
            if country in seen:
                raise ValueError(f"Duplicate country: {country} appears multiple times")
            seen.add(country)
        return self
