"""Configuration management module for Urban Air Quality Insights."""

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .loader import build_app_config, load_config
from .models import (
    AdvancedConfig,
    AppConfig,
    AuthConfig,
    CacheConfig,
    LogFormat,
    LogLevel,
    LoggingConfig,
    PaginationConfig,
    WikipediaConfig,
)

__all__ = [
    # Main loader functions
    "load_config",
    "build_app_config",
    "load_environment_config",
    # Configuration models
    "AppConfig",
    "AuthConfig",
    "PaginationConfig",
    "CacheConfig",
    "WikipediaConfig",
    "LoggingConfig",
    "AdvancedConfig",
    "EnvironmentConfig",
    # Enums
    "LogLevel",
    "LogFormat",
    # Exceptions
    "ConfigurationError",
]
