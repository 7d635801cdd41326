"""Environment variable loading and validation."""

import os
from typing import Optional

from .exceptions import ENVIRONMENT_SOURCE, ConfigurationError

DEFAULT_POLLUTION_API_BASE_URL = "https://be-recruitment-task.onrender.com"


class EnvironmentConfig:
    """Environment variable configuration holder."""

    def __init__(
        self,
        pollution_api_username: str,
        pollution_api_password: str,
        pollution_api_base_url: Optional[str] = None,
        log_level: Optional[str] = None,
        port: int = 3000,
    ):
        """Initialize environment configuration."""
        self.pollution_api_username = pollution_api_username
        self.pollution_api_password = pollution_api_password
        self.pollution_api_base_url = (
            pollution_api_base_url or DEFAULT_POLLUTION_API_BASE_URL
        ).rstrip("/")
        self.log_level = log_level
        self.port = port


def load_environment_config() -> EnvironmentConfig:
    """
    Load and validate environment variables.

    Required environment variables:
    - POLLUTION_API_USERNAME: Login for the pollution source
    - POLLUTION_API_PASSWORD: Password for the pollution source

    Optional environment variables:
    - POLLUTION_API_BASE_URL: Base URL of the pollution source
    - LOG_LEVEL: Override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - PORT: HTTP port for the API (default: 3000)

    Returns:
        EnvironmentConfig object with validated values

    Raises:
        ConfigurationError: If required variables are missing or invalid
    """
    errors = []

    username = os.getenv("POLLUTION_API_USERNAME")
    password = os.getenv("POLLUTION_API_PASSWORD")
    base_url = os.getenv("POLLUTION_API_BASE_URL")
    log_level = os.getenv("LOG_LEVEL")
    port_str = os.getenv("PORT")

    if not username:
        errors.append("Missing required environment variable: POLLUTION_API_USERNAME")

    if not password:
        errors.append("Missing required environment variable: POLLUTION_API_PASSWORD")

    if base_url and not base_url.startswith(("http://", "https://")):
        errors.append(
            f"Invalid POLLUTION_API_BASE_URL: '{base_url}'. Must start with http:// or https://"
        )

    port = 3000
    if port_str:
        try:
            port = int(port_str)
            if port < 1 or port > 65535:
                errors.append(f"Invalid PORT: {port}. Must be between 1 and 65535.")
        except ValueError:
            errors.append(f"Invalid PORT: '{port_str}'. Must be a valid integer.")

    if log_level:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if log_level.upper() not in valid_levels:
            errors.append(
                f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(valid_levels)}"
            )

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Copy .env.example to .env and fill in your credentials",
                "Ensure POLLUTION_API_USERNAME and POLLUTION_API_PASSWORD are set",
                "Verify PORT is a number between 1 and 65535",
            ],
            source=ENVIRONMENT_SOURCE,
        )

    return EnvironmentConfig(
        pollution_api_username=username,
        pollution_api_password=password,
        pollution_api_base_url=base_url,
        log_level=log_level.upper() if log_level else None,
        port=port,
    )
