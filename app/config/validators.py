"""Additional validation utilities for configuration."""

import warnings
from typing import Any, Dict, List

from .duration import DurationParseError, parse_duration


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Check configuration for potential issues and return warnings.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        List of warning messages
    """
    warning_messages = []

    cache = config_dict.get("cache", {})
    if isinstance(cache, dict):
        pollution_ttl = _safe_seconds(cache.get("pollution_ttl", "10m"))
        description_ttl = _safe_seconds(cache.get("description_ttl", "1h"))

        if pollution_ttl is not None and pollution_ttl < 60:
            warning_messages.append(
                f"Short cache.pollution_ttl ({cache.get('pollution_ttl')}) may trigger upstream rate limits"
            )

        if (
            pollution_ttl is not None
            and description_ttl is not None
            and description_ttl < pollution_ttl
        ):
            warning_messages.append(
                "cache.description_ttl is shorter than cache.pollution_ttl; "
                "descriptions will be re-fetched more often than pollution data"
            )

    auth = config_dict.get("auth", {})
    if isinstance(auth, dict):
        buffer_seconds = auth.get("refresh_buffer_seconds", 60)
        if isinstance(buffer_seconds, int) and buffer_seconds == 0:
            warning_messages.append(
                "auth.refresh_buffer_seconds is 0; tokens may expire while a request is in flight"
            )

    advanced = config_dict.get("advanced", {})
    if isinstance(advanced, dict):
        max_workers = advanced.get("max_workers", 8)
        if isinstance(max_workers, int) and max_workers > 32:
            warning_messages.append(
                f"Large advanced.max_workers ({max_workers}) may trigger Wikipedia rate limits"
            )

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """
    Emit warning messages using Python's warnings module.

    Args:
        warning_messages: List of warning messages to emit
    """
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)


def _safe_seconds(value: Any):
    """Parse a duration, returning None when it is invalid (validation reports it later)."""
    if not isinstance(value, str):
        return None
    try:
        return parse_duration(value)
    except DurationParseError:
        return None
