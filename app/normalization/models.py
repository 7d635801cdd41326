"""Data models for the normalization layer."""

from enum import Enum


class RejectionReason(str, Enum):
    """Why a raw city record was dropped before description lookup."""

    MISSING_NAME = "missing_name"
    MISSING_COUNTRY = "missing_country"
    INVALID_POLLUTION = "invalid_pollution"
    INVALID_LOOKUP_NAME = "invalid_lookup_name"
