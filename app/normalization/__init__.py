"""Normalization layer: raw pollution records to validated city candidates.

- CityNormalizer: validates records and derives lookup names
- derive_lookup_name / parse_pollution_value: the underlying pure functions
- RejectionReason: why a record was dropped
"""

from .models import RejectionReason
from .service import CityNormalizer, derive_lookup_name, is_valid_lookup_name, parse_pollution_value

__all__ = [
    "CityNormalizer",
    "RejectionReason",
    "derive_lookup_name",
    "is_valid_lookup_name",
    "parse_pollution_value",
]
