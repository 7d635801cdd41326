"""City normalization: validate raw pollution records and derive lookup names.

This module implements the normalization logic that:
1. Rejects records without a usable name, country or pollution value
2. Derives a lookup name for Wikipedia queries from the original name
3. Rejects lookup names that cannot be a city (empty, numeric, one character)
4. Returns NormalizedCity candidates; rejected records are logged and dropped
"""

import logging
import math
import re
from typing import Any, Iterable, List, Optional

from app.domain.models import NormalizedCity, RawCityRecord
from app.logging import get_logger

from .models import RejectionReason

logger = get_logger(__name__, component="normalization")

# Greedy on purpose: "A (x) B (y)" loses everything from the first "(" to the last ")"
_PARENTHESIZED = re.compile(r"\s*\(.+\)\s*")
_WHITESPACE = re.compile(r"\s+")
_DIGITS_ONLY = re.compile(r"^[0-9]+$")
_LEADING_NUMBER = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def derive_lookup_name(name: str) -> str:
    """Derive the Wikipedia lookup name from an original city name.

    Steps:
    1. Remove parenthesized text with its surrounding whitespace
    2. Collapse whitespace runs (tabs, newlines, NBSP) into single spaces
    3. Title-case every space-separated word (diacritics and hyphens kept)

    Example:
        >>> derive_lookup_name("wArSAW (Capital)")
        'Warsaw'
        >>> derive_lookup_name("  bielsko-BIAŁA  ")
        'Bielsko-biała'
    """
    lookup = _WHITESPACE.sub(" ", _PARENTHESIZED.sub("", name)).strip()
    return " ".join(word[:1].upper() + word[1:].lower() for word in lookup.split(" "))


def is_valid_lookup_name(lookup_name: str) -> bool:
    """Lookup names must be non-empty, not all digits, and longer than one character."""
    return bool(lookup_name) and not _DIGITS_ONLY.match(lookup_name) and len(lookup_name) > 1


def parse_pollution_value(value: Any) -> Optional[float]:
    """Parse a pollution reading into a finite, non-negative float.

    Strings are read by their leading number, so "42.5 ug/m3" gives 42.5.
    Booleans, non-numeric strings, negatives, NaN and infinities give None.
    """
    if isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        match = _LEADING_NUMBER.match(value)
        if not match:
            return None
        number = float(match.group(1))
    else:
        return None

    if not math.isfinite(number) or number < 0:
        return None
    return number


class CityNormalizer:
    """Normalizes RawCityRecord entries into NormalizedCity candidates.

    normalize() never raises; None means "drop this record" and the reason
    is logged.
    """

    def __init__(self, logger_instance: Optional[logging.Logger] = None):
        """Initialize CityNormalizer.

        Args:
            logger_instance: Logger instance (defaults to module logger)
        """
        self.logger = logger_instance or logger

    def normalize(self, raw: RawCityRecord) -> Optional[NormalizedCity]:
        """Validate a raw record and derive its lookup name.

        Args:
            raw: Record from the pollution aggregator

        Returns:
            NormalizedCity, or None if the record is unusable
        """
        name = raw.name
        if not isinstance(name, str) or not name.strip():
            return self._reject(raw, RejectionReason.MISSING_NAME)

        country = raw.country
        if not isinstance(country, str) or not country.strip():
            return self._reject(raw, RejectionReason.MISSING_COUNTRY)

        pollution_value = parse_pollution_value(raw.pollution)
        if pollution_value is None:
            return self._reject(raw, RejectionReason.INVALID_POLLUTION)

        original_name = name.strip()
        lookup_name = derive_lookup_name(original_name)

        # Single-character names (e.g. "A") are rejected as well
        if not is_valid_lookup_name(lookup_name):
            return self._reject(raw, RejectionReason.INVALID_LOOKUP_NAME, lookup_name=lookup_name)

        return NormalizedCity(
            original_name=original_name,
            lookup_name=lookup_name,
            country=country.strip(),
            pollution_value=pollution_value,
        )

    def normalize_batch(self, records: Iterable[RawCityRecord]) -> List[NormalizedCity]:
        """Normalize many records, keeping input order and dropping rejects."""
        candidates = []
        for raw in records:
            city = self.normalize(raw)
            if city is not None:
                candidates.append(city)
        return candidates

    def _reject(self, raw: RawCityRecord, reason: RejectionReason, **fields) -> None:
        self.logger.warning(
            f"Filtered out corrupted or incomplete entry during initial validation: "
            f"{raw.model_dump_json()}",
            extra={
                "event": "normalization.city.rejected",
                "reason": reason.value,
                **fields,
            },
        )
        return None
