"""Timestamp utilities.

Token expiry is tracked as epoch seconds (what the login endpoint's
expiresIn is relative to); request bookkeeping uses aware UTC datetimes.
"""

import time
from datetime import datetime, timezone


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime.

    Example:
        >>> utc_now().tzinfo == timezone.utc
        True
    """
    return datetime.now(timezone.utc)


def epoch_now() -> float:
    """Current wall-clock time in seconds since the epoch."""
    return time.time()
