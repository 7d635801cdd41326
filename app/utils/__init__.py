"""Utility functions for text shortening, time handling, and thread pools."""

from .concurrency import submit_with_context
from .text import first_sentence, shorten_extract, truncate_at_word
from .timestamps import epoch_now, utc_now

__all__ = [
    # Concurrency
    "submit_with_context",
    # Text
    "first_sentence",
    "shorten_extract",
    "truncate_at_word",
    # Timestamps
    "epoch_now",
    "utc_now",
]
