"""Scheduling module for the periodic cache clear."""

from .service import CACHE_CLEAR_JOB_ID, CacheClearScheduler

__all__ = [
    "CACHE_CLEAR_JOB_ID",
    "CacheClearScheduler",
]
