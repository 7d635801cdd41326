"""Data models for per-request pipeline tracking and reporting."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class PipelineRunStats:
    """
    Statistics for a single GET /cities pipeline execution.

    Attributes:
        request_id: Identifier shared by every log line of the request
        country: Requested country code, None for all configured countries
        page: Requested page
        limit: Requested page size
        run_started_at: UTC timestamp when the run began
        run_finished_at: UTC timestamp when the run completed
        pollution_cache_hit: Whether the pollution page came from the cache
        fetched_count: Raw records in the pollution page
        normalized_count: Records that survived normalization
        enriched_count: Candidates with an accepted description
        failed_count: Candidates dropped by an unexpected resolution error
        duration_seconds: Wall time for the run
    """

    request_id: str
    country: Optional[str]
    page: int
    limit: int
    run_started_at: datetime
    run_finished_at: Optional[datetime] = None
    pollution_cache_hit: bool = False
    fetched_count: int = 0
    normalized_count: int = 0
    enriched_count: int = 0
    failed_count: int = 0
    duration_seconds: float = 0.0

    @property
    def dropped_count(self) -> int:
        """Records removed by normalization or description resolution."""
        return self.fetched_count - self.enriched_count

    def finish(self, finished_at: datetime) -> None:
        """Stamp the finish time and compute the duration."""
        self.run_finished_at = finished_at
        self.duration_seconds = (finished_at - self.run_started_at).total_seconds()
