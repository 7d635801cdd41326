"""Periodic full cache clear driven by APScheduler."""

from datetime import datetime, timedelta, timezone
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from app.cache import TTLCache
from app.logging import get_logger

logger = get_logger(__name__, component="scheduler")

CACHE_CLEAR_JOB_ID = "cache-clear"


class CacheClearScheduler:
    """
    Clears the shared cache store at a fixed interval.

    Uses BackgroundScheduler so the HTTP server keeps the main thread.
    The first clear happens one interval after start, never at startup.
    """

    def __init__(self, cache: TTLCache, interval_seconds: int):
        """
        Initialize the scheduler.

        Args:
            cache: Cache store to clear
            interval_seconds: Interval between clears in seconds
        """
        self.cache = cache
        self.interval_seconds = interval_seconds

        self.scheduler = BackgroundScheduler(
            job_defaults={
                "max_instances": 1,
                "coalesce": True,
                "misfire_grace_time": interval_seconds,
            },
            timezone=timezone.utc,
        )

    def start(self) -> None:
        """Register the clear job and start the background thread."""
        trigger = IntervalTrigger(seconds=self.interval_seconds, timezone=timezone.utc)

        next_run = datetime.now(timezone.utc) + timedelta(seconds=self.interval_seconds)
        self.scheduler.add_job(
            func=self.clear_now,
            trigger=trigger,
            id=CACHE_CLEAR_JOB_ID,
            name="Cache clear",
            replace_existing=True,
            next_run_time=next_run,
        )
        self.scheduler.start()

        logger.info(
            f"Cache clear scheduled every {self.interval_seconds} seconds",
            extra={
                "event": "scheduler.started",
                "interval_seconds": self.interval_seconds,
                "next_run_time": self.get_next_run_time().isoformat(),
            },
        )

    def shutdown(self, wait: bool = False) -> None:
        """
        Shutdown the scheduler.

        Args:
            wait: If True, wait for a running clear to complete before returning
        """
        logger.info(
            "Shutting down scheduler",
            extra={"event": "scheduler.stopping", "wait_for_jobs": wait},
        )
        if self.is_running():
            self.scheduler.shutdown(wait=wait)
        logger.info("Scheduler shutdown complete", extra={"event": "scheduler.stopped"})

    def clear_now(self) -> int:
        """Clear the cache in the current thread and return the number of entries removed."""
        removed = self.cache.clear()
        logger.info(
            "Cache cleared",
            extra={"event": "cache.cleared", "cache": self.cache.name, "removed": removed},
        )
        return removed

    def is_running(self) -> bool:
        return self.scheduler.running

    def get_next_run_time(self) -> Optional[datetime]:
        """Next scheduled clear, or None if not scheduled."""
        job = self.scheduler.get_job(CACHE_CLEAR_JOB_ID)
        return job.next_run_time if job else None
