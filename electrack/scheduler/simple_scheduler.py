"""
Background prefetch of today's prices.
Runs the availability gate once a day so the first request does not wait on the provider.
"""

import asyncio
from datetime import datetime, timedelta, tzinfo
from typing import Optional

from electrack.logging_config import get_logger
from electrack.services.availability import AvailabilityGate

logger = get_logger(__name__)


class PrefetchScheduler:
    """Simple background task scheduler for price prefetching."""

    def __init__(self, gate: AvailabilityGate, hour: int, minute: int, zone: tzinfo):
        self.gate = gate
        self.hour = hour
        self.minute = minute
        self.zone = zone
        self._running = False
        self._task: Optional[asyncio.Task] = None

    async def start(self) -> None:
        """Start the scheduler background task."""
        if self._running:
            logger.warning("Scheduler already running")
            return

        self._running = True
        self._task = asyncio.create_task(self._scheduler_loop())
        logger.info("Scheduler started", fetch_time=f"{self.hour}:{self.minute:02d}")

    async def stop(self) -> None:
        """Stop the scheduler."""
        if not self._running:
            return

        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass

        logger.info("Scheduler stopped")

    async def _scheduler_loop(self) -> None:
        """Main scheduler loop."""
        while self._running:
            now = datetime.now(self.zone)
            sleep_seconds = (self.calculate_next_run(now) - now).total_seconds()

            if sleep_seconds > 0:
                logger.debug("Next price prefetch scheduled", sleep_seconds=sleep_seconds)
                await asyncio.sleep(sleep_seconds)

            if not self._running:
                break

            await self.run_prefetch()

            # Sleep past the scheduled minute to avoid duplicate runs
            await asyncio.sleep(60)

    def calculate_next_run(self, now: datetime) -> datetime:
        """Calculate the next scheduled run time after ``now``."""
        today_run = now.replace(
            hour=self.hour,
            minute=self.minute,
            second=0,
            microsecond=0
        )

        if now >= today_run:
            return today_run + timedelta(days=1)
        return today_run

    async def run_prefetch(self) -> None:
        """Execute the prefetch job; failures are logged, never raised."""
        job_start = datetime.now()
        logger.info("Starting scheduled price prefetch")

        try:
            state = await self.gate.ensure_available()
            duration = (datetime.now() - job_start).total_seconds()
            logger.info("Completed scheduled price prefetch", state=state.value, duration_seconds=duration)

        except Exception as e:
            duration = (datetime.now() - job_start).total_seconds()
            logger.error(
                "Scheduled price prefetch failed",
                error=str(e),
                duration_seconds=duration,
            )

    @property
    def is_running(self) -> bool:
        """Check if scheduler is running."""
        return self._running
