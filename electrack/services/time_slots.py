"""
Time slot service - the cheapest window lookup behind the HTTP surface.
"""

from datetime import datetime, timezone
from typing import List

from electrack.database.base import PriceStore
from electrack.logging_config import get_logger
from electrack.models.price import PriceWindow
from electrack.services.availability import AvailabilityGate
from electrack.utils.time_utils import project_window

logger = get_logger(__name__)


class TimeSlotService:
    """Runs the availability gate, then selects one window per duration."""

    def __init__(self, store: PriceStore, gate: AvailabilityGate):
        self.store = store
        self.gate = gate

    async def find_time_slots(
        self,
        durations: List[int],
        moment_start: datetime,
        moment_end: datetime,
    ) -> List[PriceWindow]:
        """
        Cheapest window for every duration, rendered in the zone of ``moment_start``.

        The first failing duration fails the whole lookup; no partial results
        are returned.
        """
        await self.gate.ensure_available()

        range_start = moment_start.astimezone(timezone.utc)
        range_end = moment_end.astimezone(timezone.utc)
        zone = moment_start.tzinfo or timezone.utc

        windows = []
        for duration in durations:
            window = await self.store.fetch_cheapest_window(range_start, range_end, duration)
            windows.append(project_window(window, zone))

        logger.debug("Found time slots", durations=durations, count=len(windows))
        return windows
