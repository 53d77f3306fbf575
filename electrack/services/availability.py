"""
Availability gate: make sure today's prices are stored before windows are selected.

Cache-aside over the price store. On a miss the provider is asked for today's
prices once and the batch is written back. Check, fetch and persist are not
atomic; a ``DayFills`` registry keeps one fill task per day within one process
and a duplicate batch from a concurrent fill is accepted once the day is present.
"""

import asyncio
from datetime import date
from enum import Enum
from typing import Awaitable, Callable, Dict, Optional, Tuple

from electrack.database.base import PriceStore
from electrack.exceptions import DuplicateError, FetchError, PersistError
from electrack.logging_config import get_logger
from electrack.providers.base import ElectricityPriceProvider
from electrack.utils.time_utils import Clock, utc_today

logger = get_logger(__name__)


class GateState(str, Enum):
    """Outcome of an availability check."""
    READY = "READY"
    FILLED = "FILLED"


class DayFills:
    """
    Per-date registry of in-flight fill tasks.

    A task stays registered until it finishes, whoever is awaiting it, so a
    cancelled caller does not let a second fill of the same day start.
    """

    def __init__(self):
        self._fills: Dict[date, asyncio.Task] = {}

    def for_day(self, day: date, start: Callable[[], Awaitable[GateState]]) -> Tuple[asyncio.Task, bool]:
        """
        Return the running fill of ``day``, starting one if there is none.

        Returns:
            The fill task and whether this call started it
        """
        task = self._fills.get(day)
        if task is not None:
            return task, False

        task = asyncio.ensure_future(start())
        self._fills[day] = task
        task.add_done_callback(lambda _: self._fills.pop(day, None))
        return task, True

    def __len__(self) -> int:
        return len(self._fills)


def _log_fill_failure(day: date, task: asyncio.Task) -> None:
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        logger.error("Price fill failed", day=day.isoformat(), error=str(error))


class AvailabilityGate:
    """Ensures the store holds a day's prices, fetching them at most once per gap."""

    def __init__(
        self,
        store: PriceStore,
        provider: ElectricityPriceProvider,
        clock: Optional[Clock] = None,
        fills: Optional[DayFills] = None,
        fetch_timeout: float = 30,
        persist_timeout: float = 30,
    ):
        self.store = store
        self.provider = provider
        self.clock = clock
        self.fills = fills
        self.fetch_timeout = fetch_timeout
        self.persist_timeout = persist_timeout

    async def ensure_available(self, day: Optional[date] = None) -> GateState:
        """
        Make sure prices for ``day`` (default: today in UTC) are stored.

        Returns:
            READY when the prices were already present or stored by another
            request, FILLED when this call stored them

        Raises:
            FetchError: If the provider failed; nothing was written
            PersistError: If the fetched prices could not be stored
        """
        day = day or utc_today(self.clock)

        if await self.store.exists_for_date(day):
            return GateState.READY

        if self.fills is None:
            return await asyncio.shield(self._start_fill(day, self._fill(day)))

        fill, started = self.fills.for_day(day, lambda: self._start_fill(day, self._recheck_and_fill(day)))
        # A disconnecting caller must not abort a batch half way.
        state = await asyncio.shield(fill)
        return state if started else GateState.READY

    def _start_fill(self, day: date, fill: Awaitable[GateState]) -> asyncio.Task:
        task = asyncio.ensure_future(fill)
        task.add_done_callback(lambda t: _log_fill_failure(day, t))
        return task

    async def _recheck_and_fill(self, day: date) -> GateState:
        # A fill that finished after our existence check may have stored the day.
        if await self.store.exists_for_date(day):
            return GateState.READY
        return await self._fill(day)

    async def _fill(self, day: date) -> GateState:
        logger.info("Prices not yet fetched", day=day.isoformat(), provider=self.provider.name)

        try:
            points = await asyncio.wait_for(self.provider.fetch_daily_prices(), self.fetch_timeout)
        except asyncio.TimeoutError as e:
            raise FetchError(f"Fetching prices from {self.provider.name} timed out") from e

        if not points:
            raise FetchError(f"{self.provider.name} returned no prices")

        logger.info("Fetched prices", count=len(points), provider=self.provider.name)

        try:
            await asyncio.wait_for(
                self.store.insert_batch(points, self.provider.name),
                self.persist_timeout,
            )
        except asyncio.TimeoutError as e:
            raise PersistError(f"Persisting prices of {self.provider.name} timed out") from e
        except DuplicateError:
            if await self.store.exists_for_date(day):
                logger.warning("Prices already stored by a concurrent fill", day=day.isoformat())
                return GateState.READY
            raise

        return GateState.FILLED
