"""
In-memory price store used by tests and local development.
"""

import asyncio
from datetime import date, datetime
from typing import Dict, List, Optional, Tuple

from electrack.database.base import PriceStore
from electrack.exceptions import DuplicateError, UnknownProviderError
from electrack.models.price import PricePoint, PriceWindow, Provider
from electrack.services.window_optimizer import cheapest_window


class InMemoryPriceStore(PriceStore):
    """Price store holding points in a dict keyed by (provider id, moment)."""

    def __init__(self, provider_names=("tibber",)):
        self._providers: Dict[str, Provider] = {
            name: Provider(id=index, name=name)
            for index, name in enumerate(provider_names, start=1)
        }
        self._points: Dict[Tuple[int, datetime], PricePoint] = {}
        self._lock = asyncio.Lock()
        self.insert_calls = 0

    def add_provider(self, name: str) -> Provider:
        provider = Provider(id=len(self._providers) + 1, name=name)
        self._providers[name] = provider
        return provider

    async def resolve_provider(self, name: str) -> Provider:
        try:
            return self._providers[name]
        except KeyError:
            raise UnknownProviderError(f"Unknown provider '{name}'") from None

    async def exists_for_date(self, day: date) -> bool:
        return any(point.moment.date() == day for point in self._points.values())

    async def insert_batch(self, points: List[PricePoint], provider_name: str) -> None:
        provider = await self.resolve_provider(provider_name)
        async with self._lock:
            self.insert_calls += 1
            keys = [(provider.id, point.moment) for point in points]
            clashes = [key for key in keys if key in self._points]
            if clashes or len(set(keys)) != len(keys):
                raise DuplicateError(f"Prices for {provider_name} already stored")
            for key, point in zip(keys, points):
                self._points[key] = point

    async def fetch_cheapest_window(
        self,
        range_start: datetime,
        range_end: datetime,
        duration_hours: int,
    ) -> PriceWindow:
        return cheapest_window(self._ordered_points(), range_start, range_end, duration_hours)

    async def fetch_prices_of_date(self, day: date) -> List[PricePoint]:
        return [point for point in self._ordered_points() if point.moment.date() == day]

    async def latest_moment(self) -> Optional[datetime]:
        if not self._points:
            return None
        return max(point.moment for point in self._points.values())

    def _ordered_points(self) -> List[PricePoint]:
        return [self._points[key] for key in sorted(self._points, key=lambda k: (k[1], k[0]))]

    def __len__(self) -> int:
        return len(self._points)
