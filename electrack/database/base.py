"""
Price store contract shared by the PostgreSQL store and the in-memory store.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import List, Optional

from electrack.models.price import PricePoint, PriceWindow, Provider


class PriceStore(ABC):
    """Durable, ordered storage of hourly price points tagged by provider."""

    @abstractmethod
    async def exists_for_date(self, day: date) -> bool:
        """True if at least one price point falls on ``day`` (UTC day boundary)."""
        ...

    @abstractmethod
    async def insert_batch(self, points: List[PricePoint], provider_name: str) -> None:
        """
        Persist all points tagged with the named provider, or none of them.

        Raises:
            UnknownProviderError: If ``provider_name`` is not a stored provider
            DuplicateError: If a (provider, moment) pair already exists
            PersistError: If the write fails for any other reason
        """
        ...

    @abstractmethod
    async def fetch_cheapest_window(
        self,
        range_start: datetime,
        range_end: datetime,
        duration_hours: int,
    ) -> PriceWindow:
        """
        Cheapest window of ``duration_hours`` within ``[range_start, range_end]``.

        Raises:
            NotFoundError: If the range holds no price points
        """
        ...

    @abstractmethod
    async def resolve_provider(self, name: str) -> Provider:
        """
        Raises:
            UnknownProviderError: If no provider has this name
        """
        ...

    @abstractmethod
    async def fetch_prices_of_date(self, day: date) -> List[PricePoint]:
        """Price points of a UTC calendar day ordered by moment."""
        ...

    @abstractmethod
    async def latest_moment(self) -> Optional[datetime]:
        """Most recent stored moment, if any."""
        ...

    async def health_check(self) -> bool:
        """Check store health."""
        return True

    async def close(self) -> None:
        """Release resources held by the store."""
        return None
