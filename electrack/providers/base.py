"""Abstract base class for electricity price providers."""

from abc import ABC, abstractmethod
from typing import List

from electrack.models.price import PricePoint


class ElectricityPriceProvider(ABC):
    """External source of one calendar day's hourly prices."""

    name: str = ""

    @abstractmethod
    async def fetch_daily_prices(self) -> List[PricePoint]:
        """
        Fetch today's hourly prices from the provider's perspective.

        Returns:
            Price points ordered by moment, moments in UTC.

        Raises:
            FetchError: If the provider is unreachable or its data is unusable
        """
        ...


class StaticPriceProvider(ElectricityPriceProvider):
    """Provider returning a fixed series, for tests and local development."""

    def __init__(self, points: List[PricePoint], name: str = "static"):
        self.name = name
        self.points = list(points)
        self.fetch_count = 0

    async def fetch_daily_prices(self) -> List[PricePoint]:
        self.fetch_count += 1
        return list(self.points)
