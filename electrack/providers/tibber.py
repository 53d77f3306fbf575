"""
Tibber price provider.
Fetches today's hourly prices from the Tibber GraphQL API.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

import httpx
from pydantic import BaseModel, Field, ValidationError

from electrack.exceptions import FetchError
from electrack.logging_config import get_logger
from electrack.models.price import PricePoint
from electrack.providers.base import ElectricityPriceProvider

logger = get_logger(__name__)

TIBBER_API_URL = "https://api.tibber.com/v1-beta/gql"

TODAY_PRICES_QUERY = (
    "{ viewer { homes { currentSubscription { priceInfo { today { total startsAt } }}}}}"
)


class TibberPricePoint(BaseModel):
    total: Decimal
    starts_at: datetime = Field(alias="startsAt")


class TibberPriceInfo(BaseModel):
    today: List[TibberPricePoint]


class TibberSubscription(BaseModel):
    price_info: TibberPriceInfo = Field(alias="priceInfo")


class TibberHome(BaseModel):
    current_subscription: Optional[TibberSubscription] = Field(default=None, alias="currentSubscription")


class TibberViewer(BaseModel):
    homes: List[TibberHome]


class TibberData(BaseModel):
    viewer: TibberViewer


class TibberResponse(BaseModel):
    data: Optional[TibberData] = None
    errors: Optional[List[dict]] = None


def parse_prices_json(body: str) -> List[PricePoint]:
    """
    Parse a Tibber GraphQL response into price points.

    Only the first home's subscription is used.

    Raises:
        FetchError: If the payload is not a usable price response
    """
    try:
        response = TibberResponse.model_validate_json(body)
    except ValidationError as e:
        raise FetchError(f"Unparsable Tibber response: {e}") from e

    if response.errors:
        messages = ", ".join(str(error.get("message", error)) for error in response.errors)
        raise FetchError(f"Tibber returned errors: {messages}")

    if response.data is None or not response.data.viewer.homes:
        raise FetchError("Tibber response contains no homes")

    subscription = response.data.viewer.homes[0].current_subscription
    if subscription is None:
        raise FetchError("Tibber home has no current subscription")

    try:
        return [
            PricePoint(moment=price.starts_at, amount=price.total)
            for price in subscription.price_info.today
        ]
    except ValidationError as e:
        raise FetchError(f"Invalid Tibber price: {e}") from e


class TibberProvider(ElectricityPriceProvider):
    """Price provider backed by the Tibber API."""

    name = "tibber"

    def __init__(self, api_key: str, url: str = TIBBER_API_URL, timeout: float = 30):
        self.api_key = api_key
        self.url = url
        self.timeout = timeout

    async def fetch_daily_prices(self) -> List[PricePoint]:
        """Fetch today's prices from Tibber."""
        logger.info("Fetching prices from tibber")
        body = await self._post_query()
        prices = parse_prices_json(body)
        logger.info("Fetched prices from tibber", count=len(prices))
        return prices

    async def _post_query(self) -> str:
        """Send the GraphQL query and return the raw body."""
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.url,
                    json={"query": TODAY_PRICES_QUERY},
                    headers={"Authorization": self.api_key},
                )
                response.raise_for_status()
                return response.text
        except httpx.HTTPError as e:
            raise FetchError(f"HTTP error: {e}") from e
