"""
Pydantic data models for price data and API responses.
Defines the structure for price points, windows and response formats.
"""

from datetime import datetime, timezone, tzinfo
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

AVERAGE_PRICE_QUANTUM = Decimal("0.001")


def format_average_price(value: Decimal) -> str:
    """Render an average price with exactly three fractional digits."""
    return str(Decimal(value).quantize(AVERAGE_PRICE_QUANTUM, rounding=ROUND_HALF_UP))


class PricePoint(BaseModel):
    """
    One hour's electricity price.

    The moment is the start of the hour and is always held in UTC.
    """
    moment: datetime = Field(description="Start of the hour this price applies to (UTC)")
    amount: Decimal = Field(description="Price for the hour - can be negative in some markets")

    class Config:
        frozen = True

    @field_validator("moment")
    @classmethod
    def _moment_in_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None or value.utcoffset() is None:
            raise ValueError("moment must be timezone-aware")
        return value.astimezone(timezone.utc)


class Provider(BaseModel):
    """
    Source of a batch of price points.
    """
    id: int
    name: str


class PriceWindow(BaseModel):
    """
    Cheapest contiguous run of hours for one requested duration.

    ``ends_at`` is the last second of the last included hour.
    """
    starts_at: datetime = Field(description="Start of the first hour in the window")
    ends_at: datetime = Field(description="End of the last hour in the window (inclusive)")
    average_price: str = Field(description="Mean price of the window, three decimals")

    def with_timezone(self, zone: tzinfo) -> "PriceWindow":
        """Return the same window with its instants expressed in ``zone``."""
        return PriceWindow(
            starts_at=self.starts_at.astimezone(zone),
            ends_at=self.ends_at.astimezone(zone),
            average_price=self.average_price,
        )


class HealthResponse(BaseModel):
    """
    Health check response model.
    """
    status: str = Field(description="Health status")
    timestamp: datetime = Field(description="Health check timestamp")
    details: Optional[dict] = Field(default=None, description="Additional health details")
