"""
Tests for price data edge cases including negative prices, currency precision
and time zone projection.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError

from electrack.models.price import PricePoint, PriceWindow, format_average_price
from electrack.utils.time_utils import project_window, resolve_timezone, utc_day_bounds, utc_today

from conftest import NEW_YEAR


class TestPricePoint:
    """Test validation of price points."""

    def test_negative_price_is_allowed(self):
        """Negative prices occur in real markets."""
        point = PricePoint(moment=NEW_YEAR, amount=Decimal("-0.05"))

        assert point.amount == Decimal("-0.05")

    def test_moment_is_normalised_to_utc(self):
        moment = datetime(2024, 6, 15, 0, 0, tzinfo=timezone(timedelta(hours=2)))

        point = PricePoint(moment=moment, amount=Decimal("0.28"))

        assert point.moment == datetime(2024, 6, 14, 22, 0, tzinfo=timezone.utc)
        assert point.moment.utcoffset() == timedelta(0)

    def test_naive_moment_is_rejected(self):
        with pytest.raises(ValidationError):
            PricePoint(moment=datetime(2024, 1, 1), amount=Decimal("0.1"))

    def test_price_point_is_immutable(self):
        point = PricePoint(moment=NEW_YEAR, amount=Decimal("0.1"))

        with pytest.raises(ValidationError):
            point.amount = Decimal("0.2")


class TestAveragePriceFormatting:
    """Test the three-decimal rendering of average prices."""

    @pytest.mark.parametrize("value,expected", [
        (Decimal("0.2"), "0.200"),
        (Decimal("0.1234"), "0.123"),
        (Decimal("0.0005"), "0.001"),
        (Decimal("-0.0005"), "-0.001"),
        (Decimal("1") / Decimal("3"), "0.333"),
        (Decimal("12.3456"), "12.346"),
    ])
    def test_format_average_price(self, value, expected):
        assert format_average_price(value) == expected

    def test_decimal_precision_accuracy(self):
        """Decimal sums avoid the float drift of 0.1 + 0.2."""
        total = Decimal("0.1") + Decimal("0.2")

        assert format_average_price(total / 3) == "0.100"


class TestProjection:
    """Test rendering windows in the caller's time zone."""

    @pytest.fixture
    def window(self):
        return PriceWindow(
            starts_at=NEW_YEAR,
            ends_at=NEW_YEAR + timedelta(hours=1, minutes=59, seconds=59),
            average_price="0.200",
        )

    @pytest.mark.parametrize("zone", [
        timezone(timedelta(hours=2)),
        timezone(timedelta(hours=-5, minutes=-30)),
        timezone(timedelta(hours=14)),
        resolve_timezone("Europe/Copenhagen"),
        resolve_timezone("America/New_York"),
    ])
    def test_round_trip_to_utc(self, window, zone):
        projected = project_window(window, zone)

        assert projected.starts_at.astimezone(timezone.utc) == window.starts_at
        assert projected.ends_at.astimezone(timezone.utc) == window.ends_at
        assert projected.average_price == window.average_price

    def test_offset_of_zone_at_instant(self, window):
        projected = project_window(window, resolve_timezone("Europe/Copenhagen"))

        assert projected.starts_at.isoformat() == "2024-01-01T01:00:00+01:00"

    def test_projection_does_not_mutate(self, window):
        project_window(window, timezone(timedelta(hours=3)))

        assert window.starts_at.utcoffset() == timedelta(0)

    def test_unknown_zone(self):
        with pytest.raises(ValueError, match="Unknown time zone"):
            resolve_timezone("Mars/Olympus_Mons")


class TestDayBounds:
    """Test UTC day helpers."""

    def test_utc_day_bounds(self):
        start, end = utc_day_bounds(NEW_YEAR.date())

        assert start == NEW_YEAR
        assert end == datetime(2024, 1, 1, 23, 59, 59, tzinfo=timezone.utc)

    def test_utc_today_uses_utc_date(self):
        late_evening_west = datetime(2024, 1, 1, 23, 0, tzinfo=timezone(timedelta(hours=-5)))

        assert utc_today(lambda: late_evening_west) == datetime(2024, 1, 2).date()
