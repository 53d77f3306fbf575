"""
Cheapest window selection over an hourly price series.

Candidate windows are built per UTC calendar day: a window starts at each
point and spans the following points of the same day only. Windows near the
end of a day are shorter than requested and still take part in the ranking.
"""

from datetime import date, datetime
from decimal import Decimal
from itertools import groupby
from typing import Iterable, List, Optional

from electrack.exceptions import NotFoundError
from electrack.models.price import PricePoint, PriceWindow, format_average_price
from electrack.utils.time_utils import end_of_hour

MAX_LOOKAHEAD_HOURS = 23


def lookahead_for(duration_hours: int) -> int:
    """
    Number of points following the first one for a duration.

    A 1-hour window has no following points; the lookahead is clamped to a full day.
    """
    return min(max(duration_hours - 1, 0), MAX_LOOKAHEAD_HOURS)


def select_range(points: Iterable[PricePoint], range_start: datetime, range_end: datetime) -> List[PricePoint]:
    """Points with a moment in ``[range_start, range_end]``, ordered by moment."""
    return sorted(
        (p for p in points if range_start <= p.moment <= range_end),
        key=lambda p: p.moment,
    )


def partition_by_day(points: List[PricePoint]) -> List[List[PricePoint]]:
    """Group moment-ordered points by their UTC calendar date."""
    return [list(day_points) for _, day_points in groupby(points, key=_utc_date)]


def _utc_date(point: PricePoint) -> date:
    return point.moment.date()


def cheapest_window(
    points: Iterable[PricePoint],
    range_start: datetime,
    range_end: datetime,
    duration_hours: int,
) -> PriceWindow:
    """
    Find the window with the lowest mean price for one duration.

    Ties go to the earliest start.

    Raises:
        NotFoundError: If no point falls inside the range
    """
    selected = select_range(points, range_start, range_end)
    if not selected:
        raise NotFoundError(
            f"No prices between {range_start.isoformat()} and {range_end.isoformat()}"
        )

    lookahead = lookahead_for(duration_hours)
    best: Optional[List[PricePoint]] = None
    best_mean: Optional[Decimal] = None

    for day in partition_by_day(selected):
        for index in range(len(day)):
            candidate = day[index:index + lookahead + 1]
            mean = sum((p.amount for p in candidate), Decimal(0)) / len(candidate)
            if best_mean is None or mean < best_mean:
                best, best_mean = candidate, mean

    return PriceWindow(
        starts_at=best[0].moment,
        ends_at=end_of_hour(best[-1].moment),
        average_price=format_average_price(best_mean),
    )
