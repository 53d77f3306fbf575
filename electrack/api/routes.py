"""
FastAPI route handlers for the main API endpoints.
Implements the time slot lookup and the health check.
"""

from datetime import datetime, timedelta, timezone
from typing import List, Optional

from fastapi import APIRouter, Query, Request
from fastapi.responses import PlainTextResponse

from electrack.exceptions import PriceAPIException
from electrack.logging_config import get_logger
from electrack.models.price import HealthResponse, PriceWindow
from electrack.utils.time_utils import utc_day_bounds, utc_today

logger = get_logger(__name__)

router = APIRouter()


def parse_durations(durations: str) -> List[int]:
    """Split a comma separated duration list; items that are not integers are ignored."""
    parsed = []
    for item in durations.split(","):
        try:
            parsed.append(int(item.strip()))
        except ValueError:
            continue
    return parsed


def _as_aware(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


@router.get("/time-slots", response_model=List[PriceWindow])
async def get_time_slots(
    request: Request,
    durations: str = Query(
        default="",
        description="Comma separated window durations in whole hours"
    ),
    moment_start: Optional[datetime] = Query(
        default=None,
        description="Start of the search range (RFC 3339). Defaults to today 00:00:00 UTC."
    ),
    moment_end: Optional[datetime] = Query(
        default=None,
        description="End of the search range (RFC 3339). Defaults to today 23:59:59 UTC."
    ),
):
    """
    Find the cheapest time slot for every requested duration.

    Every duration results in one window, expressed in the time zone of
    ``moment_start``. Any failure fails the whole request with a 500 and a
    plain-text error body.
    """
    context = request.app.state.context
    default_start, default_end = utc_day_bounds(utc_today(context.clock))
    moment_start = _as_aware(moment_start) if moment_start else default_start
    moment_end = _as_aware(moment_end) if moment_end else default_end

    try:
        return await context.time_slots.find_time_slots(
            parse_durations(durations),
            moment_start,
            moment_end,
        )

    except PriceAPIException as e:
        logger.error("Price API error", error=str(e), durations=durations)
        return PlainTextResponse(str(e), status_code=500)
    except Exception as e:
        logger.error("Unexpected error", error=str(e), durations=durations)
        return PlainTextResponse("Internal server error", status_code=500)


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request):
    """
    Health check endpoint for monitoring and load balancers.
    Returns health status with the latest stored price moment to monitor data freshness.
    """
    context = request.app.state.context
    now = datetime.now(timezone.utc)

    try:
        healthy = await context.store.health_check()
        latest = await context.store.latest_moment()

        data_status = "unknown"
        if latest is not None:
            # Moments are hour starts; stored data covering the current day is fresh
            if latest >= now:
                data_status = "fresh"
            elif now - latest <= timedelta(hours=25):
                data_status = "acceptable"
            else:
                data_status = "stale"

        return HealthResponse(
            status="healthy" if healthy else "unhealthy",
            timestamp=now,
            details={
                "service": "electrack",
                "latest_moment": latest.isoformat() if latest else None,
                "data_status": data_status,
            },
        )

    except Exception as e:
        logger.error("Health check failed", error=str(e))
        return HealthResponse(
            status="unhealthy",
            timestamp=now,
            details={"service": "electrack", "error": str(e)},
        )
