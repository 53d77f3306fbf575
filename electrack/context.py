"""
Application context handed to every route handler.
Built once at startup and not mutated afterwards.
"""

from dataclasses import dataclass
from typing import Optional

from electrack.config import Settings
from electrack.database.base import PriceStore
from electrack.providers.base import ElectricityPriceProvider
from electrack.scheduler.simple_scheduler import PrefetchScheduler
from electrack.services.availability import AvailabilityGate, DayFills
from electrack.services.time_slots import TimeSlotService
from electrack.utils.time_utils import Clock, resolve_timezone


@dataclass(frozen=True)
class AppContext:
    """Store, provider and the services wired on top of them."""
    store: PriceStore
    provider: ElectricityPriceProvider
    gate: AvailabilityGate
    time_slots: TimeSlotService
    scheduler: Optional[PrefetchScheduler] = None
    clock: Optional[Clock] = None


def build_context(
    settings: Settings,
    store: PriceStore,
    provider: ElectricityPriceProvider,
    clock: Optional[Clock] = None,
) -> AppContext:
    """Wire the services for a store and provider."""
    gate = AvailabilityGate(
        store,
        provider,
        clock=clock,
        fills=DayFills(),
        fetch_timeout=settings.fetch_timeout_seconds,
        persist_timeout=settings.persist_timeout_seconds,
    )

    scheduler = None
    if settings.prefetch_enabled:
        scheduler = PrefetchScheduler(
            gate,
            hour=settings.prefetch_hour,
            minute=settings.prefetch_minute,
            zone=resolve_timezone(settings.prefetch_timezone),
        )

    return AppContext(
        store=store,
        provider=provider,
        gate=gate,
        time_slots=TimeSlotService(store, gate),
        scheduler=scheduler,
        clock=clock,
    )
