"""
Test configuration and fixtures for the Electrack tests.
Contains shared fixtures and test utilities.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import List

import pytest
from fastapi.testclient import TestClient

from electrack.config import Settings
from electrack.database.memory import InMemoryPriceStore
from electrack.main import create_app
from electrack.models.price import PricePoint
from electrack.providers.base import StaticPriceProvider

NEW_YEAR = datetime(2024, 1, 1, 0, 0, 0, tzinfo=timezone.utc)


def hourly_points(start: datetime, prices: List[str]) -> List[PricePoint]:
    """
    Build consecutive hourly price points starting at ``start``.
    """
    return [
        PricePoint(moment=start + timedelta(hours=hour), amount=Decimal(price))
        for hour, price in enumerate(prices)
    ]


@pytest.fixture
def fixed_clock():
    """
    Clock pinned to noon on 2024-01-01 UTC.
    """
    return lambda: NEW_YEAR + timedelta(hours=12)


@pytest.fixture
def scenario_points() -> List[PricePoint]:
    """
    Three hours priced 0.30, 0.10, 0.50 from 2024-01-01T00:00:00Z.
    """
    return hourly_points(NEW_YEAR, ["0.30", "0.10", "0.50"])


@pytest.fixture
def memory_store() -> InMemoryPriceStore:
    """
    Create an empty in-memory store knowing the tibber and static providers.
    """
    return InMemoryPriceStore(provider_names=("tibber", "static"))


@pytest.fixture
def static_provider(scenario_points) -> StaticPriceProvider:
    """
    Provider returning the scenario series.
    """
    return StaticPriceProvider(scenario_points)


@pytest.fixture
def test_settings() -> Settings:
    """
    Settings with background prefetch disabled and readable logs.
    """
    return Settings(prefetch_enabled=False, log_format="text", fetch_timeout_seconds=1, persist_timeout_seconds=1)


@pytest.fixture
def test_app(test_settings, memory_store, static_provider, fixed_clock):
    """
    Create a test instance of the FastAPI application.
    """
    return create_app(test_settings, store=memory_store, provider=static_provider, clock=fixed_clock)


@pytest.fixture
def test_client(test_app):
    """
    Create a test client for the FastAPI application with its lifespan running.
    """
    with TestClient(test_app) as client:
        yield client
