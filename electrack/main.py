"""
Main application entry point for the Electrack service.
Initializes FastAPI app, price store, provider and scheduler, and starts the service.
"""

from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI

from electrack.api.routes import router as api_router
from electrack.config import Settings, settings as default_settings
from electrack.context import build_context
from electrack.database.base import PriceStore
from electrack.database.service import PostgresPriceStore
from electrack.logging_config import get_logger, setup_logging
from electrack.providers.base import ElectricityPriceProvider
from electrack.providers.factory import resolve_provider
from electrack.utils.time_utils import Clock

logger = get_logger(__name__)


def create_app(
    settings: Settings = None,
    store: Optional[PriceStore] = None,
    provider: Optional[ElectricityPriceProvider] = None,
    clock: Optional[Clock] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Store and provider are built from the settings unless given.
    """
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan manager for startup and shutdown procedures.
        """
        # Startup
        setup_logging(settings.log_level, settings.log_format)
        logger.info("Starting electrack")

        app_store = store
        if app_store is None:
            app_store = PostgresPriceStore(settings.database_url)
            await app_store.init_database()

        app_provider = provider or resolve_provider(
            settings.electricity_price_provider_dsn,
            timeout=settings.fetch_timeout_seconds,
        )

        # Fails startup when the provider is not known to the store
        await app_store.resolve_provider(app_provider.name)

        context = build_context(settings, app_store, app_provider, clock)
        app.state.context = context
        if context.scheduler:
            await context.scheduler.start()

        yield

        # Shutdown
        if context.scheduler:
            await context.scheduler.stop()
        await app_store.close()
        logger.info("Shutting down electrack")

    app = FastAPI(
        title="Electrack",
        description="Cheapest electricity time slots for a range of durations",
        version="1.0.0",
        docs_url="/docs" if settings.api_debug else None,
        redoc_url="/redoc" if settings.api_debug else None,
        lifespan=lifespan,
    )

    app.include_router(api_router)

    return app


if __name__ == "__main__":
    uvicorn.run(
        "electrack.main:create_app",
        factory=True,
        host=default_settings.api_host,
        port=default_settings.api_port,
        reload=default_settings.api_reload,
        log_level=default_settings.log_level.lower(),
    )
