"""
Health check module for Docker health checks and monitoring.
Verifies database connectivity and that the prices table exists.
"""

import asyncio
import sys

from electrack.database.service import PostgresPriceStore
from electrack.logging_config import get_logger, setup_logging

logger = get_logger(__name__)


async def health_check(store: PostgresPriceStore = None) -> bool:
    """
    Perform a health check of the price store.
    """
    store = store or PostgresPriceStore()
    try:
        return await store.health_check()
    finally:
        await store.close()


async def main():
    """
    Main health check entry point for command line usage.
    """
    setup_logging()
    is_healthy = await health_check()

    if is_healthy:
        logger.info("Health check passed")
        sys.exit(0)
    else:
        logger.error("Health check failed")
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
