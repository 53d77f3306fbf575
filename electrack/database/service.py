"""
Price store using PostgreSQL with asyncpg.
Handles all database operations and migrations in one place.
"""

from datetime import date, datetime, timedelta
from typing import List, Optional

import asyncpg

from electrack.config import settings
from electrack.database.base import PriceStore
from electrack.exceptions import (
    DuplicateError,
    NotFoundError,
    PersistError,
    UnknownProviderError,
)
from electrack.logging_config import get_logger
from electrack.models.price import PricePoint, PriceWindow, Provider, format_average_price
from electrack.services.window_optimizer import lookahead_for
from electrack.utils.time_utils import utc_day_bounds

logger = get_logger(__name__)

CURRENT_SCHEMA_VERSION = 1

DEFAULT_PROVIDERS = ("tibber",)

# Frames never cross a UTC day and may be shorter than requested at the end of a day.
CHEAPEST_WINDOW_QUERY = """
    SELECT starts_at, ends_at, average
    FROM (
        SELECT moment AS starts_at,
               (MAX(moment) OVER price_window) + INTERVAL '59 minutes 59 seconds' AS ends_at,
               AVG(amount) OVER price_window AS average
        FROM prices
        WHERE moment >= $1 AND moment <= $2
        WINDOW price_window AS (
            PARTITION BY (moment AT TIME ZONE 'UTC')::date
            ORDER BY moment
            ROWS BETWEEN CURRENT ROW AND $3 FOLLOWING
        )
    ) AS candidates
    ORDER BY average ASC, starts_at ASC
    LIMIT 1
"""


class PostgresPriceStore(PriceStore):
    """Price store backed by PostgreSQL."""

    def __init__(self, database_url: str = None):
        self.database_url = database_url or settings.database_url
        self._pool = None

    async def _get_pool(self) -> asyncpg.Pool:
        """Get or create connection pool."""
        if self._pool is None or self._pool.is_closing():
            self._pool = await asyncpg.create_pool(
                self.database_url,
                min_size=2,
                max_size=10,
                command_timeout=60,
                server_settings={"timezone": "UTC"},
            )
        return self._pool

    async def close(self) -> None:
        """Close database connection pool."""
        if self._pool and not self._pool.is_closing():
            await self._pool.close()

    async def init_database(self) -> None:
        """Initialize database with tables, indexes and the known providers."""
        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                current_version = await self._get_schema_version(conn)

                if current_version == 0:
                    async with conn.transaction():
                        await self._create_initial_schema(conn)
                        await self._set_schema_version(conn, CURRENT_SCHEMA_VERSION)
                    logger.info("Database initialized with schema version", version=CURRENT_SCHEMA_VERSION)

        except (asyncpg.PostgresError, OSError) as e:
            logger.error("Failed to initialize database", error=str(e))
            raise PersistError(f"Database initialization failed: {e}") from e

    async def _get_schema_version(self, conn: asyncpg.Connection) -> int:
        """Get current database schema version."""
        try:
            result = await conn.fetchval(
                "SELECT version FROM schema_version ORDER BY version DESC LIMIT 1"
            )
            return result if result else 0
        except asyncpg.UndefinedTableError:
            # Table doesn't exist, this is a new database
            return 0

    async def _set_schema_version(self, conn: asyncpg.Connection, version: int) -> None:
        """Set database schema version."""
        await conn.execute(
            "INSERT INTO schema_version (version, applied_at) VALUES ($1, now())",
            version,
        )

    async def _create_initial_schema(self, conn: asyncpg.Connection) -> None:
        """Create initial database schema."""
        await conn.execute("""
            CREATE TABLE schema_version (
                version INTEGER PRIMARY KEY,
                applied_at TIMESTAMPTZ NOT NULL DEFAULT now()
            )
        """)

        await conn.execute("""
            CREATE TABLE providers (
                id BIGSERIAL PRIMARY KEY,
                name VARCHAR NOT NULL UNIQUE
            )
        """)

        await conn.execute("""
            CREATE TABLE prices (
                moment TIMESTAMPTZ NOT NULL,
                amount NUMERIC(12,6) NOT NULL,
                provider_id BIGINT NOT NULL REFERENCES providers (id),
                UNIQUE (provider_id, moment)
            )
        """)

        await conn.execute(
            "CREATE INDEX idx_prices_moment ON prices(moment)"
        )

        await conn.executemany(
            "INSERT INTO providers (name) VALUES ($1)",
            [(name,) for name in DEFAULT_PROVIDERS],
        )

        logger.info("Initial database schema created")

    async def resolve_provider(self, name: str) -> Provider:
        """Look up a provider by name."""
        pool = await self._get_pool()
        async with pool.acquire() as conn:
            return await self._resolve_provider(conn, name)

    async def _resolve_provider(self, conn: asyncpg.Connection, name: str) -> Provider:
        row = await conn.fetchrow(
            "SELECT id, name FROM providers WHERE name = $1 LIMIT 1", name
        )
        if row is None:
            raise UnknownProviderError(f"Unknown provider '{name}'")
        return Provider(id=row["id"], name=row["name"])

    async def exists_for_date(self, day: date) -> bool:
        """Check whether any price point falls on the given UTC date."""
        start, _ = utc_day_bounds(day)
        pool = await self._get_pool()
        async with pool.acquire() as conn:
            return await conn.fetchval(
                "SELECT EXISTS (SELECT 1 FROM prices WHERE moment >= $1 AND moment < $2)",
                start,
                start + timedelta(days=1),
            )

    async def insert_batch(self, points: List[PricePoint], provider_name: str) -> None:
        """Insert a provider's price points in a single transaction."""
        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                async with conn.transaction():
                    provider = await self._resolve_provider(conn, provider_name)
                    await conn.executemany(
                        "INSERT INTO prices (moment, amount, provider_id) VALUES ($1, $2, $3)",
                        [(point.moment, point.amount, provider.id) for point in points],
                    )

            logger.info("Persisted prices", count=len(points), provider=provider_name)

        except UnknownProviderError:
            raise
        except asyncpg.UniqueViolationError as e:
            logger.error("Duplicate prices rejected", provider=provider_name, error=str(e))
            raise DuplicateError(f"Prices for {provider_name} already stored: {e}") from e
        except (asyncpg.PostgresError, OSError) as e:
            logger.error("Failed to persist prices", provider=provider_name, error=str(e))
            raise PersistError(f"The prices could not be persisted: {e}") from e

    async def fetch_cheapest_window(
        self,
        range_start: datetime,
        range_end: datetime,
        duration_hours: int,
    ) -> PriceWindow:
        """Select the cheapest window with a day-partitioned SQL window frame."""
        pool = await self._get_pool()
        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                CHEAPEST_WINDOW_QUERY,
                range_start,
                range_end,
                lookahead_for(duration_hours),
            )

        if row is None:
            raise NotFoundError(
                f"No prices between {range_start.isoformat()} and {range_end.isoformat()}"
            )

        logger.debug("Found cheapest window", duration=duration_hours, starts_at=row["starts_at"].isoformat())
        return PriceWindow(
            starts_at=row["starts_at"],
            ends_at=row["ends_at"],
            average_price=format_average_price(row["average"]),
        )

    async def fetch_prices_of_date(self, day: date) -> List[PricePoint]:
        """Get the price points of a UTC calendar date."""
        start, _ = utc_day_bounds(day)
        pool = await self._get_pool()
        async with pool.acquire() as conn:
            rows = await conn.fetch("""
                SELECT moment, amount
                FROM prices
                WHERE moment >= $1 AND moment < $2
                ORDER BY moment ASC
            """, start, start + timedelta(days=1))

        return [PricePoint(moment=row["moment"], amount=row["amount"]) for row in rows]

    async def latest_moment(self) -> Optional[datetime]:
        """Get the most recent stored moment."""
        pool = await self._get_pool()
        async with pool.acquire() as conn:
            return await conn.fetchval("SELECT MAX(moment) FROM prices")

    async def health_check(self) -> bool:
        """Check database health."""
        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                result = await conn.fetchval(
                    "SELECT COUNT(*) FROM information_schema.tables WHERE table_name = 'prices'"
                )

                if result != 1:
                    logger.error("Prices table not found")
                    return False

            return True

        except (asyncpg.PostgresError, OSError) as e:
            logger.error("Database health check failed", error=str(e))
            return False
