"""
Record store connection and session management using asyncpg.
"""

import asyncio
import logging
from typing import Optional

import asyncpg
from asyncpg import Pool
from fastapi import Request

from employee_service.config import Settings

logger = logging.getLogger(__name__)


EMPLOYEES_DDL = """
CREATE TABLE IF NOT EXISTS employees (
    id SERIAL PRIMARY KEY,
    name TEXT,
    address TEXT,
    extension TEXT,
    professional_email TEXT,
    department TEXT,
    salary NUMERIC(12, 2)
)
"""


class Database:
    """Async PostgreSQL database connection pool manager."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self._pool: Optional[Pool] = None
        self._lock = asyncio.Lock()

    async def connect(self) -> None:
        """Initialize the connection pool."""
        async with self._lock:
            if self._pool is not None:
                return

            logger.info("Connecting to PostgreSQL...")

            self._pool = await asyncpg.create_pool(
                dsn=self.settings.asyncpg_dsn,
                min_size=self.settings.db_pool_min_size,
                max_size=self.settings.db_pool_max_size,
                command_timeout=self.settings.db_command_timeout,
                server_settings={
                    'application_name': self.settings.app_name,
                }
            )

            logger.info("PostgreSQL connection pool created successfully")

    async def disconnect(self) -> None:
        """Close the connection pool."""
        async with self._lock:
            if self._pool is None:
                return

            logger.info("Closing PostgreSQL connection pool...")
            await self._pool.close()
            self._pool = None
            logger.info("PostgreSQL connection pool closed")

    @property
    def pool(self) -> Pool:
        """Get the connection pool."""
        if self._pool is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self._pool

    async def ensure_schema(self) -> None:
        """Create the employees table if it does not exist yet."""
        await self.execute(EMPLOYEES_DDL)
        logger.info("Employees table is ready")

    async def execute(self, query: str, *args) -> str:
        """Execute a query and return status."""
        async with self.pool.acquire() as conn:
            return await conn.execute(query, *args)

    async def fetchrow(self, query: str, *args) -> Optional[asyncpg.Record]:
        """Fetch a single row from a query."""
        async with self.pool.acquire() as conn:
            return await conn.fetchrow(query, *args)

    async def fetchval(self, query: str, *args):
        """Fetch a single value from a query."""
        async with self.pool.acquire() as conn:
            return await conn.fetchval(query, *args)

    async def health_check(self) -> bool:
        """Check database connectivity."""
        try:
            result = await self.fetchval("SELECT 1")
            return result == 1
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return False


async def get_db(request: Request) -> Database:
    """Dependency injection for database access."""
    return request.app.state.database
