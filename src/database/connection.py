"""
Database connection and pool management
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

import asyncpg
from fastapi import Request

from config.settings import (
    DB_HOST,
    DB_PORT,
    DB_USER,
    DB_PASSWORD,
    DB_NAME,
    DB_POOL_MIN_SIZE,
    DB_POOL_MAX_SIZE,
    DB_CONNECT_ATTEMPTS,
    DB_CONNECT_RETRY_DELAY,
)

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS guestbook (
    id          SERIAL PRIMARY KEY,
    name        VARCHAR(100) NOT NULL,
    message     TEXT NOT NULL,
    created_at  TIMESTAMPTZ DEFAULT NOW()
)
"""

PoolFactory = Callable[..., Awaitable[Any]]


class DatabaseUnavailableError(RuntimeError):
    """Raised when the database could not be reached within the retry policy"""


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded retry with a fixed delay between attempts"""
    max_attempts: int = DB_CONNECT_ATTEMPTS
    delay_seconds: float = DB_CONNECT_RETRY_DELAY


@dataclass
class DatabaseInitResult:
    """Outcome of startup: either a ready pool or the last error seen"""
    pool: Optional[Any] = None
    error: Optional[BaseException] = None
    attempts: int = 0

    @property
    def ready(self) -> bool:
        return self.pool is not None


def pool_options() -> dict:
    """Connection options for asyncpg.create_pool"""
    return {
        "host": DB_HOST,
        "port": DB_PORT,
        "user": DB_USER,
        "password": DB_PASSWORD,
        "database": DB_NAME,
        "min_size": DB_POOL_MIN_SIZE,
        "max_size": DB_POOL_MAX_SIZE,
    }


async def _open_pool(pool_factory: PoolFactory):
    """Create a pool and make sure the guestbook table exists"""
    pool = await pool_factory(**pool_options())
    try:
        async with pool.acquire() as conn:
            await conn.execute(SCHEMA_SQL)
    except BaseException:
        await pool.close()
        raise
    return pool


async def init_database(
    policy: Optional[RetryPolicy] = None,
    pool_factory: PoolFactory = asyncpg.create_pool,
) -> DatabaseInitResult:
    """
    Initialize the connection pool and schema, retrying on failure

    Args:
        policy: Retry policy, defaults to the configured attempts and delay
        pool_factory: Coroutine function used to build the pool

    Returns:
        DatabaseInitResult holding the ready pool, or the last error once
        every attempt has failed
    """
    policy = policy or RetryPolicy()
    last_error: Optional[BaseException] = None

    for attempt in range(1, policy.max_attempts + 1):
        try:
            pool = await _open_pool(pool_factory)
        except (OSError, asyncio.TimeoutError, asyncpg.PostgresError, asyncpg.InterfaceError) as e:
            last_error = e
            remaining = policy.max_attempts - attempt
            logger.warning(f"Waiting for database... ({remaining} retries left): {e}")
            if remaining:
                await asyncio.sleep(policy.delay_seconds)
            continue

        logger.info("Database connected and table ready")
        return DatabaseInitResult(pool=pool, attempts=attempt)

    logger.error(f"Failed to connect to database after {policy.max_attempts} attempts")
    return DatabaseInitResult(error=last_error, attempts=policy.max_attempts)


async def close_database(pool) -> None:
    """Close database connection pool"""
    if pool:
        await pool.close()
    logger.info("Database connections closed")


def get_db_pool(request: Request):
    """FastAPI dependency returning the pool created at startup"""
    db_pool = getattr(request.app.state, "db_pool", None)
    if db_pool is None:
        raise RuntimeError("Database pool not initialized")
    return db_pool
