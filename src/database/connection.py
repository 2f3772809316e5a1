"""
Database connection and pool management
"""

import json
import asyncpg
import logging

from config.settings import DATABASE_URL, DB_POOL_MIN_SIZE, DB_POOL_MAX_SIZE

logger = logging.getLogger(__name__)


async def _init_connection(conn: asyncpg.Connection):
    """Decode JSONB columns to Python objects"""
    await conn.set_type_codec(
        "jsonb",
        encoder=json.dumps,
        decoder=json.loads,
        schema="pg_catalog"
    )


async def init_database(dsn: str = DATABASE_URL) -> asyncpg.Pool:
    """Create and verify the database connection pool"""
    db_pool = await asyncpg.create_pool(
        dsn,
        min_size=DB_POOL_MIN_SIZE,
        max_size=DB_POOL_MAX_SIZE,
        command_timeout=60,
        statement_cache_size=0,  # pgbouncer compatibility
        init=_init_connection
    )

    # Test connection
    async with db_pool.acquire() as conn:
        await conn.fetchval("SELECT 1")

    logger.info("Database initialized successfully")
    return db_pool


async def close_database(db_pool: asyncpg.Pool):
    """Close database connection pool"""
    if db_pool:
        await db_pool.close()
    logger.info("Database connections closed")
