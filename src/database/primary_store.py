"""
Primary store adapter - one JSONB document table per lookup entity, keyed by id.
The primary store is the authoritative copy of every lookup record.
"""

import re
import logging
from typing import Any, Dict, List, Optional

import asyncpg

from config.lookups import SOFT_DELETE_FIELD
from utils.errors import NotFoundError

logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _quote_table(table: str) -> str:
    """Table names come from configuration; only plain identifiers are accepted"""
    if not _IDENTIFIER.match(table):
        raise ValueError(f"Invalid table name: {table}")
    return f'"{table}"'


def build_scan_sql(table: str, filters: Dict[str, Any], exclude_deleted: bool):
    """Build an equality-filtered scan statement and its arguments"""
    clauses = []
    args: List[Any] = []
    for field_name, value in filters.items():
        if not _IDENTIFIER.match(field_name):
            raise ValueError(f"Invalid filter field: {field_name}")
        args.append(str(value))
        clauses.append(f"data->>'{field_name}' = ${len(args)}")

    if exclude_deleted:
        clauses.append(f"COALESCE((data->>'{SOFT_DELETE_FIELD}')::boolean, false) = false")

    sql = f"SELECT data FROM {_quote_table(table)}"
    if clauses:
        sql += " WHERE " + " AND ".join(clauses)
    return sql, args


class PrimaryStore:
    """Per-key durable CRUD over PostgreSQL"""

    def __init__(self, db_pool: asyncpg.Pool):
        self.db_pool = db_pool

    async def get(self, table: str, record_id: str) -> Optional[Dict[str, Any]]:
        """Get a record by id, None when absent"""
        async with self.db_pool.acquire() as conn:
            return await conn.fetchval(
                f"SELECT data FROM {_quote_table(table)} WHERE id = $1",
                record_id
            )

    async def scan(
        self,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        exclude_deleted: bool = False
    ) -> List[Dict[str, Any]]:
        """
        Scan a table with equality filters

        Args:
            table: Table name
            filters: {field_name: value} equality conditions, AND-ed
            exclude_deleted: Skip soft-deleted records

        Returns:
            All matching records
        """
        sql, args = build_scan_sql(table, filters or {}, exclude_deleted)
        async with self.db_pool.acquire() as conn:
            rows = await conn.fetch(sql, *args)
        return [row["data"] for row in rows]

    async def create(self, table: str, record: Dict[str, Any]) -> Dict[str, Any]:
        async with self.db_pool.acquire() as conn:
            return await conn.fetchval(
                f"INSERT INTO {_quote_table(table)} (id, data) VALUES ($1, $2::jsonb) RETURNING data",
                record["id"], record
            )

    async def update(self, table: str, record: Dict[str, Any], patch: Dict[str, Any]) -> Dict[str, Any]:
        """Merge ``patch`` into the stored record and return the result"""
        async with self.db_pool.acquire() as conn:
            updated = await conn.fetchval(
                f"UPDATE {_quote_table(table)} SET data = data || $2::jsonb WHERE id = $1 RETURNING data",
                record["id"], patch
            )
        if updated is None:
            raise NotFoundError(f"Record {record['id']} not found in {table}")
        return updated

    async def delete(self, table: str, record: Dict[str, Any]) -> None:
        async with self.db_pool.acquire() as conn:
            status = await conn.execute(
                f"DELETE FROM {_quote_table(table)} WHERE id = $1",
                record["id"]
            )
        if status.endswith(" 0"):
            raise NotFoundError(f"Record {record['id']} not found in {table}")

    async def ping(self) -> None:
        async with self.db_pool.acquire() as conn:
            await conn.fetchval("SELECT 1")

    async def ensure_table(self, table: str) -> None:
        async with self.db_pool.acquire() as conn:
            await conn.execute(
                f"CREATE TABLE IF NOT EXISTS {_quote_table(table)} (id TEXT PRIMARY KEY, data JSONB NOT NULL)"
            )
        logger.info(f"Table {table} is ready")

    async def drop_table(self, table: str) -> None:
        async with self.db_pool.acquire() as conn:
            await conn.execute(f"DROP TABLE IF EXISTS {_quote_table(table)}")
        logger.info(f"Table {table} dropped")
