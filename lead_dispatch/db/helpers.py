# lead_dispatch/db/helpers.py
"""
Query helpers over the shared connection pool.

Repositories call these instead of handling connections and cursors
themselves. Every psycopg failure surfaces as DatabaseError tagged with the
helper that raised it.
"""

from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from typing import Any

import psycopg

from lead_dispatch.db.pool import get_db_connection, get_db_transaction
from lead_dispatch.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class DatabaseError(Exception):
    """A query or transaction failed at the driver level."""

    def __init__(self, message: str, operation: str = "unknown", recoverable: bool = True):
        super().__init__(message)
        self.operation = operation
        self.recoverable = recoverable


@asynccontextmanager
async def _cursor(operation: str, query: str) -> AsyncIterator[psycopg.AsyncCursor]:
    try:
        async with await get_db_connection() as conn:
            async with conn.cursor() as cur:
                yield cur
    except psycopg.Error as e:
        logger.error("Database query failed", operation=operation, query=query[:100], error=str(e))
        raise DatabaseError(f"Query failed: {e}", operation=operation) from e


async def fetch_one(query: str, params: tuple = ()) -> dict[str, Any] | None:
    """First row of the result as a dict, or None."""
    async with _cursor("fetch_one", query) as cur:
        await cur.execute(query, params)
        return await cur.fetchone()


async def fetch_all(query: str, params: tuple = ()) -> list[dict[str, Any]]:
    async with _cursor("fetch_all", query) as cur:
        await cur.execute(query, params)
        return await cur.fetchall()


async def fetch_val(query: str, params: tuple = ()) -> Any:
    """First column of the first row, e.g. for COUNT(*)."""
    async with _cursor("fetch_val", query) as cur:
        await cur.execute(query, params)
        row = await cur.fetchone()
    if not row:
        return None
    return next(iter(row.values()))


async def execute_query(query: str, params: tuple = ()) -> int:
    """Run a write statement and return the affected row count."""
    async with _cursor("execute", query) as cur:
        await cur.execute(query, params)
        return cur.rowcount


async def execute_transaction(queries_and_params: list[tuple]) -> bool:
    """
    Execute several statements in one transaction.

    Args:
        queries_and_params: List of (query, params) tuples

    Example:
        await execute_transaction([
            ("DELETE FROM tasks WHERE assigned_to = %s", (agent_id,)),
            ("UPDATE agents SET status = 'inactive' WHERE id = %s", (agent_id,)),
        ])
    """
    try:
        async with await get_db_transaction() as conn:
            for query, params in queries_and_params:
                await conn.execute(query, params)
    except psycopg.Error as e:
        logger.error("Transaction failed", query_count=len(queries_and_params), error=str(e))
        raise DatabaseError(f"Transaction failed: {e}", operation="transaction") from e

    logger.debug("Transaction committed", query_count=len(queries_and_params))
    return True


async def execute_many_in_transaction(query: str, params_seq: Sequence[tuple]) -> int:
    """
    Run one parameterised statement for every params tuple inside a single
    transaction. Either every row is written or none is.

    Returns:
        Number of parameter sets written
    """
    if not params_seq:
        return 0

    try:
        async with await get_db_transaction() as conn:
            async with conn.cursor() as cur:
                await cur.executemany(query, params_seq)
    except psycopg.Error as e:
        logger.error("Batch write failed", batch_size=len(params_seq), error=str(e))
        raise DatabaseError(
            f"Batch write failed: {e}", operation="execute_many", recoverable=False
        ) from e

    logger.debug("Batch write committed", batch_size=len(params_seq))
    return len(params_seq)
