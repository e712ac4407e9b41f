"""
Table definitions for the agents roster and distributed tasks.

The agents table is owned by the roster service; it is declared here so a
fresh database can be bootstrapped for local development and tests.
"""

from lead_dispatch.db.helpers import execute_transaction
from lead_dispatch.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

SCHEMA_STATEMENTS: list[str] = [
    """
    CREATE TABLE IF NOT EXISTS agents (
        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
        name TEXT NOT NULL,
        email TEXT NOT NULL UNIQUE,
        mobile TEXT NOT NULL UNIQUE,
        status TEXT NOT NULL DEFAULT 'active',
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS tasks (
        id UUID PRIMARY KEY,
        distribution_id UUID NOT NULL,
        position INTEGER NOT NULL,
        first_name TEXT NOT NULL CHECK (first_name <> ''),
        phone TEXT NOT NULL CHECK (phone <> ''),
        notes TEXT NOT NULL DEFAULT '',
        assigned_to UUID NOT NULL REFERENCES agents(id),
        assigned_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        completed BOOLEAN NOT NULL DEFAULT FALSE,
        completed_at TIMESTAMPTZ,
        CONSTRAINT tasks_completed_at_iff_completed
            CHECK (completed = (completed_at IS NOT NULL))
    )
    """,
    "CREATE INDEX IF NOT EXISTS tasks_assigned_to_idx ON tasks (assigned_to, assigned_at DESC)",
    "CREATE INDEX IF NOT EXISTS tasks_distribution_idx ON tasks (distribution_id, position)",
]


async def ensure_schema() -> None:
    """Create the tables if they do not exist yet."""
    await execute_transaction([(statement, ()) for statement in SCHEMA_STATEMENTS])
    logger.info("Database schema ensured", statements=len(SCHEMA_STATEMENTS))
