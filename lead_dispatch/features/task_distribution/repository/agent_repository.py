"""
Read-only access to the agents roster.

Agent CRUD belongs to the roster service; the distribution feature only
needs the ordered list of eligible agents and display fields for joins.
"""

from uuid import UUID

from lead_dispatch.db.helpers import fetch_all, fetch_one
from lead_dispatch.infrastructure.observability.logging import get_logger

from ..domain.models import Agent

logger = get_logger(__name__)

ELIGIBLE_STATUS = "active"


def parse_uuid(value: str) -> UUID | None:
    """Return the UUID for value, or None when value is not a UUID."""
    try:
        return UUID(str(value))
    except (TypeError, ValueError):
        return None


class AgentRosterRepository:
    """Queries against the agents table."""

    AGENT_SELECT_COLUMNS = "id, name, email, mobile, status, created_at"

    @classmethod
    def _row_to_agent(cls, row: dict | None) -> Agent | None:
        if not row:
            return None

        return Agent(
            id=str(row["id"]),
            name=row["name"],
            email=row["email"],
            mobile=row.get("mobile"),
            status=row.get("status") or ELIGIBLE_STATUS,
            created_at=row.get("created_at"),
        )

    @classmethod
    async def fetch_eligible_agents(cls) -> list[Agent]:
        """Active agents in creation order."""

        query = f"""
            SELECT {cls.AGENT_SELECT_COLUMNS}
            FROM agents
            WHERE status = %s
            ORDER BY created_at ASC, id ASC
        """

        rows = await fetch_all(query, (ELIGIBLE_STATUS,))
        agents = [cls._row_to_agent(row) for row in rows]
        logger.debug("Eligible agents loaded", count=len(agents))
        return agents

    @classmethod
    async def get_agent(cls, agent_id: str) -> Agent | None:
        agent_uuid = parse_uuid(agent_id)
        if agent_uuid is None:
            return None

        query = f"SELECT {cls.AGENT_SELECT_COLUMNS} FROM agents WHERE id = %s"
        row = await fetch_one(query, (agent_uuid,))
        return cls._row_to_agent(row)
