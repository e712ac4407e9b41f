"""Precondition check on the agents roster before a distribution runs."""

from lead_dispatch.config import settings
from lead_dispatch.infrastructure.observability.logging import get_logger

from ..domain.errors import RosterSizeError
from ..domain.models import Agent
from ..repository import AgentRosterRepository

logger = get_logger(__name__)


class RosterGate:
    """Loads the eligible roster and insists on the configured size."""

    def __init__(self, agent_repository=AgentRosterRepository, required_size: int | None = None):
        self._agents = agent_repository
        self.required_size = required_size if required_size is not None else settings.ROSTER_SIZE
        if self.required_size <= 0:
            raise ValueError("required_size must be positive")

    async def require_roster(self) -> list[Agent]:
        """
        Return the eligible agents in roster order.

        Raises:
            RosterSizeError: the roster does not hold exactly required_size agents
        """
        agents = await self._agents.fetch_eligible_agents()
        if len(agents) != self.required_size:
            logger.warning(
                "Roster size check failed",
                actual=len(agents),
                required=self.required_size,
            )
            raise RosterSizeError(actual=len(agents), required=self.required_size)

        return agents
