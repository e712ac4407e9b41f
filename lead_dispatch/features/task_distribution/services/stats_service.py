"""Global task statistics, computed from the task table on every call."""

from lead_dispatch.infrastructure.observability.logging import get_logger

from ..domain.models import GlobalStats
from ..repository import TaskRepository

logger = get_logger(__name__)


class StatsAggregator:
    def __init__(self, task_repository=TaskRepository):
        self._tasks = task_repository

    async def global_stats(self) -> GlobalStats:
        """Agent and task totals plus task counts per agent that owns tasks."""

        stats = await self._tasks.global_stats_snapshot()

        logger.debug(
            "Global stats computed",
            total_agents=stats.total_agents,
            total_tasks=stats.total_tasks,
            agents_with_tasks=len(stats.tasks_per_agent),
        )
        return stats
