"""
Completion tracking for distributed tasks.

A task is PENDING until marked complete and COMPLETED from then on; there is
no way back. Per-agent rollups are computed from the current task rows.
"""

from collections.abc import Iterable

from lead_dispatch.infrastructure.observability.logging import get_logger

from ..domain.errors import NotFoundError
from ..domain.models import AgentOverview, CompletionStats, Task, TaskWithAgent
from ..repository import AgentRosterRepository, TaskRepository

logger = get_logger(__name__)


def completion_percentage(completed: int, total: int) -> int:
    """100 * completed / total rounded half up; 0 for an empty set."""
    if total <= 0:
        return 0
    # Integer form of floor(100 * completed / total + 0.5)
    return (200 * completed + total) // (2 * total)


def compute_completion_stats(tasks: Iterable[Task]) -> CompletionStats:
    total = 0
    completed = 0
    for task in tasks:
        total += 1
        if task.completed:
            completed += 1

    return CompletionStats(
        total_tasks=total,
        completed_tasks=completed,
        completion_percentage=completion_percentage(completed, total),
    )


class CompletionTracker:
    """Tracks distributed tasks: listing, completion, per-agent progress and clearing."""

    def __init__(self, task_repository=TaskRepository, agent_repository=AgentRosterRepository):
        self._tasks = task_repository
        self._agents = agent_repository

    async def list_tasks(self) -> list[TaskWithAgent]:
        return await self._tasks.find_all()

    async def clear_all(self) -> int:
        """Delete every task unconditionally; returns the number removed."""
        return await self._tasks.delete_all()

    async def mark_completed(self, task_id: str) -> Task:
        """
        Complete a task. Completing an already completed task changes nothing.

        Raises:
            NotFoundError: unknown task id
        """
        return await self._tasks.mark_completed(task_id)

    async def agent_overview(self, agent_id: str) -> AgentOverview:
        """
        Tasks of one agent (newest first) with completion stats.

        Raises:
            NotFoundError: unknown agent id
        """
        agent = await self._agents.get_agent(agent_id)
        if agent is None:
            raise NotFoundError("Agent not found")

        tasks = await self._tasks.find_by_agent(agent.id)
        stats = compute_completion_stats(tasks)

        logger.debug(
            "Agent overview computed",
            agent_id=agent.id,
            total_tasks=stats.total_tasks,
            completed_tasks=stats.completed_tasks,
        )
        return AgentOverview(agent=agent, tasks=tasks, stats=stats)
