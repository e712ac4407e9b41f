"""
Persistence layer for distributed tasks.

The bulk insert is the only multi-row write and runs as one transaction;
completion is a single conditional UPDATE so completed_at is stamped once.
"""

from collections.abc import Sequence
from datetime import UTC, datetime
from uuid import uuid4

from lead_dispatch.db.helpers import (
    DatabaseError,
    execute_many_in_transaction,
    execute_query,
    fetch_all,
    fetch_one,
    fetch_val,
)
from lead_dispatch.infrastructure.observability.logging import get_logger

from ..domain.errors import NotFoundError, PersistenceError
from ..domain.models import (
    AgentTaskCount,
    Assignment,
    GlobalStats,
    Task,
    TaskState,
    TaskWithAgent,
)
from .agent_repository import parse_uuid

logger = get_logger(__name__)


class TaskRepository:
    """Queries against the tasks table."""

    TASK_SELECT_COLUMNS = """
        t.id, t.distribution_id, t.position, t.first_name, t.phone, t.notes,
        t.assigned_to, t.assigned_at, t.completed, t.completed_at
    """

    @classmethod
    def _row_to_task(cls, row: dict) -> Task:
        completed = bool(row["completed"])
        return Task(
            id=str(row["id"]),
            distribution_id=str(row["distribution_id"]),
            position=row["position"],
            first_name=row["first_name"],
            phone=row["phone"],
            notes=row.get("notes") or "",
            assigned_to=str(row["assigned_to"]),
            assigned_at=row["assigned_at"],
            state=TaskState.COMPLETED if completed else TaskState.PENDING,
            completed_at=row.get("completed_at") if completed else None,
        )

    @classmethod
    async def bulk_insert(
        cls, assignments: Sequence[Assignment], distribution_id: str
    ) -> list[Task]:
        """
        Persist one task per assignment in a single transaction.

        Raises:
            PersistenceError: the batch failed; no task from it is visible
        """
        assigned_at = datetime.now(UTC)
        tasks = [
            Task(
                id=str(uuid4()),
                distribution_id=distribution_id,
                position=assignment.position,
                first_name=assignment.lead.first_name,
                phone=assignment.lead.phone,
                notes=assignment.lead.notes,
                assigned_to=assignment.agent_id,
                assigned_at=assigned_at,
            )
            for assignment in assignments
        ]

        if not tasks:
            return []

        insert_query = """
            INSERT INTO tasks (
                id, distribution_id, position, first_name, phone, notes,
                assigned_to, assigned_at, completed, completed_at
            )
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s, FALSE, NULL)
        """
        payload = [
            (
                task.id,
                task.distribution_id,
                task.position,
                task.first_name,
                task.phone,
                task.notes,
                task.assigned_to,
                task.assigned_at,
            )
            for task in tasks
        ]

        try:
            await execute_many_in_transaction(insert_query, payload)
        except DatabaseError as e:
            logger.error(
                "Task bulk insert failed",
                distribution_id=distribution_id,
                batch_size=len(payload),
                error=str(e),
            )
            raise PersistenceError("Failed to save distributed tasks; no tasks were created") from e

        logger.info("Tasks stored", distribution_id=distribution_id, batch_size=len(payload))
        return tasks

    @classmethod
    async def find_all(cls) -> list[TaskWithAgent]:
        """All tasks with the owning agent's name and email."""

        query = f"""
            SELECT {cls.TASK_SELECT_COLUMNS},
                   a.name AS agent_name, a.email AS agent_email
            FROM tasks t
            LEFT JOIN agents a ON a.id = t.assigned_to
            ORDER BY t.assigned_at DESC, t.position ASC
        """

        rows = await fetch_all(query)
        return [
            TaskWithAgent(
                task=cls._row_to_task(row),
                agent_name=row.get("agent_name"),
                agent_email=row.get("agent_email"),
            )
            for row in rows
        ]

    @classmethod
    async def find_by_agent(cls, agent_id: str) -> list[Task]:
        """Tasks of one agent, newest assignment first."""

        agent_uuid = parse_uuid(agent_id)
        if agent_uuid is None:
            return []

        query = f"""
            SELECT {cls.TASK_SELECT_COLUMNS}
            FROM tasks t
            WHERE t.assigned_to = %s
            ORDER BY t.assigned_at DESC, t.position ASC
        """

        rows = await fetch_all(query, (agent_uuid,))
        return [cls._row_to_task(row) for row in rows]

    @classmethod
    async def mark_completed(cls, task_id: str) -> Task:
        """
        Move a task to COMPLETED. A second call leaves completed_at untouched.

        Raises:
            NotFoundError: no task with this id
        """
        task_uuid = parse_uuid(task_id)
        if task_uuid is None:
            raise NotFoundError("Task not found")

        query = f"""
            UPDATE tasks AS t
            SET completed = TRUE,
                completed_at = COALESCE(t.completed_at, NOW())
            WHERE t.id = %s
            RETURNING {cls.TASK_SELECT_COLUMNS}
        """

        row = await fetch_one(query, (task_uuid,))
        if not row:
            raise NotFoundError("Task not found")

        logger.info("Task marked completed", task_id=task_id, assigned_to=str(row["assigned_to"]))
        return cls._row_to_task(row)

    @classmethod
    async def delete_all(cls) -> int:
        """Remove every task and return how many rows were deleted."""

        deleted = await execute_query("DELETE FROM tasks")
        logger.warning("All tasks deleted", deleted_count=deleted)
        return deleted

    @classmethod
    async def count_tasks(cls) -> int:
        total = await fetch_val("SELECT COUNT(*) FROM tasks")
        return int(total or 0)

    @classmethod
    async def global_stats_snapshot(cls) -> GlobalStats:
        """
        Agent total, task total and per-agent task counts from one statement,
        so the three figures always describe the same snapshot. Agents
        without tasks are absent from the per-agent list.
        """

        query = """
            WITH per_agent AS (
                SELECT t.assigned_to AS agent_id, a.name AS agent_name,
                       a.created_at, COUNT(*) AS task_count
                FROM tasks t
                JOIN agents a ON a.id = t.assigned_to
                GROUP BY t.assigned_to, a.name, a.created_at
            )
            SELECT
                (SELECT COUNT(*) FROM agents) AS total_agents,
                (SELECT COUNT(*) FROM tasks) AS total_tasks,
                COALESCE(
                    json_agg(
                        json_build_object(
                            'agent_id', agent_id::text,
                            'agent_name', agent_name,
                            'task_count', task_count
                        )
                        ORDER BY created_at ASC, agent_id ASC
                    ),
                    '[]'::json
                ) AS tasks_per_agent
            FROM per_agent
        """

        row = await fetch_one(query)
        if row is None:
            return GlobalStats(total_agents=0, total_tasks=0, tasks_per_agent=[])

        return GlobalStats(
            total_agents=int(row["total_agents"]),
            total_tasks=int(row["total_tasks"]),
            tasks_per_agent=[
                AgentTaskCount(
                    agent_id=str(entry["agent_id"]),
                    agent_name=entry["agent_name"],
                    task_count=int(entry["task_count"]),
                )
                for entry in row["tasks_per_agent"]
            ],
        )
