"""API response models for the task endpoints."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..domain.models import (
    AgentOverview,
    DistributionSummary,
    GlobalStats,
    Task,
    TaskState,
    TaskWithAgent,
)


class ApiModel(BaseModel):
    """Base for response bodies: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DistributionInfo(ApiModel):
    total_tasks: int
    tasks_per_agent: int = Field(..., description="Base share every agent receives")
    agents_with_extra_tasks: int = Field(..., description="Agents that received one extra task")
    quotas: list[int] = Field(..., description="Tasks per agent in roster order")
    distribution_id: str


class UploadResponse(ApiModel):
    """Response for POST /tasks/upload"""

    message: str
    distribution: DistributionInfo

    @classmethod
    def from_summary(cls, summary: DistributionSummary) -> "UploadResponse":
        return cls(
            message="File processed and tasks distributed successfully",
            distribution=DistributionInfo(
                total_tasks=summary.total_tasks,
                tasks_per_agent=summary.base,
                agents_with_extra_tasks=summary.remainder,
                quotas=summary.quotas,
                distribution_id=summary.distribution_id,
            ),
        )


class TaskResponse(ApiModel):
    id: str
    distribution_id: str
    first_name: str
    phone: str
    notes: str
    assigned_to: str
    assigned_at: datetime
    state: TaskState
    completed: bool
    completed_at: datetime | None = None

    @classmethod
    def from_task(cls, task: Task) -> "TaskResponse":
        return cls(
            id=task.id,
            distribution_id=task.distribution_id,
            first_name=task.first_name,
            phone=task.phone,
            notes=task.notes,
            assigned_to=task.assigned_to,
            assigned_at=task.assigned_at,
            state=task.state,
            completed=task.completed,
            completed_at=task.completed_at,
        )


class AgentRef(ApiModel):
    id: str
    name: str | None = None
    email: str | None = None


class TaskWithAgentResponse(TaskResponse):
    """Task with the owning agent resolved, for GET /tasks"""

    agent: AgentRef

    @classmethod
    def from_task_with_agent(cls, item: TaskWithAgent) -> "TaskWithAgentResponse":
        base = TaskResponse.from_task(item.task).model_dump()
        return cls(
            **base,
            agent=AgentRef(id=item.task.assigned_to, name=item.agent_name, email=item.agent_email),
        )


class CompletionStatsResponse(ApiModel):
    total_tasks: int
    completed_tasks: int
    completion_percentage: int


class AgentTasksResponse(ApiModel):
    """Response for GET /tasks/agent/{agent_id}"""

    agent: AgentRef
    tasks: list[TaskResponse]
    stats: CompletionStatsResponse

    @classmethod
    def from_overview(cls, overview: AgentOverview) -> "AgentTasksResponse":
        return cls(
            agent=AgentRef(id=overview.agent.id, name=overview.agent.name, email=overview.agent.email),
            tasks=[TaskResponse.from_task(task) for task in overview.tasks],
            stats=CompletionStatsResponse(
                total_tasks=overview.stats.total_tasks,
                completed_tasks=overview.stats.completed_tasks,
                completion_percentage=overview.stats.completion_percentage,
            ),
        )


class AgentTaskCountResponse(ApiModel):
    agent_id: str
    agent_name: str
    task_count: int


class GlobalStatsResponse(ApiModel):
    """Response for GET /tasks/stats"""

    total_agents: int
    total_tasks: int
    tasks_per_agent: list[AgentTaskCountResponse]

    @classmethod
    def from_stats(cls, stats: GlobalStats) -> "GlobalStatsResponse":
        return cls(
            total_agents=stats.total_agents,
            total_tasks=stats.total_tasks,
            tasks_per_agent=[
                AgentTaskCountResponse(
                    agent_id=entry.agent_id,
                    agent_name=entry.agent_name,
                    task_count=entry.task_count,
                )
                for entry in stats.tasks_per_agent
            ],
        )


class ClearTasksResponse(ApiModel):
    """Response for DELETE /tasks/clear"""

    message: str
    deleted_count: int


class ErrorResponse(ApiModel):
    message: str
    invalid_rows: list[dict[str, Any]] | None = None
