"""
Domain models for the task distribution feature.

Plain dataclasses shared by the ingestion pipeline, the repositories, the
services and the API layer. Only the task lifecycle carries behaviour.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum

# One raw row from an uploaded file: column name -> cell text, in file order
Record = dict[str, str]


class TaskState(str, Enum):
    """Completion lifecycle of a task: PENDING -> COMPLETED, nothing else."""

    PENDING = "pending"
    COMPLETED = "completed"


@dataclass(frozen=True, slots=True)
class ValidatedLead:
    """A contact that passed row validation and is ready for assignment."""

    first_name: str
    phone: str
    notes: str = ""


@dataclass(frozen=True, slots=True)
class Agent:
    """Read-only view of an agents row."""

    id: str
    name: str
    email: str
    mobile: str | None = None
    status: str = "active"
    created_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class Assignment:
    """A lead paired with the agent that receives it."""

    lead: ValidatedLead
    agent_id: str
    position: int  # 0-based index of the lead within its upload


@dataclass(frozen=True, slots=True)
class DistributionPlan:
    """Output of the distribution engine for one upload."""

    roster_size: int
    base: int
    remainder: int
    quotas: list[int]
    assignments: list[Assignment] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.assignments)


@dataclass(frozen=True, slots=True)
class Task:
    """
    A persisted, assigned lead.

    completed_at is set if and only if the state is COMPLETED; the
    constructor rejects any other combination.
    """

    id: str
    distribution_id: str
    position: int
    first_name: str
    phone: str
    notes: str
    assigned_to: str
    assigned_at: datetime
    state: TaskState = TaskState.PENDING
    completed_at: datetime | None = None

    def __post_init__(self) -> None:
        if (self.state is TaskState.COMPLETED) != (self.completed_at is not None):
            raise ValueError(
                f"Task {self.id}: completed_at must be set exactly when state is completed"
            )

    @property
    def completed(self) -> bool:
        return self.state is TaskState.COMPLETED

    def complete(self, at: datetime) -> "Task":
        """Return the completed version of this task. Completed tasks are returned unchanged."""
        if self.completed:
            return self
        return replace(self, state=TaskState.COMPLETED, completed_at=at)


@dataclass(frozen=True, slots=True)
class TaskWithAgent:
    """Task joined with the display fields of its agent."""

    task: Task
    agent_name: str | None
    agent_email: str | None


@dataclass(frozen=True, slots=True)
class DistributionSummary:
    """Result of a successful upload."""

    distribution_id: str
    total_tasks: int
    base: int
    remainder: int
    quotas: list[int]


@dataclass(frozen=True, slots=True)
class CompletionStats:
    total_tasks: int
    completed_tasks: int
    completion_percentage: int


@dataclass(frozen=True, slots=True)
class AgentOverview:
    """All tasks of one agent with their completion rollup."""

    agent: Agent
    tasks: list[Task]
    stats: CompletionStats


@dataclass(frozen=True, slots=True)
class AgentTaskCount:
    agent_id: str
    agent_name: str
    task_count: int


@dataclass(frozen=True, slots=True)
class GlobalStats:
    total_agents: int
    total_tasks: int
    tasks_per_agent: list[AgentTaskCount]
