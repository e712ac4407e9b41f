from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from lead_dispatch.features.task_distribution.api.dependencies import (
    get_completion_tracker,
    get_distribution_service,
    get_stats_aggregator,
)
from lead_dispatch.features.task_distribution.domain import (
    Agent,
    AgentTaskCount,
    GlobalStats,
    NotFoundError,
    PersistenceError,
    Task,
    TaskWithAgent,
)
from lead_dispatch.features.task_distribution.services import (
    CompletionTracker,
    RosterGate,
    StatsAggregator,
    TaskDistributionService,
)


class FakeAgentRepository:
    def __init__(self, agents: list[Agent]):
        self.agents = list(agents)

    async def fetch_eligible_agents(self) -> list[Agent]:
        return [agent for agent in self.agents if agent.status == "active"]

    async def get_agent(self, agent_id: str) -> Agent | None:
        return next((agent for agent in self.agents if agent.id == agent_id), None)


class FakeTaskRepository:
    """In-memory task store with the same contract as TaskRepository."""

    def __init__(self, agent_repository: FakeAgentRepository):
        self.agent_repository = agent_repository
        self.tasks: dict[str, Task] = {}
        self.fail_on_insert = False
        self.insert_calls = 0

    async def bulk_insert(self, assignments, distribution_id: str) -> list[Task]:
        self.insert_calls += 1
        if self.fail_on_insert:
            raise PersistenceError("Failed to save distributed tasks; no tasks were created")

        assigned_at = datetime.now(UTC)
        created = [
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
        for task in created:
            self.tasks[task.id] = task
        return created

    async def find_all(self) -> list[TaskWithAgent]:
        agents = {agent.id: agent for agent in self.agent_repository.agents}
        result = []
        for task in self.tasks.values():
            agent = agents.get(task.assigned_to)
            result.append(
                TaskWithAgent(
                    task=task,
                    agent_name=agent.name if agent else None,
                    agent_email=agent.email if agent else None,
                )
            )
        return result

    async def find_by_agent(self, agent_id: str) -> list[Task]:
        owned = [task for task in self.tasks.values() if task.assigned_to == agent_id]
        return sorted(owned, key=lambda task: (-task.assigned_at.timestamp(), task.position))

    async def mark_completed(self, task_id: str) -> Task:
        task = self.tasks.get(task_id)
        if task is None:
            raise NotFoundError("Task not found")
        updated = task.complete(datetime.now(UTC))
        self.tasks[task_id] = updated
        return updated

    async def delete_all(self) -> int:
        deleted = len(self.tasks)
        self.tasks.clear()
        return deleted

    async def count_tasks(self) -> int:
        return len(self.tasks)

    async def global_stats_snapshot(self) -> GlobalStats:
        counts: dict[str, int] = {}
        for task in self.tasks.values():
            counts[task.assigned_to] = counts.get(task.assigned_to, 0) + 1
        return GlobalStats(
            total_agents=len(self.agent_repository.agents),
            total_tasks=len(self.tasks),
            tasks_per_agent=[
                AgentTaskCount(agent_id=agent.id, agent_name=agent.name, task_count=counts[agent.id])
                for agent in self.agent_repository.agents
                if agent.id in counts
            ],
        )


def build_agents(count: int) -> list[Agent]:
    created = datetime(2024, 1, 1, tzinfo=UTC)
    return [
        Agent(
            id=str(uuid4()),
            name=f"Agent {index + 1}",
            email=f"agent{index + 1}@example.com",
            mobile=f"+1555000{index:04d}",
            created_at=created + timedelta(minutes=index),
        )
        for index in range(count)
    ]


def csv_bytes(rows: list[dict[str, str]], columns=("FirstName", "Phone", "Notes")) -> bytes:
    lines = [",".join(columns)]
    for row in rows:
        lines.append(",".join(row.get(column, "") for column in columns))
    return ("\n".join(lines) + "\n").encode("utf-8")


def lead_rows(count: int) -> list[dict[str, str]]:
    return [
        {"FirstName": f"Lead{index}", "Phone": f"555{index:04d}", "Notes": f"note {index}"}
        for index in range(count)
    ]


@pytest.fixture
def roster() -> list[Agent]:
    return build_agents(5)


@pytest.fixture
def agent_repo(roster) -> FakeAgentRepository:
    return FakeAgentRepository(roster)


@pytest.fixture
def task_repo(agent_repo) -> FakeTaskRepository:
    return FakeTaskRepository(agent_repo)


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def distribution_service(task_repo, agent_repo, upload_dir) -> TaskDistributionService:
    return TaskDistributionService(
        task_repository=task_repo,
        roster_gate=RosterGate(agent_repository=agent_repo, required_size=5),
        upload_dir=upload_dir,
        max_upload_bytes=1_000_000,
        upload_policy="additive",
    )


@pytest.fixture
def completion_tracker(task_repo, agent_repo) -> CompletionTracker:
    return CompletionTracker(task_repository=task_repo, agent_repository=agent_repo)


@pytest.fixture
def stats_aggregator(task_repo) -> StatsAggregator:
    return StatsAggregator(task_repository=task_repo)


@pytest.fixture
def client(distribution_service, completion_tracker, stats_aggregator):
    from lead_dispatch.main import app

    app.dependency_overrides[get_distribution_service] = lambda: distribution_service
    app.dependency_overrides[get_completion_tracker] = lambda: completion_tracker
    app.dependency_overrides[get_stats_aggregator] = lambda: stats_aggregator
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def agent_factory():
    return build_agents


@pytest.fixture
def make_csv():
    return csv_bytes


@pytest.fixture
def make_lead_rows():
    return lead_rows


@pytest.fixture
def service_factory(upload_dir):
    """Build a service over a fresh roster of the given size."""

    def build(roster_size: int = 5, upload_policy: str = "additive"):
        agent_repository = FakeAgentRepository(build_agents(roster_size))
        task_repository = FakeTaskRepository(agent_repository)
        service = TaskDistributionService(
            task_repository=task_repository,
            roster_gate=RosterGate(agent_repository=agent_repository, required_size=5),
            upload_dir=upload_dir,
            max_upload_bytes=1_000_000,
            upload_policy=upload_policy,
        )
        return service, task_repository

    return build
