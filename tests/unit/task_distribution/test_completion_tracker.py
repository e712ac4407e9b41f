from datetime import UTC, datetime
from uuid import uuid4

import pytest

from lead_dispatch.features.task_distribution.domain import (
    NotFoundError,
    Task,
    TaskState,
    ValidatedLead,
)
from lead_dispatch.features.task_distribution.services import (
    compute_completion_stats,
    completion_percentage,
)


def _task(**overrides) -> Task:
    fields = dict(
        id=str(uuid4()),
        distribution_id=str(uuid4()),
        position=0,
        first_name="Ada",
        phone="555-1111",
        notes="",
        assigned_to=str(uuid4()),
        assigned_at=datetime(2024, 5, 1, tzinfo=UTC),
    )
    fields.update(overrides)
    return Task(**fields)


@pytest.mark.parametrize(
    "completed, total, expected",
    [
        (0, 0, 0),
        (0, 4, 0),
        (1, 4, 25),
        (1, 8, 13),  # 12.5 rounds up
        (2, 3, 67),
        (1, 3, 33),
        (4, 4, 100),
    ],
)
def test_completion_percentage_rounds_half_up(completed, total, expected):
    assert completion_percentage(completed, total) == expected


def test_task_rejects_inconsistent_completion_fields():
    with pytest.raises(ValueError):
        _task(state=TaskState.COMPLETED, completed_at=None)
    with pytest.raises(ValueError):
        _task(state=TaskState.PENDING, completed_at=datetime.now(UTC))


def test_complete_is_one_way_and_keeps_first_timestamp():
    first = datetime(2024, 5, 2, 9, 0, tzinfo=UTC)
    later = datetime(2024, 5, 3, 9, 0, tzinfo=UTC)

    done = _task().complete(first)
    again = done.complete(later)

    assert done.state is TaskState.COMPLETED
    assert done.completed
    assert again.completed_at == first


def test_compute_completion_stats():
    tasks = [_task(), _task(), _task().complete(datetime.now(UTC))]

    stats = compute_completion_stats(tasks)

    assert stats.total_tasks == 3
    assert stats.completed_tasks == 1
    assert stats.completion_percentage == 33


async def _distribute(service, count: int) -> None:
    leads = [ValidatedLead(first_name=f"Lead{i}", phone=f"555{i:04d}") for i in range(count)]
    await service.distribute_leads(leads)


@pytest.mark.asyncio
async def test_agent_overview_reports_progress(
    distribution_service, completion_tracker, task_repo, roster
):
    # 20 leads over 5 agents: 4 each
    await _distribute(distribution_service, 20)
    first_agent = roster[0]

    overview = await completion_tracker.agent_overview(first_agent.id)
    assert overview.agent == first_agent
    assert overview.stats.total_tasks == 4
    assert overview.stats.completion_percentage == 0

    await completion_tracker.mark_completed(overview.tasks[0].id)

    overview = await completion_tracker.agent_overview(first_agent.id)
    assert overview.stats.completed_tasks == 1
    assert overview.stats.completion_percentage == 25


@pytest.mark.asyncio
async def test_agent_without_tasks_has_zero_percent(completion_tracker, roster):
    overview = await completion_tracker.agent_overview(roster[3].id)

    assert overview.tasks == []
    assert overview.stats.total_tasks == 0
    assert overview.stats.completion_percentage == 0


@pytest.mark.asyncio
async def test_unknown_agent_is_not_found(completion_tracker):
    with pytest.raises(NotFoundError) as exc_info:
        await completion_tracker.agent_overview(str(uuid4()))

    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_mark_completed_is_idempotent(distribution_service, completion_tracker, task_repo):
    await _distribute(distribution_service, 5)
    task_id = next(iter(task_repo.tasks))

    first = await completion_tracker.mark_completed(task_id)
    second = await completion_tracker.mark_completed(task_id)

    assert first.completed
    assert second.completed_at == first.completed_at


@pytest.mark.asyncio
async def test_mark_completed_unknown_task(completion_tracker):
    with pytest.raises(NotFoundError):
        await completion_tracker.mark_completed(str(uuid4()))


@pytest.mark.asyncio
async def test_clear_all_removes_everything(distribution_service, completion_tracker, task_repo):
    await _distribute(distribution_service, 7)

    deleted = await completion_tracker.clear_all()

    assert deleted == 7
    assert await completion_tracker.list_tasks() == []
