"""
Task distribution routes.

Upload a lead file for distribution, list and clear tasks, report global
and per-agent progress, and mark tasks complete. Domain errors raised by the
services are rendered by the TaskDistributionError handler in main.py.
"""

from fastapi import APIRouter, Depends, File, UploadFile, status
from fastapi.responses import JSONResponse

from lead_dispatch.infrastructure.observability.logging import get_logger

from ..services import CompletionTracker, StatsAggregator, TaskDistributionService
from .dependencies import get_completion_tracker, get_distribution_service, get_stats_aggregator
from .schemas import (
    AgentTasksResponse,
    ClearTasksResponse,
    ErrorResponse,
    GlobalStatsResponse,
    TaskResponse,
    TaskWithAgentResponse,
    UploadResponse,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/tasks", tags=["tasks"])

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={**_ERROR_RESPONSES, 409: {"model": ErrorResponse}, 413: {"model": ErrorResponse}},
    summary="Upload leads and distribute them across the roster",
)
async def upload_tasks(
    file: UploadFile | None = File(default=None),
    service: TaskDistributionService = Depends(get_distribution_service),
):
    """
    Accept a CSV/XLSX/XLS file with FirstName, Phone and optional Notes
    columns and split its rows evenly across the agents roster.
    """
    if file is None or not file.filename:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST, content={"message": "No file uploaded"}
        )

    logger.info("Upload received", filename=file.filename, content_type=file.content_type)
    summary = await service.distribute_upload(file)
    return UploadResponse.from_summary(summary)


@router.get("", response_model=list[TaskWithAgentResponse])
async def list_tasks(tracker: CompletionTracker = Depends(get_completion_tracker)):
    """All tasks with their agent's name and email."""
    items = await tracker.list_tasks()
    return [TaskWithAgentResponse.from_task_with_agent(item) for item in items]


@router.get("/stats", response_model=GlobalStatsResponse)
async def get_task_stats(aggregator: StatsAggregator = Depends(get_stats_aggregator)):
    """Totals and task counts per agent, computed at request time."""
    stats = await aggregator.global_stats()
    return GlobalStatsResponse.from_stats(stats)


@router.get(
    "/agent/{agent_id}",
    response_model=AgentTasksResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_agent_tasks(
    agent_id: str, tracker: CompletionTracker = Depends(get_completion_tracker)
):
    """Tasks of one agent, newest first, with completion statistics."""
    overview = await tracker.agent_overview(agent_id)
    return AgentTasksResponse.from_overview(overview)


@router.delete("/clear", response_model=ClearTasksResponse)
async def clear_all_tasks(tracker: CompletionTracker = Depends(get_completion_tracker)):
    """Delete every task."""
    deleted = await tracker.clear_all()
    return ClearTasksResponse(message="All tasks cleared successfully", deleted_count=deleted)


@router.patch(
    "/task/{task_id}/complete",
    response_model=TaskResponse,
    responses={404: {"model": ErrorResponse}},
)
async def mark_task_completed(
    task_id: str, tracker: CompletionTracker = Depends(get_completion_tracker)
):
    """Mark a task completed. Repeating the call returns the same task unchanged."""
    task = await tracker.mark_completed(task_id)
    return TaskResponse.from_task(task)
