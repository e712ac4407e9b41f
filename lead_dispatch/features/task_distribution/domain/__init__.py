"""
Domain subpackage for the task distribution feature.
"""

from .errors import (
    EmptyInputError,
    NotFoundError,
    ParseError,
    PersistenceError,
    RosterSizeError,
    TaskDistributionError,
    UnsupportedFileTypeError,
    UploadConflictError,
    UploadTooLargeError,
    ValidationError,
)
from .models import (
    Agent,
    AgentOverview,
    AgentTaskCount,
    Assignment,
    CompletionStats,
    DistributionPlan,
    DistributionSummary,
    GlobalStats,
    Record,
    Task,
    TaskState,
    TaskWithAgent,
    ValidatedLead,
)

__all__ = [
    "Agent",
    "AgentOverview",
    "AgentTaskCount",
    "Assignment",
    "CompletionStats",
    "DistributionPlan",
    "DistributionSummary",
    "EmptyInputError",
    "GlobalStats",
    "NotFoundError",
    "ParseError",
    "PersistenceError",
    "Record",
    "RosterSizeError",
    "Task",
    "TaskDistributionError",
    "TaskState",
    "TaskWithAgent",
    "UnsupportedFileTypeError",
    "UploadConflictError",
    "UploadTooLargeError",
    "ValidatedLead",
    "ValidationError",
]
