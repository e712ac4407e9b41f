"""
Task distribution feature package.

This vertical slice keeps every layer of the lead upload flow co-located:
domain models and errors, file ingestion, the distribution engine,
repositories, services and the API router.
"""

from .api.router import router as tasks_router  # noqa: F401
from .distribution import compute_quotas, distribute  # noqa: F401
from .services import (  # noqa: F401
    CompletionTracker,
    RosterGate,
    StatsAggregator,
    TaskDistributionService,
)
