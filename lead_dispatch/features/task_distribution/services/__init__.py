"""
Service subpackage for the task distribution feature.
"""

from .completion_tracker import CompletionTracker, completion_percentage, compute_completion_stats
from .distribution_service import TaskDistributionService
from .roster_gate import RosterGate
from .stats_service import StatsAggregator

__all__ = [
    "CompletionTracker",
    "RosterGate",
    "StatsAggregator",
    "TaskDistributionService",
    "completion_percentage",
    "compute_completion_stats",
]
