"""
Service providers for the task routes.

Routes receive services through Depends so tests can swap them with
app.dependency_overrides.
"""

from functools import lru_cache

from ..services import CompletionTracker, StatsAggregator, TaskDistributionService


@lru_cache
def get_distribution_service() -> TaskDistributionService:
    return TaskDistributionService()


@lru_cache
def get_completion_tracker() -> CompletionTracker:
    return CompletionTracker()


@lru_cache
def get_stats_aggregator() -> StatsAggregator:
    return StatsAggregator()
