"""
Repository subpackage for the task distribution feature.
"""

from .agent_repository import AgentRosterRepository
from .task_repository import TaskRepository

__all__ = ["AgentRosterRepository", "TaskRepository"]
