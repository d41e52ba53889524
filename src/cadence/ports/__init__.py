"""Ports - interfaces/protocols for external dependencies."""

from .task_store import TaskNotFoundError, TaskStore, TaskStoreError

__all__ = [
    "TaskStore",
    "TaskStoreError",
    "TaskNotFoundError",
]
