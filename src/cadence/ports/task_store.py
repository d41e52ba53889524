"""Task store interface."""

from datetime import datetime
from typing import Protocol

from cadence.core.tasks import Task


class TaskStoreError(Exception):
    """Raised when the task store can't be read or written."""

    pass


class TaskNotFoundError(TaskStoreError):
    """Raised when a task id doesn't exist in the store."""

    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(f"Task not found: {task_id}")


class TaskStore(Protocol):
    """Interface for the planner's task persistence."""

    def incomplete_tasks_with_date_and_estimate(self, start: datetime, end: datetime) -> list[Task]:
        """Incomplete tasks with both date and estimate, dated within [start, end)."""
        ...

    def insert_task(self, fields: dict) -> str:
        """Create a task from Task field values. Returns the new id."""
        ...

    def copy_labels(self, source_task_id: str, new_task_id: str) -> None:
        """Give the new task the same labels as the source task."""
        ...

    def get_task(self, task_id: str) -> Task | None:
        """Fetch a task by id. Returns None if not found."""
        ...

    def set_completed(self, task_id: str, completed: bool, at: datetime | None) -> Task:
        """Set a task's completion state. Raises TaskNotFoundError for unknown ids."""
        ...
