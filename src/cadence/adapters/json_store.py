"""File-based task store adapter."""

import json
import logging
import uuid
from datetime import datetime
from pathlib import Path

from cadence.core.tasks import Task
from cadence.ports.task_store import TaskNotFoundError, TaskStoreError

logger = logging.getLogger(__name__)


class JsonTaskStore:
    """
    JSON file task storage.

    Implements TaskStore protocol. All tasks live in one file as a list of
    planner records. No business logic - just I/O.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()

    def _load(self) -> list[dict]:
        """Read raw task records. A missing file is an empty store."""
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text())
        except json.JSONDecodeError as e:
            raise TaskStoreError(f"Corrupt task store {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise TaskStoreError(f"Corrupt task store {self.path}: expected a JSON object")
        return data.get("tasks", [])

    def _save(self, records: list[dict]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({"tasks": records}, indent=2))

    def all_tasks(self) -> list[Task]:
        return [Task.from_dict(r) for r in self._load()]

    def get_task(self, task_id: str) -> Task | None:
        """Fetch a task by id. Returns None if not found."""
        for record in self._load():
            if record["id"] == task_id:
                return Task.from_dict(record)
        return None

    def incomplete_tasks_with_date_and_estimate(self, start: datetime, end: datetime) -> list[Task]:
        """Incomplete tasks with both date and estimate, dated within [start, end)."""
        return [
            t
            for t in self.all_tasks()
            if not t.completed and t.date and t.estimate and start <= t.date < end
        ]

    def insert_task(self, fields: dict) -> str:
        """Create a task from Task field values. Returns the new id."""
        task = Task(id=str(uuid.uuid4()), **fields)
        records = self._load()
        records.append(task.to_dict())
        self._save(records)
        logger.debug(f"Inserted task {task.id} ({task.name})")
        return task.id

    def copy_labels(self, source_task_id: str, new_task_id: str) -> None:
        """Give the new task the same labels as the source task."""
        records = self._load()
        by_id = {r["id"]: r for r in records}
        if source_task_id not in by_id:
            raise TaskNotFoundError(source_task_id)
        if new_task_id not in by_id:
            raise TaskNotFoundError(new_task_id)
        by_id[new_task_id]["labelIds"] = list(by_id[source_task_id].get("labelIds", []))
        self._save(records)

    def set_completed(self, task_id: str, completed: bool, at: datetime | None) -> Task:
        """Set a task's completion state. Raises TaskNotFoundError for unknown ids."""
        records = self._load()
        for record in records:
            if record["id"] == task_id:
                record["completed"] = completed
                record["completedAt"] = at.isoformat() if at else None
                self._save(records)
                return Task.from_dict(record)
        raise TaskNotFoundError(task_id)
