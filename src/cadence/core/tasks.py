"""Pure task domain logic - no I/O dependencies."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum

from .recurrence import RecurrencePattern
from .slots import TimeSlot


class Priority(Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    NONE = "none"


def _parse_datetime(value: str | None) -> datetime | None:
    if not value:
        return None
    return datetime.fromisoformat(value)


@dataclass
class SchedulableTask:
    """The parts of a task the scheduler reads."""

    estimate: int | None = None  # minutes
    priority: Priority = Priority.NONE
    deadline: datetime | None = None
    date: datetime | None = None


@dataclass
class Task:
    """A task record as kept by the task store."""

    id: str
    name: str
    list_id: str = ""
    description: str | None = None
    date: datetime | None = None
    deadline: datetime | None = None
    estimate: int | None = None  # minutes
    priority: Priority = Priority.NONE
    completed: bool = False
    completed_at: datetime | None = None
    recurrence: RecurrencePattern | None = None
    parent_task_id: str | None = None
    label_ids: list[str] = field(default_factory=list)

    @property
    def is_recurring(self) -> bool:
        return self.recurrence is not None

    def busy_slot(self) -> TimeSlot | None:
        """The time this task occupies, or None if it isn't both dated and estimated."""
        if not self.date or not self.estimate:
            return None
        return TimeSlot(start=self.date, end=self.date + timedelta(minutes=self.estimate))

    def to_schedulable(self) -> SchedulableTask:
        return SchedulableTask(
            estimate=self.estimate,
            priority=self.priority,
            deadline=self.deadline,
            date=self.date,
        )

    @classmethod
    def from_dict(cls, data: dict) -> "Task":
        """Create Task from the planner's camelCase record."""
        recurrence = data.get("recurrence")
        return cls(
            id=data["id"],
            name=data["name"],
            list_id=data.get("listId", ""),
            description=data.get("description"),
            date=_parse_datetime(data.get("date")),
            deadline=_parse_datetime(data.get("deadline")),
            estimate=data.get("estimate"),
            priority=Priority(data.get("priority") or "none"),
            completed=data.get("completed", False),
            completed_at=_parse_datetime(data.get("completedAt")),
            recurrence=RecurrencePattern.from_dict(recurrence) if recurrence else None,
            parent_task_id=data.get("parentTaskId"),
            label_ids=list(data.get("labelIds", [])),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "listId": self.list_id,
            "description": self.description,
            "date": self.date.isoformat() if self.date else None,
            "deadline": self.deadline.isoformat() if self.deadline else None,
            "estimate": self.estimate,
            "priority": self.priority.value,
            "completed": self.completed,
            "completedAt": self.completed_at.isoformat() if self.completed_at else None,
            "recurrence": self.recurrence.to_dict() if self.recurrence else None,
            "parentTaskId": self.parent_task_id,
            "labelIds": list(self.label_ids),
        }


@dataclass
class ScheduleSuggestion:
    """A suggested time block for a task. Advisory only, never reserved."""

    start_time: datetime
    end_time: datetime
    score: int  # 0-100
    reason: str

    @property
    def slot(self) -> TimeSlot:
        return TimeSlot(start=self.start_time, end=self.end_time)

    def to_dict(self) -> dict:
        return {
            "startTime": self.start_time.isoformat(),
            "endTime": self.end_time.isoformat(),
            "score": self.score,
            "reason": self.reason,
        }


def busy_intervals(tasks: list[Task], start: datetime, end: datetime) -> list[TimeSlot]:
    """
    Time already taken by incomplete, dated, estimated tasks in [start, end).

    Pure function - no I/O.
    """
    return [
        t.busy_slot()
        for t in tasks
        if not t.completed and t.date and t.estimate and start <= t.date < end
    ]
