"""Shared workflow layer between the CLI and the planner.

Scheduling suggestions and recurring-task spawning: each workflow reads from
or writes to a TaskStore and delegates the date math to the pure core.
"""

import logging
from datetime import datetime, time, timedelta

from .adapters.json_store import JsonTaskStore
from .config import Config, load_config
from .core.recurrence import calculate_next_occurrence
from .core.scoring import score_slot
from .core.slots import find_available_slots, generate_horizon_slots
from .core.tasks import SchedulableTask, ScheduleSuggestion, Task, busy_intervals
from .ports.task_store import TaskNotFoundError, TaskStore

logger = logging.getLogger(__name__)


def get_store(config: Config) -> JsonTaskStore:
    """Resolve the task store from config."""
    return JsonTaskStore(config.tasks_file)


def search_window(now: datetime, horizon_days: int) -> tuple[datetime, datetime]:
    """[start of today, start of today + horizon_days + 1 days)."""
    start = datetime.combine(now.date(), time.min)
    return start, start + timedelta(days=horizon_days + 1)


# ============== Scheduling ==============


def suggest_time_slots(
    task: SchedulableTask | Task,
    store: TaskStore,
    count: int | None = None,
    now: datetime | None = None,
    config: Config | None = None,
) -> list[ScheduleSuggestion]:
    """
    Ranked, conflict-free time slots for a task.

    Returns [] when the task has no estimate or nothing fits. Store failures
    propagate to the caller.
    """
    if not task.estimate or task.estimate <= 0:
        return []

    config = config or load_config()
    count = max(count if count is not None else config.suggestion_count, 0)
    now = now or datetime.now()
    window_start, window_end = search_window(now, config.horizon_days)

    existing = store.incomplete_tasks_with_date_and_estimate(window_start, window_end)
    busy = busy_intervals(existing, window_start, window_end)

    # Each candidate is a full task-length block; starts advance on the slot grid
    candidates = generate_horizon_slots(
        now,
        horizon_days=config.horizon_days,
        slot_minutes=task.estimate,
        work_start_hour=config.work_start_hour,
        work_end_hour=config.work_end_hour,
        step_minutes=config.slot_minutes,
    )
    available = find_available_slots(candidates, busy, task.estimate)

    suggestions = []
    for slot in available:
        scored = score_slot(slot, task, now)
        suggestions.append(
            ScheduleSuggestion(
                start_time=slot.start,
                end_time=slot.start + timedelta(minutes=task.estimate),
                score=scored.score,
                reason=scored.reason,
            )
        )

    # sorted() is stable: equal scores stay in chronological order
    ranked = sorted(suggestions, key=lambda s: s.score, reverse=True)
    logger.debug(
        f"{len(candidates)} candidate slots, {len(busy)} busy, "
        f"{len(available)} available; returning {min(count, len(ranked))}"
    )
    return ranked[:count]


# ============== Recurring tasks ==============


def spawn_next_occurrence(task: Task, store: TaskStore) -> str | None:
    """
    Create the next occurrence of a just-completed recurring task.

    Returns the new task id, or None if the task isn't recurring, has no date,
    or its pattern yields no next date.
    """
    if task.recurrence is None or task.date is None:
        return None

    next_date = calculate_next_occurrence(task.date, task.recurrence)
    if next_date is None:
        logger.info(f"No next occurrence for task {task.id}: unrecognized pattern {task.recurrence.type}")
        return None

    deadline = None
    if task.deadline:
        deadline = task.deadline + (next_date - task.date)

    new_id = store.insert_task(
        {
            "name": task.name,
            "description": task.description,
            "list_id": task.list_id,
            "date": next_date,
            "deadline": deadline,
            "estimate": task.estimate,
            "priority": task.priority,
            "completed": False,
            "recurrence": task.recurrence,
            "parent_task_id": task.id,
        }
    )
    store.copy_labels(task.id, new_id)
    logger.info(f"Spawned occurrence {new_id} of task {task.id} on {next_date.isoformat()}")
    return new_id


def complete_task(
    task_id: str,
    store: TaskStore,
    now: datetime | None = None,
) -> tuple[Task, str | None]:
    """
    Toggle a task's completion.

    Completing a recurring task spawns its next occurrence. Returns the updated
    task and the spawned task id (or None).

    Raises TaskNotFoundError if the task doesn't exist.
    """
    existing = store.get_task(task_id)
    if existing is None:
        raise TaskNotFoundError(task_id)

    now = now or datetime.now()
    completed = not existing.completed
    updated = store.set_completed(task_id, completed, now if completed else None)

    spawned_id = None
    if completed and existing.is_recurring:
        spawned_id = spawn_next_occurrence(existing, store)
    return updated, spawned_id
