"""Pure slot scoring - no I/O dependencies.

A slot starts at BASE_SCORE and each rule in SCORING_RULES adds (or removes)
points in order. Rule labels make up the suggestion's reason.
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from .slots import TimeSlot
from .tasks import Priority, SchedulableTask

BASE_SCORE = 50
MIN_SCORE = 0
MAX_SCORE = 100
DEFAULT_REASON = "Available time slot"
DEFAULT_ESTIMATE_MINUTES = 60

# (points, label); a None label adjusts the score silently
Adjustment = tuple[int, str | None]


@dataclass(frozen=True)
class SlotScore:
    score: int
    reason: str


@dataclass(frozen=True)
class ScoringRule:
    """One independent scoring heuristic."""

    name: str
    evaluate: Callable[[TimeSlot, SchedulableTask, datetime], Adjustment]


def _hours_between(earlier: datetime, later: datetime) -> float:
    return (later - earlier).total_seconds() / 3600


def priority_urgency(slot: TimeSlot, task: SchedulableTask, now: datetime) -> Adjustment:
    """Higher priority tasks prefer earlier slots."""
    hours_from_now = _hours_between(now, slot.start)
    if task.priority == Priority.HIGH:
        if hours_from_now < 24:
            return 30, "Early slot for high priority task"
        if hours_from_now < 48:
            return 20, "Soon slot for high priority task"
    elif task.priority == Priority.MEDIUM:
        if hours_from_now < 48:
            return 15, "Reasonable timing for medium priority"
    return 0, None


def deadline_proximity(slot: TimeSlot, task: SchedulableTask, now: datetime) -> Adjustment:
    """Reward slots close before the deadline, penalize slots after it."""
    if not task.deadline:
        return 0, None

    hours_until_deadline = _hours_between(slot.start, task.deadline)
    task_hours = (task.estimate or DEFAULT_ESTIMATE_MINUTES) / 60

    if 0 < hours_until_deadline <= task_hours * 2:
        return 25, "Close to deadline"
    if 0 < hours_until_deadline <= 24:
        return 20, "Within 24 hours of deadline"
    if 0 < hours_until_deadline <= 48:
        return 10, "Within 48 hours of deadline"
    if hours_until_deadline < 0:
        return -20, "After deadline"
    return 0, None


def time_of_day(slot: TimeSlot, task: SchedulableTask, now: datetime) -> Adjustment:
    hour = slot.start.hour
    if 9 <= hour < 12:
        return 5, "Morning slot (peak focus time)"
    if hour >= 16:
        return -3, None
    return 0, None


def recency(slot: TimeSlot, task: SchedulableTask, now: datetime) -> Adjustment:
    """All else being equal, sooner is better."""
    days_from_now = _hours_between(now, slot.start) / 24
    if days_from_now < 1:
        return 5, "Available today"
    if days_from_now < 2:
        return 3, "Available tomorrow"
    return 0, None


SCORING_RULES: tuple[ScoringRule, ...] = (
    ScoringRule("priority", priority_urgency),
    ScoringRule("deadline", deadline_proximity),
    ScoringRule("time_of_day", time_of_day),
    ScoringRule("recency", recency),
)


def score_slot(
    slot: TimeSlot,
    task: SchedulableTask,
    now: datetime,
    rules: tuple[ScoringRule, ...] = SCORING_RULES,
) -> SlotScore:
    """
    Score a slot for a task (higher = better).

    Pure function - no I/O. Score is clamped to 0-100.
    """
    score = BASE_SCORE
    reasons = []
    for rule in rules:
        points, label = rule.evaluate(slot, task, now)
        score += points
        if label:
            reasons.append(label)

    score = max(MIN_SCORE, min(MAX_SCORE, score))
    return SlotScore(score=score, reason="; ".join(reasons) or DEFAULT_REASON)
