"""Functional core - pure recurrence and scheduling logic with no I/O."""

from .recurrence import (
    InvalidRecurrenceError,
    RecurrencePattern,
    RecurrenceType,
    calculate_next_occurrence,
    format_pattern,
    normalize_pattern,
    parse_formatted_pattern,
    validate_pattern,
)
from .slots import TimeSlot, find_available_slots, generate_horizon_slots, generate_working_slots
from .scoring import SCORING_RULES, ScoringRule, SlotScore, score_slot
from .tasks import Priority, ScheduleSuggestion, SchedulableTask, Task, busy_intervals

__all__ = [
    # Recurrence
    "InvalidRecurrenceError",
    "RecurrencePattern",
    "RecurrenceType",
    "calculate_next_occurrence",
    "format_pattern",
    "normalize_pattern",
    "parse_formatted_pattern",
    "validate_pattern",
    # Slots
    "TimeSlot",
    "find_available_slots",
    "generate_horizon_slots",
    "generate_working_slots",
    # Scoring
    "SCORING_RULES",
    "ScoringRule",
    "SlotScore",
    "score_slot",
    # Tasks
    "Priority",
    "ScheduleSuggestion",
    "SchedulableTask",
    "Task",
    "busy_intervals",
]
