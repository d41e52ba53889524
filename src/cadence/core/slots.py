"""Pure slot generation and conflict filtering - no I/O dependencies."""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

DEFAULT_WORK_START_HOUR = 9
DEFAULT_WORK_END_HOUR = 18
DEFAULT_SLOT_MINUTES = 30
DEFAULT_HORIZON_DAYS = 7


@dataclass(frozen=True)
class TimeSlot:
    """A time range. Half-open: [start, end)."""

    start: datetime
    end: datetime

    def duration_minutes(self) -> int:
        return int((self.end - self.start).total_seconds() / 60)

    def format(self) -> str:
        """Human-readable range, e.g. 'Wed 15 Jan 09:00-10:00 (60 min)'."""
        day_and_start = self.start.strftime("%a %d %b %H:%M")
        return f"{day_and_start}-{self.end:%H:%M} ({self.duration_minutes()} min)"

    def overlaps(self, other: "TimeSlot") -> bool:
        """Check if this slot overlaps with another. Touching endpoints don't count."""
        return self.start < other.end and self.end > other.start


def generate_working_slots(
    day: date,
    slot_minutes: int = DEFAULT_SLOT_MINUTES,
    work_start_hour: int = DEFAULT_WORK_START_HOUR,
    work_end_hour: int = DEFAULT_WORK_END_HOUR,
    step_minutes: int | None = None,
) -> list[TimeSlot]:
    """
    Candidate slots for one day during work hours.

    Pure function - no I/O.

    Args:
        day: The day (a datetime's time part is ignored)
        slot_minutes: Length of each slot
        work_start_hour: First slot starts at this hour
        work_end_hour: No slot ends after this hour
        step_minutes: Distance between slot starts (defaults to slot_minutes,
            giving back-to-back slots)

    Returns:
        Slots in chronological order
    """
    step_minutes = step_minutes or slot_minutes
    if slot_minutes <= 0 or step_minutes <= 0:
        raise ValueError("slot_minutes and step_minutes must be positive")

    if isinstance(day, datetime):
        day = day.date()
    midnight = datetime.combine(day, time.min)
    day_end = midnight + timedelta(hours=work_end_hour)
    length = timedelta(minutes=slot_minutes)
    step = timedelta(minutes=step_minutes)

    slots = []
    current = midnight + timedelta(hours=work_start_hour)
    while current + length <= day_end:
        slots.append(TimeSlot(start=current, end=current + length))
        current += step
    return slots


def generate_horizon_slots(
    now: datetime,
    horizon_days: int = DEFAULT_HORIZON_DAYS,
    slot_minutes: int = DEFAULT_SLOT_MINUTES,
    work_start_hour: int = DEFAULT_WORK_START_HOUR,
    work_end_hour: int = DEFAULT_WORK_END_HOUR,
    step_minutes: int | None = None,
) -> list[TimeSlot]:
    """
    Working slots from today through today + horizon_days (inclusive).

    Only slots starting strictly after `now` are kept.
    """
    slots = []
    for offset in range(horizon_days + 1):
        day = now.date() + timedelta(days=offset)
        day_slots = generate_working_slots(
            day,
            slot_minutes=slot_minutes,
            work_start_hour=work_start_hour,
            work_end_hour=work_end_hour,
            step_minutes=step_minutes,
        )
        slots.extend(s for s in day_slots if s.start > now)
    return slots


def find_available_slots(
    candidates: list[TimeSlot],
    busy: list[TimeSlot],
    required_minutes: int,
) -> list[TimeSlot]:
    """
    Candidates that can hold `required_minutes` without touching a busy interval.

    A slot shorter than required_minutes is rejected. Otherwise the proposed
    block [start, start + required) is checked against every busy interval.
    Input order is preserved.
    """
    required = timedelta(minutes=required_minutes)
    available = []
    for slot in candidates:
        if slot.end - slot.start < required:
            continue
        proposed = TimeSlot(start=slot.start, end=slot.start + required)
        if any(proposed.overlaps(b) for b in busy):
            continue
        available.append(slot)
    return available
