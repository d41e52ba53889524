"""Pure recurrence logic - no I/O dependencies.

Weekdays are numbered Sunday=0 .. Saturday=6, the way the planner stores them.
Use js_weekday() to convert a Python date.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum

from dateutil.relativedelta import FR, MO, SA, SU, TH, TU, WE, relativedelta


class RecurrenceType(Enum):
    """Supported recurrence families."""

    DAILY = "daily"
    WEEKLY = "weekly"
    WEEKDAY = "weekday"  # Mon-Fri
    MONTHLY = "monthly"
    YEARLY = "yearly"
    CUSTOM = "custom"


WEEKDAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]
WEEKDAY_SHORT_NAMES = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
WEEKEND = (0, 6)


class InvalidRecurrenceError(ValueError):
    """Raised when a recurrence pattern fails validation."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"Invalid recurrence pattern: {'; '.join(errors)}")


# Custom sub-patterns. Exactly one applies to a custom pattern, chosen by
# RecurrencePattern.custom_rule().


@dataclass(frozen=True)
class WeekdaysRule:
    """Specific weekdays, e.g. every Mon and Wed."""

    weekdays: tuple[int, ...]


@dataclass(frozen=True)
class OrdinalWeekdayRule:
    """Nth weekday of the month, e.g. 3rd Tuesday."""

    ordinal: int
    weekday: int
    interval: int = 1


@dataclass(frozen=True)
class MonthDayRule:
    """Specific day of the month, e.g. the 15th."""

    month_day: int
    interval: int = 1


@dataclass(frozen=True)
class IntervalRule:
    """Every N days."""

    interval: int = 1


CustomRule = WeekdaysRule | OrdinalWeekdayRule | MonthDayRule | IntervalRule


@dataclass(frozen=True)
class RecurrencePattern:
    """How a task repeats."""

    type: RecurrenceType | str
    interval: int | None = None
    weekdays: tuple[int, ...] | None = None
    ordinal: int | None = None
    ordinal_weekday: int | None = None
    month_day: int | None = None

    @property
    def effective_interval(self) -> int:
        return self.interval if self.interval is not None else 1

    def custom_rule(self) -> CustomRule:
        """
        Resolve the custom sub-pattern.

        Precedence: weekdays > ordinal weekday > month day > every N days.
        """
        interval = self.effective_interval
        if self.weekdays:
            return WeekdaysRule(tuple(sorted(self.weekdays)))
        if self.ordinal is not None and self.ordinal_weekday is not None:
            return OrdinalWeekdayRule(self.ordinal, self.ordinal_weekday, interval)
        if self.month_day is not None:
            return MonthDayRule(self.month_day, interval)
        return IntervalRule(interval)

    @classmethod
    def from_dict(cls, data: dict) -> "RecurrencePattern":
        """Create a pattern from the planner's stored JSON shape."""
        raw_type = data.get("type", "")
        try:
            kind = RecurrenceType(raw_type)
        except ValueError:
            kind = raw_type
        weekdays = data.get("weekdays")
        return cls(
            type=kind,
            interval=data.get("interval"),
            weekdays=tuple(weekdays) if weekdays is not None else None,
            ordinal=data.get("ordinal"),
            ordinal_weekday=data.get("ordinalWeekday"),
            month_day=data.get("monthDay"),
        )

    def to_dict(self) -> dict:
        """Serialize to the planner's stored JSON shape, omitting unset fields."""
        data: dict = {
            "type": self.type.value if isinstance(self.type, RecurrenceType) else self.type
        }
        if self.interval is not None:
            data["interval"] = self.interval
        if self.weekdays is not None:
            data["weekdays"] = list(self.weekdays)
        if self.ordinal is not None:
            data["ordinal"] = self.ordinal
        if self.ordinal_weekday is not None:
            data["ordinalWeekday"] = self.ordinal_weekday
        if self.month_day is not None:
            data["monthDay"] = self.month_day
        return data


# ============== Date helpers ==============


# dateutil weekdays indexed by the planner's Sunday=0 numbering
RELATIVE_WEEKDAYS = (SU, MO, TU, WE, TH, FR, SA)


def js_weekday(d: date) -> int:
    """Weekday with Sunday=0 .. Saturday=6."""
    return (d.weekday() + 1) % 7


def add_months(dt: datetime, months: int) -> datetime:
    """Shift by whole months, clamping the day to the target month's length."""
    return dt + relativedelta(months=months)


def add_years(dt: datetime, years: int) -> datetime:
    """Shift by whole years. Feb 29 becomes Feb 28 in non-leap years."""
    return dt + relativedelta(years=years)


# ============== Next occurrence ==============


def calculate_next_occurrence(current: datetime, pattern: RecurrencePattern) -> datetime | None:
    """
    Next occurrence after a completed one.

    Pure function - no I/O. Time of day is preserved. Returns None only when
    the pattern type is unrecognized; callers skip spawning in that case.
    """
    interval = pattern.effective_interval

    match pattern.type:
        case RecurrenceType.DAILY:
            return current + timedelta(days=interval)
        case RecurrenceType.WEEKLY:
            return current + timedelta(days=7 * interval)
        case RecurrenceType.WEEKDAY:
            # interval is ignored for this family
            return _next_weekday(current)
        case RecurrenceType.MONTHLY:
            return add_months(current, interval)
        case RecurrenceType.YEARLY:
            return add_years(current, interval)
        case RecurrenceType.CUSTOM:
            return _next_custom(current, pattern.custom_rule())
        case _:
            return None


def _next_weekday(current: datetime) -> datetime:
    candidate = current + timedelta(days=1)
    while js_weekday(candidate) in WEEKEND:
        candidate += timedelta(days=1)
    return candidate


def _next_custom(current: datetime, rule: CustomRule) -> datetime | None:
    match rule:
        case WeekdaysRule(weekdays=weekdays):
            return _next_listed_weekday(current, weekdays)
        case OrdinalWeekdayRule(ordinal=ordinal, weekday=weekday, interval=interval):
            return _nth_weekday_of_month(current, ordinal, weekday, interval)
        case MonthDayRule(month_day=month_day, interval=interval):
            # day= clamps to the target month's length
            return current + relativedelta(months=interval, day=1) + relativedelta(day=month_day)
        case IntervalRule(interval=interval):
            return current + timedelta(days=interval)


def _next_listed_weekday(current: datetime, weekdays: tuple[int, ...]) -> datetime:
    today = js_weekday(current)
    later = [d for d in weekdays if d > today]
    if later:
        return current + timedelta(days=later[0] - today)
    # Wrap to the first listed day of next week
    return current + timedelta(days=7 - today + weekdays[0])


def _nth_weekday_of_month(
    current: datetime,
    ordinal: int,
    weekday: int,
    interval: int,
) -> datetime | None:
    """
    Nth `weekday` of the month `interval` months ahead.

    The result never leaves the target month. When the month has fewer than
    `ordinal` matches (a 5th Monday that doesn't exist), the last match is
    returned; None only if `weekday` is not a valid weekday number.
    """
    if not 0 <= weekday < len(RELATIVE_WEEKDAYS):
        return None
    day_of_week = RELATIVE_WEEKDAYS[weekday]
    first = current + relativedelta(months=interval, day=1)
    if ordinal >= 1:
        candidate = first + relativedelta(weekday=day_of_week(ordinal))
        if candidate.month == first.month:
            return candidate
    return first + relativedelta(day=31, weekday=day_of_week(-1))


# ============== Validation ==============


def validate_pattern(pattern: RecurrencePattern) -> list[str]:
    """
    Check a pattern's fields. Returns a list of errors (empty if valid).

    Meant for callers accepting patterns from users; calculate_next_occurrence
    does not validate.
    """
    errors: list[str] = []

    if not isinstance(pattern.type, RecurrenceType):
        valid = ", ".join(t.value for t in RecurrenceType)
        errors.append(f"Invalid recurrence type: {pattern.type}. Must be one of: {valid}")
        return errors

    if pattern.interval is not None and (not isinstance(pattern.interval, int) or pattern.interval < 1):
        errors.append("Interval must be a positive integer")

    if pattern.weekdays is not None:
        for day in pattern.weekdays:
            if not isinstance(day, int) or not 0 <= day <= 6:
                errors.append(f"Invalid weekday: {day}. Must be 0-6 (Sunday-Saturday)")
        if len(pattern.weekdays) == 0:
            errors.append("Weekdays cannot be empty when specified")

    if pattern.month_day is not None and (
        not isinstance(pattern.month_day, int) or not 1 <= pattern.month_day <= 31
    ):
        errors.append(f"Invalid month day: {pattern.month_day}. Must be 1-31")

    if pattern.ordinal is not None and (
        not isinstance(pattern.ordinal, int) or not 1 <= pattern.ordinal <= 5
    ):
        errors.append(f"Invalid ordinal: {pattern.ordinal}. Must be 1-5")

    if pattern.ordinal_weekday is not None and (
        not isinstance(pattern.ordinal_weekday, int) or not 0 <= pattern.ordinal_weekday <= 6
    ):
        errors.append(
            f"Invalid ordinal weekday: {pattern.ordinal_weekday}. Must be 0-6 (Sunday-Saturday)"
        )

    if pattern.type == RecurrenceType.CUSTOM:
        has_custom_field = (
            (pattern.interval is not None and pattern.interval != 1)
            or pattern.weekdays is not None
            or pattern.month_day is not None
            or (pattern.ordinal is not None and pattern.ordinal_weekday is not None)
        )
        if not has_custom_field:
            errors.append(
                "Custom recurrence must specify at least one of: interval > 1, weekdays, "
                "month day, or ordinal with ordinal weekday"
            )

    if (pattern.ordinal is None) != (pattern.ordinal_weekday is None):
        errors.append("Ordinal and ordinal weekday must be specified together")

    return errors


def normalize_pattern(pattern: RecurrencePattern) -> RecurrencePattern:
    """
    Validate and normalize a pattern.

    Weekdays are de-duplicated and sorted. A default interval is dropped for
    custom and weekday patterns and filled in as 1 for the others.

    Raises InvalidRecurrenceError if the pattern is invalid.
    """
    errors = validate_pattern(pattern)
    if errors:
        raise InvalidRecurrenceError(errors)

    interval = pattern.interval
    if interval is None or interval == 1:
        no_interval = (RecurrenceType.CUSTOM, RecurrenceType.WEEKDAY)
        interval = None if pattern.type in no_interval else 1

    has_ordinal = pattern.ordinal is not None and pattern.ordinal_weekday is not None
    return RecurrencePattern(
        type=pattern.type,
        interval=interval,
        weekdays=tuple(sorted(set(pattern.weekdays))) if pattern.weekdays else None,
        ordinal=pattern.ordinal if has_ordinal else None,
        ordinal_weekday=pattern.ordinal_weekday if has_ordinal else None,
        month_day=pattern.month_day,
    )


# ============== Human-readable descriptions ==============


def format_ordinal(n: int) -> str:
    """1 -> '1st', 2 -> '2nd', 11 -> '11th', 23 -> '23rd'."""
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def format_pattern(pattern: RecurrencePattern) -> str:
    """Describe a pattern, e.g. 'Every 2 weeks' or 'Every 3rd Tuesday of the month'."""
    if validate_pattern(pattern):
        return "Invalid recurrence pattern"

    interval = pattern.effective_interval
    units = {
        RecurrenceType.DAILY: ("day", "days"),
        RecurrenceType.WEEKLY: ("week", "weeks"),
        RecurrenceType.MONTHLY: ("month", "months"),
        RecurrenceType.YEARLY: ("year", "years"),
    }

    if pattern.type == RecurrenceType.WEEKDAY:
        return "Every weekday"
    if pattern.type in units:
        singular, plural = units[pattern.type]
        return f"Every {singular}" if interval == 1 else f"Every {interval} {plural}"

    match pattern.custom_rule():
        case WeekdaysRule(weekdays=weekdays):
            if len(weekdays) == 1:
                return f"Every {WEEKDAY_NAMES[weekdays[0]]}"
            names = [WEEKDAY_SHORT_NAMES[d] for d in weekdays]
            if len(names) == 2:
                return f"Every {names[0]} and {names[1]}"
            return f"Every {', '.join(names[:-1])}, and {names[-1]}"
        case OrdinalWeekdayRule(ordinal=ordinal, weekday=weekday, interval=interval):
            base = f"Every {format_ordinal(ordinal)} {WEEKDAY_NAMES[weekday]}"
            return f"{base} of the month" if interval == 1 else f"{base} every {interval} months"
        case MonthDayRule(month_day=month_day, interval=interval):
            base = f"Every {format_ordinal(month_day)}"
            return f"{base} of the month" if interval == 1 else f"{base} every {interval} months"
        case IntervalRule(interval=interval) if interval > 1:
            return f"Every {interval} days"
    return "Custom recurrence"


_SIMPLE_PHRASES = {
    "every day": RecurrencePattern(RecurrenceType.DAILY, interval=1),
    "every week": RecurrencePattern(RecurrenceType.WEEKLY, interval=1),
    "every weekday": RecurrencePattern(RecurrenceType.WEEKDAY),
    "every month": RecurrencePattern(RecurrenceType.MONTHLY, interval=1),
    "every year": RecurrencePattern(RecurrenceType.YEARLY, interval=1),
}
_UNIT_TYPES = {
    "day": RecurrenceType.DAILY,
    "week": RecurrenceType.WEEKLY,
    "month": RecurrenceType.MONTHLY,
    "year": RecurrenceType.YEARLY,
}
_DAY_ALTERNATION = "|".join(name.lower() for name in WEEKDAY_NAMES)
_INTERVAL_RE = re.compile(r"^every (\d+) (day|week|month|year)s?$")
_ORDINAL_RE = re.compile(rf"^every (\d+)(?:st|nd|rd|th) ({_DAY_ALTERNATION}) of the month$")
_MONTH_DAY_RE = re.compile(r"^every (\d+)(?:st|nd|rd|th) of the month$")
_LIST_SPLIT_RE = re.compile(r",?\s+and\s+|,\s*")


def _weekday_index(name: str) -> int | None:
    name = name.strip().lower()
    for names in (WEEKDAY_SHORT_NAMES, WEEKDAY_NAMES):
        for i, candidate in enumerate(names):
            if candidate.lower() == name:
                return i
    return None


def parse_formatted_pattern(text: str) -> RecurrencePattern | None:
    """Inverse of format_pattern for single-interval phrasings. None if not understood."""
    lower = text.strip().lower()

    if lower in _SIMPLE_PHRASES:
        return _SIMPLE_PHRASES[lower]

    if m := _INTERVAL_RE.match(lower):
        return RecurrencePattern(_UNIT_TYPES[m.group(2)], interval=int(m.group(1)))

    if m := _ORDINAL_RE.match(lower):
        ordinal = int(m.group(1))
        if 1 <= ordinal <= 5:
            return RecurrencePattern(
                RecurrenceType.CUSTOM, ordinal=ordinal, ordinal_weekday=_weekday_index(m.group(2))
            )
        return None

    if m := _MONTH_DAY_RE.match(lower):
        month_day = int(m.group(1))
        if 1 <= month_day <= 31:
            return RecurrencePattern(RecurrenceType.CUSTOM, month_day=month_day)
        return None

    if lower.startswith("every "):
        parts = _LIST_SPLIT_RE.split(lower[len("every "):])
        indices = [_weekday_index(p) for p in parts]
        if indices and all(i is not None for i in indices):
            return RecurrencePattern(RecurrenceType.CUSTOM, weekdays=tuple(sorted(set(indices))))

    return None


# ============== Constructors ==============


def daily(interval: int = 1) -> RecurrencePattern:
    return RecurrencePattern(RecurrenceType.DAILY, interval=interval)


def weekly(interval: int = 1) -> RecurrencePattern:
    return RecurrencePattern(RecurrenceType.WEEKLY, interval=interval)


def weekdays_only() -> RecurrencePattern:
    """Monday through Friday."""
    return RecurrencePattern(RecurrenceType.WEEKDAY)


def monthly(interval: int = 1) -> RecurrencePattern:
    return RecurrencePattern(RecurrenceType.MONTHLY, interval=interval)


def yearly(interval: int = 1) -> RecurrencePattern:
    return RecurrencePattern(RecurrenceType.YEARLY, interval=interval)


def on_weekdays(days: list[int]) -> RecurrencePattern:
    """Specific weekdays (0=Sunday .. 6=Saturday)."""
    return RecurrencePattern(RecurrenceType.CUSTOM, weekdays=tuple(sorted(set(days))))


def ordinal_weekday(ordinal: int, weekday: int, interval: int = 1) -> RecurrencePattern:
    """Nth weekday of every `interval` months, e.g. ordinal_weekday(3, 2) = 3rd Tuesday."""
    return RecurrencePattern(
        RecurrenceType.CUSTOM, interval=interval, ordinal=ordinal, ordinal_weekday=weekday
    )


def on_month_day(month_day: int, interval: int = 1) -> RecurrencePattern:
    return RecurrencePattern(RecurrenceType.CUSTOM, interval=interval, month_day=month_day)
