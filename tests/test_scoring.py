"""Tests for slot scoring rules."""

from datetime import datetime, timedelta

import pytest

from cadence.core.scoring import (
    SCORING_RULES,
    ScoringRule,
    deadline_proximity,
    priority_urgency,
    recency,
    score_slot,
    time_of_day,
)
from cadence.core.slots import TimeSlot
from cadence.core.tasks import Priority, SchedulableTask


# Fixtures
@pytest.fixture
def now():
    """Wednesday 08:00."""
    return datetime(2025, 1, 15, 8, 0)


@pytest.fixture
def slot_at(now):
    """Factory for a one-hour slot N hours after `now`."""
    def _slot(hours: float) -> TimeSlot:
        start = now + timedelta(hours=hours)
        return TimeSlot(start=start, end=start + timedelta(hours=1))
    return _slot


class TestPriorityRule:
    def test_high_within_a_day(self, now, slot_at):
        task = SchedulableTask(estimate=60, priority=Priority.HIGH)
        assert priority_urgency(slot_at(1), task, now) == (30, "Early slot for high priority task")

    def test_high_within_two_days(self, now, slot_at):
        task = SchedulableTask(estimate=60, priority=Priority.HIGH)
        assert priority_urgency(slot_at(30), task, now) == (20, "Soon slot for high priority task")

    def test_high_later(self, now, slot_at):
        task = SchedulableTask(estimate=60, priority=Priority.HIGH)
        assert priority_urgency(slot_at(50), task, now) == (0, None)

    def test_medium_within_two_days(self, now, slot_at):
        task = SchedulableTask(estimate=60, priority=Priority.MEDIUM)
        assert priority_urgency(slot_at(47), task, now) == (15, "Reasonable timing for medium priority")

    @pytest.mark.parametrize("priority", [Priority.LOW, Priority.NONE])
    def test_low_and_none_ignored(self, now, slot_at, priority):
        task = SchedulableTask(estimate=60, priority=priority)
        assert priority_urgency(slot_at(1), task, now) == (0, None)


class TestDeadlineRule:
    def test_no_deadline(self, now, slot_at):
        assert deadline_proximity(slot_at(1), SchedulableTask(estimate=60), now) == (0, None)

    def test_close_to_deadline(self, now, slot_at):
        task = SchedulableTask(estimate=60, deadline=now + timedelta(hours=3))
        # Slot starts 2h before the deadline: within 2x the task duration
        assert deadline_proximity(slot_at(1), task, now) == (25, "Close to deadline")

    def test_missing_estimate_counts_as_an_hour(self, now, slot_at):
        task = SchedulableTask(deadline=now + timedelta(hours=3))
        assert deadline_proximity(slot_at(1), task, now)[0] == 25

    def test_within_24_hours(self, now, slot_at):
        task = SchedulableTask(estimate=30, deadline=now + timedelta(hours=20))
        assert deadline_proximity(slot_at(1), task, now) == (20, "Within 24 hours of deadline")

    def test_within_48_hours(self, now, slot_at):
        task = SchedulableTask(estimate=30, deadline=now + timedelta(hours=40))
        assert deadline_proximity(slot_at(1), task, now) == (10, "Within 48 hours of deadline")

    def test_far_deadline(self, now, slot_at):
        task = SchedulableTask(estimate=30, deadline=now + timedelta(days=5))
        assert deadline_proximity(slot_at(1), task, now) == (0, None)

    def test_after_deadline(self, now, slot_at):
        task = SchedulableTask(estimate=30, deadline=now + timedelta(hours=2))
        assert deadline_proximity(slot_at(5), task, now) == (-20, "After deadline")

    def test_starting_at_deadline(self, now, slot_at):
        task = SchedulableTask(estimate=30, deadline=now + timedelta(hours=5))
        assert deadline_proximity(slot_at(5), task, now) == (0, None)


class TestTimeOfDayRule:
    @pytest.mark.parametrize("hours,expected", [
        (1, (5, "Morning slot (peak focus time)")),  # 09:00
        (3.5, (5, "Morning slot (peak focus time)")),  # 11:30
        (4, (0, None)),  # 12:00
        (7.5, (0, None)),  # 15:30
        (8, (-3, None)),  # 16:00
        (9.5, (-3, None)),  # 17:30
    ])
    def test_hours(self, now, slot_at, hours, expected):
        assert time_of_day(slot_at(hours), SchedulableTask(estimate=30), now) == expected


class TestRecencyRule:
    def test_today(self, now, slot_at):
        assert recency(slot_at(2), SchedulableTask(estimate=30), now) == (5, "Available today")

    def test_tomorrow(self, now, slot_at):
        assert recency(slot_at(25), SchedulableTask(estimate=30), now) == (3, "Available tomorrow")

    def test_later(self, now, slot_at):
        assert recency(slot_at(49), SchedulableTask(estimate=30), now) == (0, None)


class TestScoreSlot:
    def test_rule_order(self):
        assert [r.name for r in SCORING_RULES] == ["priority", "deadline", "time_of_day", "recency"]

    def test_high_priority_morning_today(self, now, slot_at):
        result = score_slot(slot_at(1), SchedulableTask(estimate=60, priority=Priority.HIGH), now)
        assert result.score == 90
        assert result.reason == (
            "Early slot for high priority task; Morning slot (peak focus time); Available today"
        )

    def test_nothing_fires(self, now, slot_at):
        # Saturday 13:00, no priority, no deadline
        result = score_slot(slot_at(77), SchedulableTask(estimate=60), now)
        assert result.score == 50
        assert result.reason == "Available time slot"

    def test_unlabelled_penalty_keeps_default_reason(self, now, slot_at):
        # Saturday 16:00
        result = score_slot(slot_at(80), SchedulableTask(estimate=60), now)
        assert result.score == 47
        assert result.reason == "Available time slot"

    def test_clamped_to_100(self, now, slot_at):
        task = SchedulableTask(estimate=60, priority=Priority.HIGH, deadline=now + timedelta(hours=2))
        result = score_slot(slot_at(1), task, now)
        assert result.score == 100
        assert result.reason.startswith("Early slot for high priority task; Close to deadline")

    def test_clamped_to_0(self, now, slot_at):
        rules = (ScoringRule("penalty", lambda slot, task, now: (-80, "Terrible")),)
        result = score_slot(slot_at(1), SchedulableTask(estimate=60), now, rules=rules)
        assert result.score == 0
        assert result.reason == "Terrible"

    def test_after_deadline_penalized(self, now, slot_at):
        task = SchedulableTask(estimate=60, deadline=now + timedelta(hours=1))
        before = score_slot(slot_at(0.5), task, now)
        after = score_slot(slot_at(56), task, now)
        assert after.score == 27
        assert before.score > after.score
