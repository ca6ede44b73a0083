"""Tests for building RRULEs from recurrence settings."""

from py_eventcal.recurrence.builder import (
    MonthlyMode,
    OccurrenceDate,
    OccurrenceType,
    RecurrenceState,
    build_rrule,
    classify_occurrences,
    occurrence_stats,
)
from py_eventcal.recurrence.rrule import Frequency, validate_rrule


def test_disabled_state_builds_nothing():
    assert build_rrule(RecurrenceState(enabled=False, count=3)) == ""


def test_weekly_with_interval_and_weekdays():
    state = RecurrenceState(
        enabled=True,
        frequency=Frequency.WEEKLY,
        interval=2,
        selected_weekdays=["MO", "WE"],
    )

    assert build_rrule(state) == "FREQ=WEEKLY;INTERVAL=2;BYDAY=MO,WE"


def test_count_wins_over_until():
    """Test that COUNT and UNTIL are never emitted together."""
    state = RecurrenceState(enabled=True, frequency=Frequency.DAILY, count=5, until="20260301")

    rrule = build_rrule(state)

    assert rrule == "FREQ=DAILY;COUNT=5"
    assert validate_rrule(rrule)


def test_until_without_count():
    state = RecurrenceState(enabled=True, frequency=Frequency.YEARLY, until="20300101")

    assert build_rrule(state) == "FREQ=YEARLY;UNTIL=20300101"


def test_monthly_day_of_month():
    state = RecurrenceState(
        enabled=True,
        frequency=Frequency.MONTHLY,
        monthly_mode=MonthlyMode.DAY_OF_MONTH,
        bymonthday=[15],
    )

    assert build_rrule(state) == "FREQ=MONTHLY;BYMONTHDAY=15"


def test_monthly_day_of_week():
    """Test the 'last Thursday of the month' form."""
    state = RecurrenceState(
        enabled=True,
        frequency=Frequency.MONTHLY,
        monthly_mode=MonthlyMode.DAY_OF_WEEK,
        selected_weekdays=["TH"],
        bysetpos=[-1],
    )

    rrule = build_rrule(state)

    assert rrule == "FREQ=MONTHLY;BYDAY=TH;BYSETPOS=-1"
    assert validate_rrule(rrule)


def test_weekdays_ignored_for_daily():
    state = RecurrenceState(enabled=True, frequency=Frequency.DAILY, selected_weekdays=["MO"])

    assert build_rrule(state) == "FREQ=DAILY"


def test_classify_occurrences_tags_rdates():
    """Test that occurrences produced only by RDATE are tagged additional."""
    state = RecurrenceState(
        enabled=True,
        frequency=Frequency.WEEKLY,
        count=3,
        rdates=["2026-03-04T10:00:00"],
    )

    occurrences = classify_occurrences("2026-03-02T10:00:00", state, "America/New_York")

    assert occurrences == [
        OccurrenceDate("2026-03-02T10:00:00", OccurrenceType.STANDARD),
        OccurrenceDate("2026-03-04T10:00:00", OccurrenceType.ADDITIONAL),
        OccurrenceDate("2026-03-09T10:00:00", OccurrenceType.STANDARD),
        OccurrenceDate("2026-03-16T10:00:00", OccurrenceType.STANDARD),
    ]


def test_classify_occurrences_disabled():
    assert classify_occurrences("2026-03-02T10:00:00", RecurrenceState()) == []


def test_occurrence_stats():
    occurrences = [
        OccurrenceDate("2026-03-02T10:00:00", OccurrenceType.STANDARD),
        OccurrenceDate("2026-03-04T10:00:00", OccurrenceType.ADDITIONAL),
        OccurrenceDate("2026-03-09T10:00:00", OccurrenceType.STANDARD),
        OccurrenceDate("2026-03-16T10:00:00", OccurrenceType.STANDARD),
    ]

    stats = occurrence_stats(occurrences, {"2026-03-09T10:00:00", "2027-01-01T10:00:00"})

    assert stats.standard_count == 3
    assert stats.additional_count == 1
    assert stats.excluded_count == 1
    assert stats.total_active == 3
