"""Building RRULE strings from explicit recurrence settings.

A ``RecurrenceState`` is the value object an editing UI hands over; it is
passed in by the caller rather than read from any shared store.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from ..internal.datetime_utils import format_local_iso, parse_local_iso
from .engine import RecurrenceSpec, compute_occurrences
from .rrule import Frequency


class MonthlyMode(str, Enum):
    """How a monthly rule picks its day."""

    NONE = "none"
    DAY_OF_MONTH = "dayofmonth"
    DAY_OF_WEEK = "dayofweek"


class OccurrenceType(str, Enum):
    STANDARD = "standard"
    ADDITIONAL = "additional"


@dataclass
class RecurrenceState:
    """Recurrence settings for one event."""

    enabled: bool = False
    frequency: Frequency = Frequency.WEEKLY
    interval: int = 1
    count: int | None = None
    until: str | None = None
    selected_weekdays: list[str] = field(default_factory=list)
    monthly_mode: MonthlyMode = MonthlyMode.NONE
    bymonthday: list[int] = field(default_factory=list)
    bysetpos: list[int] = field(default_factory=list)
    rdates: list[str] = field(default_factory=list)
    excluded_occurrences: set[str] = field(default_factory=set)


@dataclass(frozen=True)
class OccurrenceDate:
    """An occurrence tagged with where it came from."""

    date: str
    type: OccurrenceType


@dataclass(frozen=True)
class OccurrenceStats:
    standard_count: int
    additional_count: int
    excluded_count: int
    total_active: int


def build_rrule(state: RecurrenceState) -> str:
    """Build the RRULE for ``state``; empty when recurrence is disabled.

    Example:
        >>> build_rrule(RecurrenceState(enabled=True, frequency=Frequency.WEEKLY,
        ...                             interval=2, selected_weekdays=["MO", "WE"]))
        'FREQ=WEEKLY;INTERVAL=2;BYDAY=MO,WE'
    """
    if not state.enabled:
        return ""

    frequency = Frequency(state.frequency)
    rrule = f"FREQ={frequency.value}"

    if state.interval > 1:
        rrule += f";INTERVAL={state.interval}"
    if state.count:
        rrule += f";COUNT={state.count}"
    elif state.until:
        rrule += f";UNTIL={state.until}"

    if frequency == Frequency.WEEKLY and state.selected_weekdays:
        rrule += f";BYDAY={','.join(state.selected_weekdays)}"

    if frequency == Frequency.MONTHLY:
        mode = MonthlyMode(state.monthly_mode)
        if mode == MonthlyMode.DAY_OF_MONTH and state.bymonthday:
            rrule += f";BYMONTHDAY={','.join(str(d) for d in state.bymonthday)}"
        elif mode == MonthlyMode.DAY_OF_WEEK:
            if state.selected_weekdays:
                rrule += f";BYDAY={','.join(state.selected_weekdays)}"
            if state.bysetpos:
                rrule += f";BYSETPOS={','.join(str(p) for p in state.bysetpos)}"

    return rrule


def _normalize(value: str) -> str:
    return format_local_iso(parse_local_iso(value))


def classify_occurrences(
    dtstart: str,
    state: RecurrenceState,
    dtstart_tzid: str | None = None,
    max_count: int | None = None,
) -> list[OccurrenceDate]:
    """Expand ``state`` and tag every occurrence as standard or additional.

    Excluded occurrences are kept in the list so a preview can show them;
    use :func:`occurrence_stats` to count what is active. An occurrence is
    ``additional`` when only an RDATE produced it.
    """
    rrule = build_rrule(state)
    if not rrule:
        return []

    limit = max_count or (state.count or 104) + len(state.rdates)
    with_rdates = compute_occurrences(
        RecurrenceSpec(rrule, dtstart, dtstart_tzid, rdate=list(state.rdates), max_count=limit)
    )
    standard = set(
        compute_occurrences(RecurrenceSpec(rrule, dtstart, dtstart_tzid, max_count=limit))
    )
    return [
        OccurrenceDate(
            value, OccurrenceType.STANDARD if value in standard else OccurrenceType.ADDITIONAL
        )
        for value in with_rdates
    ]


def occurrence_stats(
    occurrences: list[OccurrenceDate], excluded: set[str] | list[str]
) -> OccurrenceStats:
    """Count standard, additional and excluded occurrences."""
    excluded_set = {_normalize(value) for value in excluded}
    standard = sum(1 for occ in occurrences if occ.type == OccurrenceType.STANDARD)
    additional = len(occurrences) - standard
    excluded_count = sum(1 for occ in occurrences if _normalize(occ.date) in excluded_set)
    return OccurrenceStats(
        standard_count=standard,
        additional_count=additional,
        excluded_count=excluded_count,
        total_active=len(occurrences) - excluded_count,
    )
