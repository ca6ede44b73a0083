"""Recurrence expansion for py-eventcal.

Recurrence rules are defined in RFC 5545 section 3.3.10.
"""

from .builder import (
    MonthlyMode,
    OccurrenceDate,
    OccurrenceStats,
    OccurrenceType,
    RecurrenceState,
    build_rrule,
    classify_occurrences,
    occurrence_stats,
)
from .display import (
    format_weekday,
    get_recurrence_interval,
    get_recurrence_type,
    parse_rrule_to_label,
)
from .engine import (
    DEFAULT_MAX_COUNT,
    RecurrenceSpec,
    build_ruleset,
    compute_occurrence_instants,
    compute_occurrences,
)
from .rrule import (
    Frequency,
    RecurrenceRule,
    WeekdayNum,
    is_indefinite_recurrence,
    parse_rrule,
    validate_rrule,
)

__all__ = [
    "DEFAULT_MAX_COUNT",
    "Frequency",
    "MonthlyMode",
    "OccurrenceDate",
    "OccurrenceStats",
    "OccurrenceType",
    "RecurrenceRule",
    "RecurrenceSpec",
    "RecurrenceState",
    "WeekdayNum",
    "build_rrule",
    "build_ruleset",
    "classify_occurrences",
    "compute_occurrence_instants",
    "compute_occurrences",
    "format_weekday",
    "get_recurrence_interval",
    "get_recurrence_type",
    "is_indefinite_recurrence",
    "occurrence_stats",
    "parse_rrule",
    "parse_rrule_to_label",
    "validate_rrule",
]
