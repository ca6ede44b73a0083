"""A Python library for recurring events and iCalendar export."""

from .config import ExportConfig
from .ics import (
    CalendarMetadata,
    EventRecord,
    ICSResult,
    serialize_calendar,
    serialize_event,
)
from .internal.errors import (
    CalendarError,
    ComputationError,
    PartialDataError,
    RRuleValidationError,
    ValidationError,
)
from .recurrence import (
    RecurrenceSpec,
    compute_occurrence_instants,
    compute_occurrences,
    parse_rrule,
    validate_rrule,
)

__version__ = "0.1.0"

__all__ = [
    "CalendarError",
    "CalendarMetadata",
    "ComputationError",
    "EventRecord",
    "ExportConfig",
    "ICSResult",
    "PartialDataError",
    "RRuleValidationError",
    "RecurrenceSpec",
    "ValidationError",
    "compute_occurrence_instants",
    "compute_occurrences",
    "parse_rrule",
    "serialize_calendar",
    "serialize_event",
    "validate_rrule",
]
