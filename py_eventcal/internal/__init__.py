"""Low-level helpers shared by the recurrence engine and the ICS serializer."""

from .datetime_utils import (
    format_ical_utc,
    format_local_iso,
    has_utc_offset,
    load_timezone,
    local_format_of,
    micros_to_utc,
    parse_duration,
    parse_iso,
    parse_local_iso,
    parse_until,
    resolve_local_to_utc,
    utc_to_local,
    validate_duration,
    validate_timezone,
)
from .errors import (
    CalendarError,
    ComputationError,
    PartialDataError,
    RRuleValidationError,
    ValidationError,
    computation_error_from,
)

__all__ = [
    "CalendarError",
    "ComputationError",
    "PartialDataError",
    "RRuleValidationError",
    "ValidationError",
    "computation_error_from",
    "format_ical_utc",
    "format_local_iso",
    "has_utc_offset",
    "load_timezone",
    "local_format_of",
    "micros_to_utc",
    "parse_duration",
    "parse_iso",
    "parse_local_iso",
    "parse_until",
    "resolve_local_to_utc",
    "utc_to_local",
    "validate_duration",
    "validate_timezone",
]
