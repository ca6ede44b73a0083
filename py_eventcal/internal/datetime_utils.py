"""Shared datetime-format helpers.

Events carry their times as ISO-8601 *local* strings
(``2026-03-02T10:00:00``) with the IANA timezone stored separately. The
string is the wall-clock time in that zone, so nothing here ever converts a
local value through the host's timezone. The only local-to-UTC conversion
is :func:`resolve_local_to_utc`, which both the recurrence engine and the
ICS serializer use.
"""

from __future__ import annotations

import re
from datetime import UTC, date, datetime, time, timedelta, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from icalendar import vDuration

from .errors import ComputationError, ValidationError

LOCAL_ISO_FORMAT = "%Y-%m-%dT%H:%M:%S"
LOCAL_DATE_FORMAT = "%Y-%m-%d"
LOCAL_MINUTE_FORMAT = "%Y-%m-%dT%H:%M"
ICAL_UTC_FORMAT = "%Y%m%dT%H%M%SZ"

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)

# Offset or Z suffix after the time part (the date part also contains "-")
_OFFSET_RE = re.compile(r"T[0-9:.]+(Z|[+-]\d{2}(:?\d{2})?)$", re.IGNORECASE)
_LOCAL_RE = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})(?:[T ](\d{2}):(\d{2})(?::(\d{2})(?:\.\d+)?)?)?"
)
_INTEGER_RE = re.compile(r"^-?[0-9]+$")
_ICAL_DATE_RE = re.compile(r"^(\d{4})(\d{2})(\d{2})(?:T(\d{2})(\d{2})(\d{2})(Z)?)?$", re.IGNORECASE)
_DURATION_RE = re.compile(
    r"^([+-])?P(?:([0-9]+)W|(?:([0-9]+)D)?(?:T(?=[0-9])(?:([0-9]+)H)?(?:([0-9]+)M)?(?:([0-9]+)S)?)?)$"
)


def has_utc_offset(value: str) -> bool:
    """Check whether an ISO string pins an absolute instant (``Z`` or ``+hh:mm``)."""
    return bool(_OFFSET_RE.search(value.strip()))


def parse_iso(value: str) -> datetime:
    """Parse an ISO-8601 datetime, keeping any offset it carries.

    Raises:
        ValidationError: If the string is not an ISO-8601 date or datetime
    """
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"invalid ISO-8601 datetime: {value!r}")
    try:
        return datetime.fromisoformat(value.strip())
    except ValueError as e:
        raise ValidationError(f"invalid ISO-8601 datetime: {value!r}", e) from e


def parse_local_iso(value: str) -> datetime:
    """Parse an ISO-8601 string into a naive wall-clock datetime.

    The wall-clock components are taken as written; a trailing ``Z`` or
    offset is ignored rather than converted. A bare date means midnight.

    Example:
        >>> parse_local_iso("2026-03-02T10:00:00")
        datetime.datetime(2026, 3, 2, 10, 0)
    """
    if not isinstance(value, str):
        raise ValidationError(f"invalid ISO-8601 local datetime: {value!r}")
    match = _LOCAL_RE.match(value.strip())
    if not match:
        raise ValidationError(f"invalid ISO-8601 local datetime: {value!r}")
    year, month, day, hour, minute, second = (int(g) if g else 0 for g in match.groups())
    try:
        return datetime(year, month, day, hour, minute, second)
    except ValueError as e:
        raise ValidationError(f"invalid ISO-8601 local datetime: {value!r}", e) from e


def format_local_iso(dt: datetime) -> str:
    """Format a datetime as ``YYYY-MM-DDTHH:MM:SS`` without any offset."""
    return dt.strftime(LOCAL_ISO_FORMAT)


def local_format_of(value: str) -> str:
    """strftime pattern that reproduces the shape of a local ISO string.

    Example:
        >>> local_format_of("2026-03-02")
        '%Y-%m-%d'
    """
    text = value.strip()
    if len(text) == 10:
        return LOCAL_DATE_FORMAT
    if len(text) == 16:
        return LOCAL_MINUTE_FORMAT
    return LOCAL_ISO_FORMAT


def format_ical_utc(dt: datetime) -> str:
    """Format an instant in iCalendar UTC form, e.g. ``20260302T150000Z``."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC).strftime(ICAL_UTC_FORMAT)


def load_timezone(tzid: str) -> tzinfo:
    """Look up an IANA timezone.

    Raises:
        ComputationError: If the id is not in the timezone database
    """
    try:
        return ZoneInfo(tzid)
    except (ZoneInfoNotFoundError, ValueError, TypeError) as e:
        raise ComputationError(f"unknown timezone {tzid!r}", e) from e


def validate_timezone(tzid: str) -> bool:
    """Check that ``tzid`` names a zone in the IANA database."""
    if not tzid or not isinstance(tzid, str):
        return False
    try:
        load_timezone(tzid)
    except ComputationError:
        return False
    return True


def resolve_local_to_utc(local_iso: str | datetime, tzid: str | None = None) -> datetime:
    """Resolve a wall-clock time in ``tzid`` to a UTC instant.

    Floating values (no ``tzid``) resolve as UTC. A string that already
    carries an offset is converted from that offset and ``tzid`` is
    ignored. Non-existent local times in a DST gap resolve with
    ``fold=0`` semantics.

    Args:
        local_iso: ISO-8601 local string or naive datetime
        tzid: IANA timezone identifier

    Returns:
        Timezone-aware datetime in UTC

    Example:
        >>> resolve_local_to_utc("2026-03-02T10:00:00", "America/New_York")
        datetime.datetime(2026, 3, 2, 15, 0, tzinfo=datetime.timezone.utc)
    """
    if isinstance(local_iso, str):
        if has_utc_offset(local_iso):
            return parse_iso(local_iso).astimezone(UTC)
        local_dt = parse_local_iso(local_iso)
    elif local_iso.tzinfo is not None:
        return local_iso.astimezone(UTC)
    else:
        local_dt = local_iso

    zone = load_timezone(tzid) if tzid else UTC
    return local_dt.replace(tzinfo=zone).astimezone(UTC)


def utc_to_local(instant: datetime, tzid: str | None = None) -> datetime:
    """Express a UTC instant as a naive wall-clock datetime in ``tzid``."""
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=UTC)
    zone = load_timezone(tzid) if tzid else UTC
    return instant.astimezone(zone).replace(tzinfo=None)


def micros_to_utc(micros: int | float | str) -> datetime:
    """Convert Unix microseconds to an aware UTC datetime.

    Raises:
        ValidationError: If the value is not numeric or falls outside the
            datetime range
    """
    try:
        value = int(micros)
    except (TypeError, ValueError, OverflowError) as e:
        raise ValidationError(f"invalid microsecond timestamp: {micros!r}", e) from e
    try:
        return _EPOCH + timedelta(microseconds=value)
    except OverflowError as e:
        raise ValidationError(f"microsecond timestamp out of range: {micros!r}", e) from e


def is_numeric_timestamp(value: object) -> bool:
    """True for ints and digit-only strings (bools excluded)."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, str) and bool(_INTEGER_RE.match(value.strip()))


def parse_until(value: str, tzid: str | None = None) -> datetime:
    """Parse an RRULE UNTIL value into a naive wall-clock bound.

    Accepts iCalendar forms (``20260401``, ``20260401T090000``,
    ``20260401T090000Z``) and ISO-8601 forms. UTC values are moved into the
    wall-clock of ``tzid``. A date-only value covers the whole day.

    Raises:
        ValidationError: If the value matches neither form
    """
    text = value.strip()
    match = _ICAL_DATE_RE.match(text)
    if match:
        year, month, day = (int(g) for g in match.group(1, 2, 3))
        try:
            if match.group(4) is None:
                return datetime.combine(date(year, month, day), time(23, 59, 59))
            bound = datetime(year, month, day, *(int(g) for g in match.group(4, 5, 6)))
        except ValueError as e:
            raise ValidationError(f"invalid UNTIL value: {value!r}", e) from e
        if match.group(7):
            return utc_to_local(bound.replace(tzinfo=UTC), tzid)
        return bound

    if "T" not in text.upper():
        return datetime.combine(parse_local_iso(text).date(), time(23, 59, 59))
    if has_utc_offset(text):
        return utc_to_local(parse_iso(text), tzid)
    return parse_local_iso(text)


def parse_duration(value: str) -> timedelta:
    """Parse an RFC 5545 duration (``PT1H30M``, ``P1D``, ``P2W``).

    Weeks cannot be combined with other units and at least one unit is
    required; the conversion itself is icalendar's.

    Raises:
        ValidationError: If the string is not a duration or is too large
    """
    text = value.strip().upper() if isinstance(value, str) else ""
    if not _DURATION_RE.match(text) or text.lstrip("+-") == "P":
        raise ValidationError(f"invalid duration: {value!r}")
    try:
        return vDuration.from_ical(text)
    except (ValueError, OverflowError) as e:
        raise ValidationError(f"invalid duration: {value!r}", e) from e


def validate_duration(value: str) -> bool:
    try:
        parse_duration(value)
    except ValidationError:
        return False
    return True


def format_duration(value: str | timedelta) -> str:
    """Format a duration for display: ``45 min``, ``1 hour``, ``1h 30m``."""
    delta = value if isinstance(value, timedelta) else parse_duration(value)
    total_minutes = int(delta.total_seconds()) // 60
    hours, minutes = divmod(total_minutes, 60)

    if hours == 0:
        return f"{minutes} min"
    if minutes == 0:
        return "1 hour" if hours == 1 else f"{hours} hours"
    return f"{hours}h {minutes}m"


def duration_to_iso(hours: int, minutes: int) -> str:
    """Build an ISO-8601 duration from hours and minutes; empty for zero."""
    if hours == 0 and minutes == 0:
        return ""
    iso = "PT"
    if hours > 0:
        iso += f"{hours}H"
    if minutes > 0:
        iso += f"{minutes}M"
    return iso
