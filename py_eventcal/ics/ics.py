"""Event and calendar records for iCalendar export.

iCalendar is defined in RFC 5545. Records arrive from the read-side index
as plain dictionaries; ``from_dict`` accepts both its snake_case keys and
camelCase keys.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, fields
from typing import Any

from ..internal.datetime_utils import (
    is_numeric_timestamp,
    micros_to_utc,
    parse_local_iso,
    validate_duration,
    validate_timezone,
)
from ..internal.errors import ValidationError
from ..recurrence.rrule import parse_rrule

EVENT_STATUSES = ("CONFIRMED", "TENTATIVE", "CANCELLED")

MAX_UID_LENGTH = 255
MAX_SUMMARY_LENGTH = 500
MAX_CALENDAR_NAME_LENGTH = 100

_COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")

_TEXT_FIELDS = (
    "uid",
    "summary",
    "dtstart",
    "dtend",
    "duration",
    "dtstart_tzid",
    "dtend_tzid",
    "description",
    "status",
    "location",
    "geo",
    "url",
    "rrule",
    "image_uri",
)

# camelCase spellings accepted by from_dict
_EVENT_ALIASES = {
    "dtstartTzid": "dtstart_tzid",
    "dtendTzid": "dtend_tzid",
    "lastModified": "last_modified",
    "recurrenceId": "recurrence_id",
    "imageUri": "image_uri",
}


def _as_list(name: str, value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    if not isinstance(value, (list, tuple, set)):
        raise ValidationError(f"{name} must be a list of dates, got {type(value).__name__}")
    return [str(item) for item in value]


@dataclass
class EventRecord:
    """One event as stored by its author.

    ``dtstart``/``dtend`` are ISO-8601 local strings; the timezone lives in
    ``dtstart_tzid``/``dtend_tzid``. ``dtstamp``, ``created`` and
    ``last_modified`` are Unix microseconds.
    """

    uid: str | None = None
    dtstamp: int | None = None
    summary: str | None = None
    dtstart: str | None = None
    dtend: str | None = None
    duration: str | None = None
    dtstart_tzid: str | None = None
    dtend_tzid: str | None = None
    description: str | None = None
    status: str | None = None
    location: str | None = None
    geo: str | None = None
    url: str | None = None
    sequence: int | None = None
    last_modified: int | None = None
    created: int | None = None
    rrule: str | None = None
    rdate: list[str] = field(default_factory=list)
    exdate: list[str] = field(default_factory=list)
    recurrence_id: int | str | None = None
    image_uri: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EventRecord:
        """Build a record from an index response.

        A ``{"details": {...}}`` envelope is unwrapped; unknown keys are
        ignored.
        """
        if isinstance(data.get("details"), dict):
            data = data["details"]

        known = {f.name for f in fields(cls)}
        values: dict[str, Any] = {}
        for key, value in data.items():
            name = _EVENT_ALIASES.get(key, key)
            if name in known and value is not None:
                values[name] = value

        values["rdate"] = _as_list("rdate", values.get("rdate"))
        values["exdate"] = _as_list("exdate", values.get("exdate"))
        return cls(**values)

    def validate(self) -> list[str]:
        """Return human-readable problems; empty when the record can be exported."""
        problems = [
            f"{name} must be a string, got {type(getattr(self, name)).__name__}"
            for name in _TEXT_FIELDS
            if getattr(self, name) is not None and not isinstance(getattr(self, name), str)
        ]
        if problems:
            return problems

        if not self.uid:
            problems.append("uid is required")
        elif len(self.uid) > MAX_UID_LENGTH:
            problems.append(f"uid exceeds {MAX_UID_LENGTH} characters")

        if self.dtstamp is None:
            problems.append("dtstamp is required")
        elif not is_numeric_timestamp(self.dtstamp):
            problems.append("dtstamp must be a microsecond timestamp")
        elif not _in_range(self.dtstamp):
            problems.append("dtstamp is outside the supported date range")

        if not self.summary:
            problems.append("summary is required")
        elif len(self.summary) > MAX_SUMMARY_LENGTH:
            problems.append(f"summary exceeds {MAX_SUMMARY_LENGTH} characters")

        if not self.dtstart:
            problems.append("dtstart is required")

        for name in ("dtstart", "dtend"):
            value = getattr(self, name)
            if value:
                try:
                    parse_local_iso(value)
                except ValidationError:
                    problems.append(f"{name} is not an ISO-8601 datetime: {value!r}")

        for name in ("rdate", "exdate"):
            for value in getattr(self, name):
                try:
                    parse_local_iso(value)
                except ValidationError:
                    problems.append(f"{name} entry is not an ISO-8601 datetime: {value!r}")

        for name in ("dtstart_tzid", "dtend_tzid"):
            value = getattr(self, name)
            if value and not validate_timezone(value):
                problems.append(f"{name} is not an IANA timezone: {value!r}")

        if self.duration and not validate_duration(self.duration):
            problems.append(f"duration is not an RFC 5545 duration: {self.duration!r}")

        if self.status and self.status.upper() not in EVENT_STATUSES:
            problems.append(f"status must be one of {', '.join(EVENT_STATUSES)}")

        if self.rrule:
            try:
                parse_rrule(self.rrule)
            except ValidationError as e:
                problems.append(str(e))

        for name in ("sequence", "created", "last_modified"):
            value = getattr(self, name)
            if value is None:
                continue
            if not is_numeric_timestamp(value):
                problems.append(f"{name} must be an integer")
            elif name != "sequence" and not _in_range(value):
                problems.append(f"{name} is outside the supported date range")

        if self.geo and parse_geo(self.geo) is None:
            problems.append(f"geo must be 'lat;lon': {self.geo!r}")

        return problems


def _in_range(micros: int | str) -> bool:
    try:
        micros_to_utc(micros)
    except ValidationError:
        return False
    return True


def parse_geo(geo: str) -> tuple[float, float] | None:
    """Parse ``"lat;lon"`` into a coordinate pair, or None if malformed."""
    parts = geo.split(";")
    if len(parts) != 2:
        return None
    try:
        lat, lon = float(parts[0]), float(parts[1])
    except ValueError:
        return None
    if not (-90 <= lat <= 90 and -180 <= lon <= 180):
        return None
    return lat, lon


@dataclass
class CalendarMetadata:
    """Calendar-level properties of a feed. Does not own the events."""

    name: str
    description: str | None = None
    timezone: str | None = None
    color: str | None = None
    url: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CalendarMetadata:
        if isinstance(data.get("details"), dict):
            data = data["details"]
        return cls(
            name=data.get("name") or "",
            description=data.get("description"),
            timezone=data.get("timezone"),
            color=data.get("color"),
            url=data.get("url"),
        )

    def validate(self) -> list[str]:
        problems: list[str] = []
        if not self.name:
            problems.append("calendar name is required")
        elif len(self.name) > MAX_CALENDAR_NAME_LENGTH:
            problems.append(f"calendar name exceeds {MAX_CALENDAR_NAME_LENGTH} characters")
        if self.color and not _COLOR_RE.match(self.color):
            problems.append(f"color must be #RRGGBB: {self.color!r}")
        if self.timezone and not validate_timezone(self.timezone):
            problems.append(f"timezone is not an IANA timezone: {self.timezone!r}")
        return problems


@dataclass
class ICSResult:
    """Outcome of a serialization: text on success, a reason on failure.

    Check ``success`` before using ``value``.
    """

    success: bool
    value: str | None = None
    error: str | None = None

    @classmethod
    def ok(cls, value: str) -> ICSResult:
        return cls(success=True, value=value)

    @classmethod
    def fail(cls, error: str) -> ICSResult:
        return cls(success=False, error=error)

    def unwrap(self) -> str:
        """Return the text or raise ValidationError with the failure reason."""
        if not self.success or self.value is None:
            raise ValidationError(self.error or "serialization failed")
        return self.value
