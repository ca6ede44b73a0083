"""iCalendar (RFC 5545) export of events and calendars."""

from .generator import event_to_vevent, serialize_calendar, serialize_event
from .ics import (
    EVENT_STATUSES,
    CalendarMetadata,
    EventRecord,
    ICSResult,
    parse_geo,
)
from .links import (
    google_calendar_url,
    google_subscribe_url,
    outlook_calendar_url,
    outlook_subscribe_url,
    webcal_url,
)

__all__ = [
    "EVENT_STATUSES",
    "CalendarMetadata",
    "EventRecord",
    "ICSResult",
    "event_to_vevent",
    "google_calendar_url",
    "google_subscribe_url",
    "outlook_calendar_url",
    "outlook_subscribe_url",
    "parse_geo",
    "serialize_calendar",
    "serialize_event",
    "webcal_url",
]
