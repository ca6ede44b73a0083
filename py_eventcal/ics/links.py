"""Add-to-calendar links shown next to an ICS download."""

from __future__ import annotations

from datetime import timedelta
from typing import Any
from urllib.parse import urlencode

from ..internal.datetime_utils import format_ical_utc, parse_duration, resolve_local_to_utc
from .ics import EventRecord

GOOGLE_RENDER_URL = "https://calendar.google.com/calendar/render"
GOOGLE_SUBSCRIBE_URL = "https://calendar.google.com/calendar/r"
OUTLOOK_COMPOSE_URL = "https://outlook.live.com/calendar/0/deeplink/compose"
OUTLOOK_SUBSCRIBE_URL = "https://outlook.live.com/calendar/0/addfromweb"

DEFAULT_EVENT_LENGTH = timedelta(hours=1)


def _record(event: EventRecord | dict[str, Any]) -> EventRecord:
    return event if isinstance(event, EventRecord) else EventRecord.from_dict(event)


def _event_bounds(record: EventRecord):
    """UTC start and end; DTEND, then DURATION, then one hour."""
    start = resolve_local_to_utc(record.dtstart, record.dtstart_tzid)
    if record.dtend:
        end = resolve_local_to_utc(record.dtend, record.dtend_tzid or record.dtstart_tzid)
    elif record.duration:
        end = start + parse_duration(record.duration)
    else:
        end = start + DEFAULT_EVENT_LENGTH
    return start, end


def google_calendar_url(event: EventRecord | dict[str, Any]) -> str:
    """Build a Google Calendar "create event" link.

    Args:
        event: EventRecord or index dictionary with at least summary and dtstart

    Returns:
        URL with action, text, dates and the optional details/location/recur

    Raises:
        ValidationError: If dtstart or duration cannot be parsed
        ComputationError: If the timezone is unknown
    """
    record = _record(event)
    start, end = _event_bounds(record)

    params = {
        "action": "TEMPLATE",
        "text": record.summary or "",
        "dates": f"{format_ical_utc(start)}/{format_ical_utc(end)}",
    }
    if record.description:
        params["details"] = record.description
    if record.location:
        params["location"] = record.location
    if record.rrule:
        params["recur"] = f"RRULE:{record.rrule.removeprefix('RRULE:')}"

    return f"{GOOGLE_RENDER_URL}?{urlencode(params)}"


def outlook_calendar_url(event: EventRecord | dict[str, Any]) -> str:
    """Build an Outlook.com compose link with UTC ISO start and end."""
    record = _record(event)
    start, end = _event_bounds(record)

    params = {
        "path": "/calendar/action/compose",
        "rru": "addevent",
        "subject": record.summary or "",
        "startdt": start.strftime("%Y-%m-%dT%H:%M:%SZ"),
        "enddt": end.strftime("%Y-%m-%dT%H:%M:%SZ"),
    }
    if record.description:
        params["body"] = record.description
    if record.location:
        params["location"] = record.location

    return f"{OUTLOOK_COMPOSE_URL}?{urlencode(params)}"


def webcal_url(ics_url: str) -> str:
    """Rewrite an http(s) feed URL to the webcal:// scheme."""
    for scheme in ("https://", "http://"):
        if ics_url.startswith(scheme):
            return "webcal://" + ics_url[len(scheme):]
    return ics_url


def google_subscribe_url(ics_url: str) -> str:
    """Google Calendar link subscribing to a feed (``cid`` takes an http URL)."""
    return f"{GOOGLE_SUBSCRIBE_URL}?{urlencode({'cid': ics_url})}"


def outlook_subscribe_url(ics_url: str, name: str) -> str:
    """Outlook.com link subscribing to a feed under ``name``."""
    return f"{OUTLOOK_SUBSCRIBE_URL}?{urlencode({'url': ics_url, 'name': name})}"
