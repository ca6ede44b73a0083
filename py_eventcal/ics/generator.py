"""iCalendar serialization of events and calendars.

Turns EventRecords into RFC 5545 text for subscription feeds (webcal://)
and single-event downloads. TEXT escaping and 75-octet line folding are
done by ``icalendar``; this module decides which properties are written
and in which form:

- DTSTART/DTEND/RDATE/EXDATE keep the author's wall-clock value and carry
  a ``TZID`` parameter when a timezone is known. Local values never get a
  ``Z`` suffix.
- DTSTAMP/CREATED/LAST-MODIFIED/RECURRENCE-ID are Unix microseconds and
  are written in UTC form.
- Nothing reads the current time, so the same record always serializes to
  the same bytes.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import UTC, date, datetime
from typing import Any

from icalendar import Calendar as iCalendar
from icalendar import Event as iEvent
from icalendar.prop import vInline, vText

from ..config import ExportConfig
from ..debug import log_ics_output
from ..internal.datetime_utils import (
    has_utc_offset,
    is_numeric_timestamp,
    micros_to_utc,
    parse_duration,
    parse_iso,
    parse_local_iso,
)
from ..internal.errors import CalendarError, PartialDataError, ValidationError
from ..recurrence.rrule import strip_rrule_prefix
from .ics import CalendarMetadata, EventRecord, ICSResult, parse_geo

logger = logging.getLogger("py_eventcal.ics")

EventInput = EventRecord | dict[str, Any]


def _to_record(event: EventInput) -> EventRecord:
    if isinstance(event, EventRecord):
        return event
    if isinstance(event, dict):
        return EventRecord.from_dict(event)
    raise ValidationError(f"cannot serialize {type(event).__name__} as an event")


def _local_value(value: str) -> datetime | date:
    """Wall-clock value of a local ISO string; bare dates stay dates."""
    parsed = parse_local_iso(value)
    if len(value.strip()) == 10:
        return parsed.date()
    return parsed


def _add_local_datetime(event: iEvent, name: str, value: str, tzid: str | None) -> None:
    """Add DTSTART/DTEND, with TZID when known and never a ``Z`` for local values."""
    if has_utc_offset(value):
        # The author pinned an absolute instant
        event.add(name, parse_iso(value).astimezone(UTC))
        return

    local = _local_value(value)
    if tzid and isinstance(local, datetime):
        event.add(name, local, parameters={"TZID": tzid})
    else:
        event.add(name, local)


def _add_date_list(event: iEvent, name: str, values: list[str], tzid: str | None) -> None:
    """Add RDATE/EXDATE as one comma-joined property line."""
    dates = [_local_value(value) for value in values]
    if tzid and all(isinstance(d, datetime) for d in dates):
        event.add(name, dates, parameters={"TZID": tzid})
    else:
        event.add(name, dates)


def event_to_vevent(record: EventRecord, calendar_name: str | None = None) -> iEvent:
    """Convert a validated EventRecord into a VEVENT component.

    Args:
        record: Event with no validation problems
        calendar_name: Added as CATEGORIES when given

    Returns:
        icalendar Event component
    """
    event = iEvent()

    event.add("uid", record.uid)
    event.add("summary", record.summary)
    event.add("dtstamp", micros_to_utc(record.dtstamp))

    _add_local_datetime(event, "dtstart", record.dtstart, record.dtstart_tzid)

    # DTEND wins when a record carries both
    if record.dtend:
        _add_local_datetime(event, "dtend", record.dtend, record.dtend_tzid or record.dtstart_tzid)
    elif record.duration:
        event.add("duration", parse_duration(record.duration))

    if record.description:
        event.add("description", record.description)

    if record.location:
        event.add("location", record.location)

    if record.geo:
        event.add("geo", parse_geo(record.geo))

    if record.url:
        event.add("url", record.url)

    if record.image_uri:
        event.add("image", record.image_uri, parameters={"VALUE": "URI"})

    if record.status:
        event.add("status", record.status.upper())

    if record.sequence is not None:
        event.add("sequence", int(record.sequence))

    if record.created is not None:
        event.add("created", micros_to_utc(record.created))

    if record.last_modified is not None:
        event.add("last-modified", micros_to_utc(record.last_modified))

    # Recurrence
    if record.rrule:
        event.add("rrule", vInline(strip_rrule_prefix(record.rrule)))

    if record.rdate:
        _add_date_list(event, "rdate", record.rdate, record.dtstart_tzid)

    if record.exdate:
        _add_date_list(event, "exdate", record.exdate, record.dtstart_tzid)

    if record.recurrence_id is not None and is_numeric_timestamp(record.recurrence_id):
        event.add("recurrence-id", micros_to_utc(record.recurrence_id))

    if calendar_name:
        event.add("categories", [calendar_name])

    return event


def _new_calendar(config: ExportConfig) -> iCalendar:
    cal = iCalendar()
    cal.add("prodid", config.prodid)
    cal.add("version", "2.0")
    cal.add("calscale", "GREGORIAN")
    cal.add("method", "PUBLISH")
    return cal


def _add_calendar_metadata(cal: iCalendar, metadata: CalendarMetadata) -> None:
    # X- and RFC 7986 names are untyped in icalendar; vText gets them escaped
    cal.add("x-wr-calname", vText(metadata.name))
    cal.add("name", vText(metadata.name))
    if metadata.description:
        cal.add("x-wr-caldesc", vText(metadata.description))
    if metadata.timezone:
        cal.add("x-wr-timezone", vText(metadata.timezone))
    if metadata.color:
        cal.add("color", vText(metadata.color))
    if metadata.url:
        cal.add("url", metadata.url)


def serialize_event(
    event: EventInput,
    calendar_name: str | None = None,
    config: ExportConfig | None = None,
) -> ICSResult:
    """Serialize one event as a VCALENDAR with a single VEVENT.

    The feed name (X-WR-CALNAME/NAME) is ``calendar_name`` or, failing
    that, the event summary, so subscribing clients show a meaningful title.

    Args:
        event: EventRecord or index dictionary
        calendar_name: Optional calendar the event belongs to
        config: Export configuration (defaults from the environment)

    Returns:
        ICSResult with the text, or the reason the event cannot be exported

    Example:
        >>> result = serialize_event({"uid": "e1", "dtstamp": 0, "summary": "Sync",
        ...                           "dtstart": "2026-03-02T10:00:00"})
        >>> result.success
        True
    """
    config = config or ExportConfig.from_env()
    try:
        record = _to_record(event)
        problems = record.validate()
        if problems:
            return ICSResult.fail(f"invalid event {record.uid or '<no uid>'}: {'; '.join(problems)}")

        cal = _new_calendar(config)
        _add_calendar_metadata(cal, CalendarMetadata(name=calendar_name or record.summary))
        cal.add_component(event_to_vevent(record, calendar_name))
        ical = cal.to_ical().decode("utf-8")
    except CalendarError as e:
        return ICSResult.fail(str(e))
    except Exception as e:
        logger.exception("Unexpected error serializing event")
        return ICSResult.fail(f"failed to generate ICS: {e}")

    log_ics_output(record.uid, ical)
    return ICSResult.ok(ical)


def serialize_calendar(
    events: Iterable[EventInput],
    metadata: CalendarMetadata | dict[str, Any] | None = None,
    config: ExportConfig | None = None,
) -> ICSResult:
    """Serialize a calendar feed with one VEVENT per valid event.

    Events that cannot be exported are skipped and logged; the rest of the
    feed is still produced. An empty event list yields a VCALENDAR that
    carries only the calendar properties.

    Args:
        events: EventRecords or index dictionaries
        metadata: Calendar name, description, timezone, color and url
        config: Export configuration (defaults from the environment)

    Returns:
        ICSResult with the feed text, or the reason the metadata is unusable
    """
    config = config or ExportConfig.from_env()
    try:
        if metadata is None:
            metadata = CalendarMetadata(name=config.default_calendar_name)
        elif isinstance(metadata, dict):
            metadata = CalendarMetadata.from_dict(metadata)
        problems = metadata.validate()
        if problems:
            return ICSResult.fail(f"invalid calendar metadata: {'; '.join(problems)}")

        cal = _new_calendar(config)
        _add_calendar_metadata(cal, metadata)

        exported = 0
        for event in events:
            try:
                record = _to_record(event)
                problems = record.validate()
                if problems:
                    raise PartialDataError(record.uid, problems)
                cal.add_component(event_to_vevent(record, metadata.name))
                exported += 1
            except CalendarError as e:
                # Log error but continue processing other events
                logger.warning(str(e))
                continue
            except Exception as e:
                uid = event.get("uid") if isinstance(event, dict) else getattr(event, "uid", None)
                logger.warning(f"skipping event {uid or '<no uid>'}: {e}")
                continue

        ical = cal.to_ical().decode("utf-8")
    except CalendarError as e:
        return ICSResult.fail(str(e))
    except Exception as e:
        logger.exception("Unexpected error serializing calendar")
        return ICSResult.fail(f"failed to generate ICS: {e}")

    logger.debug(f"Serialized {exported} events for calendar {metadata.name!r}")
    log_ics_output(metadata.name, ical)
    return ICSResult.ok(ical)
