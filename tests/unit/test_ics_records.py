"""Tests for event and calendar records."""

import pytest

from py_eventcal.internal.errors import ValidationError
from py_eventcal.ics.ics import CalendarMetadata, EventRecord, ICSResult, parse_geo

VALID_EVENT = {
    "uid": "evt-1",
    "dtstamp": 1767225600000000,
    "summary": "Standup",
    "dtstart": "2026-03-02T10:00:00",
    "dtstartTzid": "America/New_York",
}


def test_from_dict_maps_camel_case():
    record = EventRecord.from_dict(
        {
            **VALID_EVENT,
            "dtendTzid": "Europe/Berlin",
            "lastModified": 5,
            "recurrenceId": 7,
            "imageUri": "https://example.com/a.png",
            "unknownKey": "ignored",
        }
    )

    assert record.dtstart_tzid == "America/New_York"
    assert record.dtend_tzid == "Europe/Berlin"
    assert record.last_modified == 5
    assert record.recurrence_id == 7
    assert record.image_uri == "https://example.com/a.png"


def test_from_dict_unwraps_details_envelope():
    record = EventRecord.from_dict({"details": VALID_EVENT, "event_uri": "pubky://x"})

    assert record.uid == "evt-1"
    assert record.validate() == []


def test_from_dict_splits_date_lists():
    record = EventRecord.from_dict(
        {**VALID_EVENT, "rdate": "2026-03-04T10:00:00, 2026-03-05T10:00:00", "exdate": None}
    )

    assert record.rdate == ["2026-03-04T10:00:00", "2026-03-05T10:00:00"]
    assert record.exdate == []


def test_validate_required_fields():
    """Test that every missing required field is reported."""
    problems = EventRecord().validate()

    assert "uid is required" in problems
    assert "dtstamp is required" in problems
    assert "summary is required" in problems
    assert "dtstart is required" in problems


def test_validate_bounds_and_formats():
    record = EventRecord.from_dict(
        {
            **VALID_EVENT,
            "uid": "u" * 256,
            "summary": "s" * 501,
            "dtend": "later",
            "duration": "90 minutes",
            "status": "MAYBE",
            "rrule": "FREQ=HOURLY",
            "geo": "91;0",
            "dtendTzid": "Moon/Base",
            "sequence": "one",
        }
    )

    problems = "\n".join(record.validate())

    assert "uid exceeds 255" in problems
    assert "summary exceeds 500" in problems
    assert "dtend is not an ISO-8601 datetime" in problems
    assert "duration is not an RFC 5545 duration" in problems
    assert "status must be one of" in problems
    assert "unsupported FREQ" in problems
    assert "geo must be" in problems
    assert "dtend_tzid is not an IANA timezone" in problems
    assert "sequence must be an integer" in problems


def test_status_is_case_insensitive():
    assert EventRecord.from_dict({**VALID_EVENT, "status": "tentative"}).validate() == []


def test_parse_geo():
    assert parse_geo("52.52;13.405") == (52.52, 13.405)
    assert parse_geo("52.52,13.405") is None
    assert parse_geo("north;east") is None
    assert parse_geo("0;181") is None


def test_calendar_metadata_validate():
    assert CalendarMetadata("Team", color="#1A2b3C", timezone="Europe/Berlin").validate() == []

    problems = CalendarMetadata("", color="red", timezone="Nowhere").validate()
    assert "calendar name is required" in problems
    assert any("color must be #RRGGBB" in p for p in problems)
    assert any("timezone is not an IANA timezone" in p for p in problems)

    assert CalendarMetadata("x" * 101).validate() == ["calendar name exceeds 100 characters"]


def test_calendar_metadata_from_dict():
    metadata = CalendarMetadata.from_dict({"details": {"name": "Team", "color": "#000000"}})

    assert metadata.name == "Team"
    assert metadata.color == "#000000"
    assert metadata.description is None


def test_ics_result():
    assert ICSResult.ok("BEGIN:VCALENDAR").unwrap() == "BEGIN:VCALENDAR"

    failed = ICSResult.fail("summary is required")
    assert not failed.success
    assert failed.value is None
    with pytest.raises(ValidationError, match="summary is required"):
        failed.unwrap()


def test_validate_reports_non_string_fields():
    """Test that wrongly typed text fields are reported instead of raising."""
    problems = EventRecord.from_dict({**VALID_EVENT, "summary": 123, "location": {"x": 1}}).validate()

    assert problems == ["summary must be a string, got int", "location must be a string, got dict"]


def test_validate_reports_out_of_range_timestamps():
    problems = EventRecord.from_dict({**VALID_EVENT, "dtstamp": 10**20, "created": "-99999999999999999999"}).validate()

    assert "dtstamp is outside the supported date range" in problems
    assert "created is outside the supported date range" in problems


@pytest.mark.parametrize("value", [5, 1.5, {"when": "2026-03-04"}])
def test_from_dict_rejects_scalar_date_lists(value):
    with pytest.raises(ValidationError, match="rdate must be a list of dates"):
        EventRecord.from_dict({**VALID_EVENT, "rdate": value})
