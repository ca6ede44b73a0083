"""Tests for the py-eventcal command-line tool."""

import json

import pytest

from py_eventcal.cmd.cli import main

EVENT = {
    "uid": "evt-1",
    "dtstamp": 1767225600000000,
    "summary": "Standup",
    "dtstart": "2026-03-02T10:00:00",
    "dtstartTzid": "America/New_York",
    "rrule": "FREQ=WEEKLY;BYDAY=MO",
}


def test_occurrences_local(capsys):
    """Test that occurrences print one per line in local time."""
    code = main(
        [
            "occurrences",
            "--rrule", "FREQ=WEEKLY;BYDAY=MO",
            "--dtstart", "2026-03-02T10:00:00",
            "--tzid", "America/New_York",
            "--exdate", "2026-03-09T10:00:00",
            "--max-count", "3",
        ]
    )

    assert code == 0
    assert capsys.readouterr().out.splitlines() == [
        "2026-03-02T10:00:00",
        "2026-03-16T10:00:00",
        "2026-03-23T10:00:00",
    ]


def test_occurrences_utc(capsys):
    code = main(
        [
            "occurrences",
            "--rrule", "FREQ=WEEKLY;COUNT=2",
            "--dtstart", "2026-03-02T10:00:00",
            "--tzid", "America/New_York",
            "--utc",
        ]
    )

    assert code == 0
    assert capsys.readouterr().out.splitlines() == ["2026-03-02T15:00:00Z", "2026-03-09T14:00:00Z"]


def test_occurrences_max_count_from_env(monkeypatch, capsys):
    monkeypatch.setenv("EVENTCAL_MAX_OCCURRENCES", "2")

    assert main(["occurrences", "--rrule", "FREQ=DAILY", "--dtstart", "2026-01-01T08:00:00"]) == 0
    assert len(capsys.readouterr().out.splitlines()) == 2


def test_occurrences_invalid_rule(capsys):
    code = main(["occurrences", "--rrule", "FREQ=DAILY;INTERVAL=0", "--dtstart", "2026-01-01T08:00:00"])

    assert code == 1
    assert "INTERVAL" in capsys.readouterr().err


def test_validate(capsys):
    assert main(["validate", "FREQ=MONTHLY;BYDAY=MO;BYSETPOS=-1"]) == 0
    assert capsys.readouterr().out.strip() == "valid"

    assert main(["validate", "FREQ=MONTHLY;BYSETPOS=0"]) == 1
    assert "BYSETPOS" in capsys.readouterr().err


def test_event_export(tmp_path, capsys):
    path = tmp_path / "event.json"
    path.write_text(json.dumps({"details": EVENT}), encoding="utf-8")

    assert main(["event", str(path), "--calendar-name", "Team"]) == 0

    out = capsys.readouterr().out
    assert "DTSTART;TZID=America/New_York:20260302T100000" in out
    assert "RRULE:FREQ=WEEKLY;BYDAY=MO" in out
    assert "X-WR-CALNAME:Team" in out


def test_event_export_reports_invalid_event(tmp_path, capsys):
    path = tmp_path / "event.json"
    path.write_text(json.dumps({"uid": "evt-1"}), encoding="utf-8")

    assert main(["event", str(path)]) == 1
    assert "summary is required" in capsys.readouterr().err


def test_calendar_export(tmp_path, capsys):
    path = tmp_path / "calendar.json"
    path.write_text(
        json.dumps(
            {
                "metadata": {"name": "Team", "color": "#00AA00"},
                "events": [EVENT, {**EVENT, "uid": "evt-2", "summary": ""}],
            }
        ),
        encoding="utf-8",
    )

    assert main(["calendar", str(path)]) == 0

    out = capsys.readouterr().out
    assert out.count("BEGIN:VEVENT") == 1
    assert "COLOR:#00AA00" in out


def test_calendar_export_rejects_non_object(tmp_path, capsys):
    path = tmp_path / "calendar.json"
    path.write_text("[]", encoding="utf-8")

    assert main(["calendar", str(path)]) == 1
    assert "metadata" in capsys.readouterr().err


def test_missing_file(tmp_path, capsys):
    assert main(["event", str(tmp_path / "missing.json")]) == 1
    assert "Error:" in capsys.readouterr().err


def test_command_is_required():
    with pytest.raises(SystemExit):
        main([])
