"""Tests for the error taxonomy."""

from py_eventcal.internal.errors import (
    CalendarError,
    ComputationError,
    PartialDataError,
    RRuleValidationError,
    ValidationError,
    computation_error_from,
)


def test_error_message_includes_cause():
    err = ComputationError("unknown timezone 'X'", KeyError("X"))

    assert str(err) == "unknown timezone 'X': 'X'"
    assert err.message == "unknown timezone 'X'"


def test_rrule_validation_error():
    err = RRuleValidationError("FREQ=HOURLY", "unsupported FREQ HOURLY")

    assert isinstance(err, ValidationError)
    assert isinstance(err, ValueError)
    assert err.rrule == "FREQ=HOURLY"
    assert str(err) == "invalid RRULE 'FREQ=HOURLY': unsupported FREQ HOURLY"


def test_partial_data_error():
    err = PartialDataError(None, ["uid is required", "summary is required"])

    assert str(err) == "skipping event <no uid>: uid is required; summary is required"


def test_computation_error_from():
    """Test that foreign exceptions are wrapped and our own pass through."""
    own = ValidationError("bad")
    assert computation_error_from(own, "ctx") is own

    wrapped = computation_error_from(OverflowError("date value out of range"), "expansion failed")
    assert isinstance(wrapped, ComputationError)
    assert isinstance(wrapped, CalendarError)
    assert str(wrapped) == "expansion failed: date value out of range"
