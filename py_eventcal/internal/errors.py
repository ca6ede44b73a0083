"""Error taxonomy shared by the recurrence engine and the ICS serializer."""

from __future__ import annotations


class CalendarError(Exception):
    """Base class for all py-eventcal errors.

    Carries a human-readable message so that callers can surface it
    directly in a failure result.
    """

    def __init__(self, message: str, err: Exception | None = None):
        self.message = message
        self.err = err
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.err:
            return f"{self.message}: {self.err}"
        return self.message


class ValidationError(CalendarError, ValueError):
    """Input data is malformed: a bad RRULE, a missing required field, etc.

    Never retried and never silently defaulted.
    """


class RRuleValidationError(ValidationError):
    """An RRULE string does not match the accepted grammar."""

    def __init__(self, rrule: str, reason: str):
        self.rrule = rrule
        self.reason = reason
        super().__init__(f"invalid RRULE {rrule!r}: {reason}")


class PartialDataError(CalendarError):
    """A single event of a calendar-wide export is unusable and was skipped."""

    def __init__(self, uid: str | None, problems: list[str]):
        self.uid = uid
        self.problems = problems
        super().__init__(f"skipping event {uid or '<no uid>'}: {'; '.join(problems)}")


class ComputationError(CalendarError):
    """Date arithmetic failed unexpectedly (unknown timezone, overflow, ...)."""


def computation_error_from(err: Exception, context: str) -> CalendarError:
    """Wrap an arbitrary exception, leaving our own errors untouched."""
    if isinstance(err, CalendarError):
        return err
    return ComputationError(context, err)
