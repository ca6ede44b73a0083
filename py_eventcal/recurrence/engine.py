"""Recurrence expansion.

Occurrences are computed in local civil time: ``dateutil.rrule`` is fed the
naive wall-clock ``dtstart`` so every step (day, week, month, year) keeps
the hour, minute and second fixed. The UTC instant of each occurrence is
re-derived afterwards against ``dtstart_tzid``, which is what makes a weekly
10:00 meeting stay at 10:00 across a DST change.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from itertools import islice
from typing import Any

from dateutil.relativedelta import relativedelta
from dateutil.rrule import DAILY, FR, MO, MONTHLY, SA, SU, TH, TU, WE, WEEKLY, YEARLY
from dateutil.rrule import rrule as dateutil_rrule
from dateutil.rrule import rruleset

from ..internal.datetime_utils import (
    load_timezone,
    local_format_of,
    parse_local_iso,
    parse_until,
    resolve_local_to_utc,
)
from ..internal.errors import CalendarError, ValidationError, computation_error_from
from .rrule import WEEKDAY_CODES, Frequency, RecurrenceRule, parse_rrule

logger = logging.getLogger("py_eventcal.recurrence")

DEFAULT_MAX_COUNT = 10

# Calendar patterns repeat every 400 years
HORIZON_YEARS = 400

_FREQUENCIES = {
    Frequency.DAILY: DAILY,
    Frequency.WEEKLY: WEEKLY,
    Frequency.MONTHLY: MONTHLY,
    Frequency.YEARLY: YEARLY,
}
_WEEKDAYS = (MO, TU, WE, TH, FR, SA, SU)
_PERIOD_UNITS = {
    Frequency.DAILY: "days",
    Frequency.WEEKLY: "weeks",
    Frequency.MONTHLY: "months",
    Frequency.YEARLY: "years",
}


@dataclass
class RecurrenceSpec:
    """Everything needed to expand one recurring event."""

    rrule: str
    dtstart: str
    dtstart_tzid: str | None = None
    rdate: list[str] = field(default_factory=list)
    exdate: list[str] = field(default_factory=list)
    max_count: int = DEFAULT_MAX_COUNT

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RecurrenceSpec:
        """Build a spec from snake_case or camelCase keys."""

        def pick(*keys: str, default: Any = None) -> Any:
            for key in keys:
                if data.get(key) is not None:
                    return data[key]
            return default

        return cls(
            rrule=pick("rrule", default=""),
            dtstart=pick("dtstart", default=""),
            dtstart_tzid=pick("dtstart_tzid", "dtstartTzid"),
            rdate=list(pick("rdate", "rdates", default=[])),
            exdate=list(pick("exdate", "exdates", default=[])),
            max_count=pick("max_count", "maxCount", default=DEFAULT_MAX_COUNT),
        )


def _to_dateutil(rule: RecurrenceRule, dtstart: datetime, until: datetime) -> dateutil_rrule:
    byweekday = [
        _WEEKDAYS[day.index](day.ordinal) if day.ordinal else _WEEKDAYS[day.index]
        for day in rule.byday
    ]
    return dateutil_rrule(
        _FREQUENCIES[rule.freq],
        dtstart=dtstart,
        interval=rule.interval,
        until=until,
        byweekday=byweekday or None,
        bymonthday=rule.bymonthday or None,
        bysetpos=rule.bysetpos or None,
        bymonth=rule.bymonth or None,
        wkst=_WEEKDAYS[WEEKDAY_CODES.index(rule.wkst)] if rule.wkst else None,
    )


def _check_max_count(max_count: Any) -> int:
    if isinstance(max_count, bool) or not isinstance(max_count, int) or max_count < 1:
        raise ValidationError(f"max_count must be a positive integer, got {max_count!r}")
    return max_count


def scan_horizon(rule: RecurrenceRule, dtstart: datetime, instances: int) -> datetime:
    """Latest wall-clock time the rule is scanned up to.

    The later of one Gregorian cycle after ``dtstart`` and ``instances``
    full periods of the rule. Rules that have not matched by then are
    treated as exhausted.
    """
    period = relativedelta(**{_PERIOD_UNITS[rule.freq]: instances * rule.interval})
    try:
        return max(dtstart + relativedelta(years=HORIZON_YEARS), dtstart + period)
    except (ValueError, OverflowError):
        return datetime.max


def build_ruleset(spec: RecurrenceSpec) -> rruleset:
    """Build the dateutil rule set for ``spec`` in wall-clock space.

    ``dtstart`` always counts as the first occurrence, even when it does
    not match the BY* filters; COUNT is reduced by one in that case. Only
    the rule instances that can reach the first ``max_count`` results are
    materialized, and the scan stops at :func:`scan_horizon`.

    Raises:
        ValidationError: If the rule, dates or max_count are malformed
        ComputationError: If the timezone is unknown
    """
    rule = parse_rrule(spec.rrule)
    max_count = _check_max_count(spec.max_count)
    dtstart = parse_local_iso(spec.dtstart)
    rdates = [parse_local_iso(value) for value in spec.rdate or []]
    exdates = [parse_local_iso(value) for value in spec.exdate or []]
    if spec.dtstart_tzid:
        load_timezone(spec.dtstart_tzid)

    # Each EXDATE removes at most one result, so later instances never surface
    needed = max_count + len(exdates)
    if rule.count is not None:
        needed = min(needed, rule.count)

    bound = scan_horizon(rule, dtstart, needed)
    if rule.until:
        bound = min(bound, parse_until(rule.until, spec.dtstart_tzid))

    instances = list(islice(_to_dateutil(rule, dtstart, bound), needed))
    if rule.count is not None and instances[:1] != [dtstart]:
        # dtstart is out of step with the rule and takes one COUNT slot
        instances = instances[: rule.count - 1]
    if len(instances) < needed and not rule.until and rule.count is None:
        logger.debug("Rule %r exhausted at scan horizon %s", spec.rrule, bound)

    ruleset = rruleset()
    ruleset.rdate(dtstart)
    for value in instances + rdates:
        ruleset.rdate(value)
    for value in exdates:
        ruleset.exdate(value)
    return ruleset


def _expand(spec: RecurrenceSpec) -> list[datetime]:
    max_count = _check_max_count(spec.max_count)
    try:
        ruleset = build_ruleset(spec)
        occurrences = list(islice(ruleset, max_count))
    except CalendarError:
        raise
    except Exception as e:
        raise computation_error_from(e, "occurrence expansion failed") from e

    if len(occurrences) == max_count:
        logger.debug("Expansion of %r stopped at max_count=%d", spec.rrule, max_count)
    return occurrences


def compute_occurrences(spec: RecurrenceSpec) -> list[str]:
    """Expand a recurrence into wall-clock occurrence strings.

    The result is ``(RRULE expansion ∪ RDATE) \\ EXDATE``, deduplicated,
    sorted ascending and capped at ``spec.max_count``. The rule is
    validated before any computation; there are no partial results.

    Args:
        spec: Recurrence to expand

    Returns:
        ISO-8601 local strings in the same format as ``dtstart``: a bare
        date yields bare dates, ``HH:MM`` yields ``HH:MM``

    Raises:
        ValidationError: If the rule, dates or max_count are malformed
        ComputationError: If the timezone is unknown or date arithmetic fails

    Example:
        >>> spec = RecurrenceSpec("FREQ=WEEKLY;COUNT=3", "2026-03-02T10:00:00",
        ...                       "America/New_York")
        >>> compute_occurrences(spec)
        ['2026-03-02T10:00:00', '2026-03-09T10:00:00', '2026-03-16T10:00:00']
    """
    occurrences = _expand(spec)
    fmt = local_format_of(spec.dtstart)
    return [dt.strftime(fmt) for dt in occurrences]


def compute_occurrence_instants(spec: RecurrenceSpec) -> list[datetime]:
    """Expand a recurrence into UTC instants.

    Each wall-clock occurrence is resolved against ``spec.dtstart_tzid``
    individually, so the UTC offset follows DST. Floating specs resolve
    as UTC.
    """
    occurrences = _expand(spec)
    try:
        return [resolve_local_to_utc(dt, spec.dtstart_tzid) for dt in occurrences]
    except CalendarError:
        raise
    except Exception as e:
        raise computation_error_from(e, "occurrence resolution failed") from e
