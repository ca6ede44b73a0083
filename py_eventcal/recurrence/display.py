"""Human-readable labels for recurrence rules."""

from __future__ import annotations

import re
from datetime import datetime

from .rrule import strip_rrule_prefix

SHORT_WEEKDAYS = {
    "MO": "Mon",
    "TU": "Tue",
    "WE": "Wed",
    "TH": "Thu",
    "FR": "Fri",
    "SA": "Sat",
    "SU": "Sun",
}

LONG_WEEKDAYS = {
    "MO": "Monday",
    "TU": "Tuesday",
    "WE": "Wednesday",
    "TH": "Thursday",
    "FR": "Friday",
    "SA": "Saturday",
    "SU": "Sunday",
}

_UNITS = {"DAILY": "days", "WEEKLY": "weeks", "MONTHLY": "months", "YEARLY": "years"}


def format_weekday(code: str, style: str = "short") -> str:
    """Map ``MO`` to ``Mon`` (or ``Monday`` with ``style="long"``).

    Unknown codes are returned unchanged.
    """
    mapping = LONG_WEEKDAYS if style == "long" else SHORT_WEEKDAYS
    return mapping.get(code, code)


def _rule_parts(rrule: str) -> dict[str, str]:
    parts = {}
    for part in strip_rrule_prefix(rrule).split(";"):
        key, _, value = part.partition("=")
        if key:
            parts[key.strip().upper()] = value.strip()
    return parts


def _format_until(until: str) -> str | None:
    match = re.match(r"^(\d{4})-?(\d{2})-?(\d{2})", until)
    if not match:
        return None
    try:
        day = datetime(*(int(g) for g in match.groups()))
    except ValueError:
        return None
    return f"{day.strftime('%b')} {day.day}, {day.year}"


def parse_rrule_to_label(rrule: str) -> str:
    """Describe a rule, e.g. ``Weekly on Mon, Wed (5 times)``.

    Indefinite rules end with ``∞``. Rules that cannot be described fall
    back to ``Recurring``.
    """
    parts = _rule_parts(rrule)
    freq = parts.get("FREQ", "").upper()
    try:
        interval = int(parts.get("INTERVAL", "1"))
    except ValueError:
        interval = 1
    byday = parts.get("BYDAY")

    if freq == "WEEKLY" and byday:
        days = ", ".join(format_weekday(d) for d in byday.split(","))
        label = f"Weekly on {days}" if interval == 1 else f"Every {interval} weeks on {days}"
    elif freq in _UNITS:
        label = freq.capitalize() if interval == 1 else f"Every {interval} {_UNITS[freq]}"
    else:
        return "Recurring"

    count = parts.get("COUNT")
    until = parts.get("UNTIL")
    if count:
        label += f" ({count} times)"
    elif until:
        formatted = _format_until(until)
        if formatted:
            label += f" until {formatted}"
    else:
        label += " ∞"

    return label


def get_recurrence_type(rrule: str) -> str:
    """Return ``daily``/``weekly``/``monthly``/``yearly`` or ``custom``."""
    freq = _rule_parts(rrule).get("FREQ", "").lower()
    if freq in ("daily", "weekly", "monthly", "yearly"):
        return freq
    return "custom"


def get_recurrence_interval(rrule: str) -> int:
    value = _rule_parts(rrule).get("INTERVAL", "")
    return int(value) if value.isdigit() else 1
