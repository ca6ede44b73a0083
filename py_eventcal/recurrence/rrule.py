"""RRULE tokenizer and validator.

Recurrence rules are defined in RFC 5545 section 3.3.10. The accepted subset
is FREQ (DAILY, WEEKLY, MONTHLY, YEARLY), INTERVAL, COUNT or UNTIL, BYDAY,
BYMONTHDAY, BYSETPOS, BYMONTH and WKST.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum

from ..internal.datetime_utils import parse_until
from ..internal.errors import RRuleValidationError, ValidationError

MAX_INTERVAL = 999

# Longest length of each month, leap years included
_MONTH_LENGTHS = (31, 29, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)

WEEKDAY_CODES = ("MO", "TU", "WE", "TH", "FR", "SA", "SU")

_BYDAY_RE = re.compile(r"^([+-]?)([0-9]{1,2})?(MO|TU|WE|TH|FR|SA|SU)$")
_SIGNED_INT_RE = re.compile(r"^[+-]?[0-9]+$")
_UNSIGNED_INT_RE = re.compile(r"^[0-9]+$")
_UNTIL_RE = re.compile(
    r"^([0-9]{8}(T[0-9]{6}Z?)?|[0-9]{4}-[0-9]{2}-[0-9]{2}(T[0-9]{2}:[0-9]{2}(:[0-9]{2})?(Z|[+-][0-9]{2}:?[0-9]{2})?)?)$",
    re.IGNORECASE,
)

# Output order of to_rrule_string()
_PART_ORDER = ("FREQ", "INTERVAL", "COUNT", "UNTIL", "BYMONTH", "BYMONTHDAY", "BYDAY", "BYSETPOS", "WKST")


class Frequency(str, Enum):
    """Supported FREQ values."""

    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"


@dataclass(frozen=True)
class WeekdayNum:
    """A BYDAY entry: weekday code with an optional ordinal (``-1TH``, ``2FR``)."""

    weekday: str
    ordinal: int | None = None

    @property
    def index(self) -> int:
        """Weekday index, Monday = 0."""
        return WEEKDAY_CODES.index(self.weekday)

    def __str__(self) -> str:
        if self.ordinal is None:
            return self.weekday
        return f"{self.ordinal}{self.weekday}"


@dataclass
class RecurrenceRule:
    """Parsed RRULE, tagged by frequency."""

    freq: Frequency
    interval: int = 1
    count: int | None = None
    until: str | None = None
    byday: list[WeekdayNum] = field(default_factory=list)
    bymonthday: list[int] = field(default_factory=list)
    bysetpos: list[int] = field(default_factory=list)
    bymonth: list[int] = field(default_factory=list)
    wkst: str | None = None

    @property
    def is_indefinite(self) -> bool:
        return self.count is None and self.until is None

    def to_rrule_string(self) -> str:
        """Render the rule in canonical part order."""
        parts = {
            "FREQ": self.freq.value,
            "INTERVAL": str(self.interval) if self.interval != 1 else None,
            "COUNT": str(self.count) if self.count is not None else None,
            "UNTIL": self.until,
            "BYMONTH": ",".join(str(m) for m in self.bymonth) or None,
            "BYMONTHDAY": ",".join(str(d) for d in self.bymonthday) or None,
            "BYDAY": ",".join(str(d) for d in self.byday) or None,
            "BYSETPOS": ",".join(str(p) for p in self.bysetpos) or None,
            "WKST": self.wkst,
        }
        return ";".join(f"{key}={parts[key]}" for key in _PART_ORDER if parts[key])


def strip_rrule_prefix(text: str) -> str:
    """Remove a leading ``RRULE:`` so property lines and bare values both work."""
    text = text.strip()
    if text.upper().startswith("RRULE:"):
        return text[len("RRULE:"):]
    return text


def _tokenize(rrule: str) -> dict[str, str]:
    """Split ``KEY=VALUE;KEY=VALUE`` into an ordered dict of upper-cased keys."""
    tokens: dict[str, str] = {}
    for part in strip_rrule_prefix(rrule).split(";"):
        part = part.strip()
        if not part:
            continue
        key, sep, value = part.partition("=")
        key = key.strip().upper()
        value = value.strip().upper()
        if not sep or not key or not value:
            raise RRuleValidationError(rrule, f"malformed rule part {part!r}")
        if key in tokens:
            raise RRuleValidationError(rrule, f"duplicate rule part {key}")
        tokens[key] = value
    return tokens


def _parse_int_list(rrule: str, key: str, value: str, low: int, high: int, signed: bool) -> list[int]:
    result = []
    for item in value.split(","):
        item = item.strip()
        if not _SIGNED_INT_RE.match(item) or (not signed and item[0] in "+-"):
            raise RRuleValidationError(rrule, f"{key} value {item!r} is not an integer")
        number = int(item)
        if number == 0 or not low <= abs(number) <= high:
            bounds = f"±{low}..{high}" if signed else f"{low}..{high}"
            raise RRuleValidationError(rrule, f"{key} value {number} outside {bounds}")
        result.append(number)
    return result


def _parse_byday(rrule: str, value: str) -> list[WeekdayNum]:
    result = []
    for item in value.split(","):
        match = _BYDAY_RE.match(item.strip())
        if not match:
            raise RRuleValidationError(rrule, f"BYDAY value {item!r} is not a weekday")
        sign, number, code = match.groups()
        ordinal = None
        if number is not None:
            ordinal = int(number)
            if not 1 <= ordinal <= 53:
                raise RRuleValidationError(rrule, f"BYDAY ordinal {item!r} outside ±1..53")
            if sign == "-":
                ordinal = -ordinal
        elif sign:
            raise RRuleValidationError(rrule, f"BYDAY value {item!r} has a sign but no ordinal")
        result.append(WeekdayNum(code, ordinal))
    return result


def _parse_positive(rrule: str, key: str, value: str, high: int | None = None) -> int:
    if not _UNSIGNED_INT_RE.match(value):
        raise RRuleValidationError(rrule, f"{key} must be a positive integer")
    number = int(value)
    if number < 1 or (high is not None and number > high):
        limit = f"1..{high}" if high is not None else ">= 1"
        raise RRuleValidationError(rrule, f"{key}={number} outside {limit}")
    return number


def _check_satisfiable(rrule: str, rule: RecurrenceRule) -> None:
    """Reject part combinations that no date can ever match."""
    if rule.bymonth and rule.bymonthday:
        longest = max(_MONTH_LENGTHS[month - 1] for month in rule.bymonth)
        if all(abs(day) > longest for day in rule.bymonthday):
            raise RRuleValidationError(rrule, "BYMONTHDAY never falls within the BYMONTH months")

    # Ordinals count within the month for MONTHLY and for YEARLY with BYMONTH
    if rule.freq == Frequency.MONTHLY or (rule.freq == Frequency.YEARLY and rule.bymonth):
        for day in rule.byday:
            if day.ordinal is not None and abs(day.ordinal) > 5:
                raise RRuleValidationError(rrule, f"BYDAY ordinal {day} exceeds the weeks of a month")


def parse_rrule(rrule: str) -> RecurrenceRule:
    """Parse and validate an RRULE string.

    Args:
        rrule: Rule such as ``FREQ=MONTHLY;BYDAY=TH;BYSETPOS=-1;COUNT=3``,
            with or without an ``RRULE:`` prefix

    Returns:
        Typed RecurrenceRule

    Raises:
        RRuleValidationError: If the rule does not match the accepted grammar
    """
    if not isinstance(rrule, str) or not strip_rrule_prefix(rrule):
        raise RRuleValidationError(str(rrule), "rule is empty")

    tokens = _tokenize(rrule)

    freq_value = tokens.pop("FREQ", None)
    if freq_value is None:
        raise RRuleValidationError(rrule, "FREQ is required")
    try:
        freq = Frequency(freq_value)
    except ValueError:
        raise RRuleValidationError(rrule, f"unsupported FREQ {freq_value}") from None

    rule = RecurrenceRule(freq=freq)

    if "COUNT" in tokens and "UNTIL" in tokens:
        raise RRuleValidationError(rrule, "COUNT and UNTIL are mutually exclusive")

    for key, value in tokens.items():
        if key == "INTERVAL":
            rule.interval = _parse_positive(rrule, key, value, MAX_INTERVAL)
        elif key == "COUNT":
            rule.count = _parse_positive(rrule, key, value)
        elif key == "UNTIL":
            if not _UNTIL_RE.match(value):
                raise RRuleValidationError(rrule, f"UNTIL value {value!r} is not a date or datetime")
            try:
                parse_until(value)
            except ValidationError:
                raise RRuleValidationError(rrule, f"UNTIL value {value!r} is not a valid date") from None
            rule.until = value
        elif key == "BYDAY":
            rule.byday = _parse_byday(rrule, value)
        elif key == "BYMONTHDAY":
            rule.bymonthday = _parse_int_list(rrule, key, value, 1, 31, signed=True)
        elif key == "BYSETPOS":
            rule.bysetpos = _parse_int_list(rrule, key, value, 1, 366, signed=True)
        elif key == "BYMONTH":
            rule.bymonth = _parse_int_list(rrule, key, value, 1, 12, signed=False)
        elif key == "WKST":
            if value not in WEEKDAY_CODES:
                raise RRuleValidationError(rrule, f"WKST value {value!r} is not a weekday")
            rule.wkst = value
        else:
            raise RRuleValidationError(rrule, f"unsupported rule part {key}")

    _check_satisfiable(rrule, rule)
    return rule


def validate_rrule(rrule: str) -> bool:
    """Return True if ``rrule`` parses under the accepted grammar."""
    try:
        parse_rrule(rrule)
    except RRuleValidationError:
        return False
    return True


def is_indefinite_recurrence(rrule: str) -> bool:
    """True when the rule has neither COUNT nor UNTIL."""
    tokens = strip_rrule_prefix(rrule).upper()
    return "COUNT=" not in tokens and "UNTIL=" not in tokens
