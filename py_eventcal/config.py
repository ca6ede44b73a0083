"""Export configuration.

Values default from the environment so that a feed host can tune the
output without code changes.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_PRODID = "-//py-eventcal//ICS Export//EN"
DEFAULT_CALENDAR_NAME = "Calendar"
DEFAULT_MAX_OCCURRENCES = 10
DEFAULT_CACHE_TTL = 300  # 5 minutes


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}") from None


@dataclass
class ExportConfig:
    """Configuration for ICS export and occurrence expansion."""

    # iCalendar PRODID of every generated VCALENDAR
    prodid: str = DEFAULT_PRODID

    # X-WR-CALNAME for calendar exports without a name
    default_calendar_name: str = DEFAULT_CALENDAR_NAME

    # Cap for indefinite rules when the caller gives none
    max_occurrences: int = DEFAULT_MAX_OCCURRENCES

    # Cache lifetime (seconds) a subscription endpoint should advertise
    cache_ttl: int = DEFAULT_CACHE_TTL

    @classmethod
    def from_env(cls) -> ExportConfig:
        """Read ``EVENTCAL_*`` variables, falling back to the defaults."""
        return cls(
            prodid=os.getenv("EVENTCAL_PRODID") or DEFAULT_PRODID,
            default_calendar_name=os.getenv("EVENTCAL_DEFAULT_CALENDAR_NAME") or DEFAULT_CALENDAR_NAME,
            max_occurrences=_env_int("EVENTCAL_MAX_OCCURRENCES", DEFAULT_MAX_OCCURRENCES),
            cache_ttl=_env_int("EVENTCAL_CACHE_TTL", DEFAULT_CACHE_TTL),
        )

    def cache_control(self) -> str:
        """Cache-Control header value for a feed response."""
        return f"public, max-age={self.cache_ttl}, s-maxage={self.cache_ttl}"
