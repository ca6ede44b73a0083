"""Debug logging utilities for py-eventcal."""

from __future__ import annotations

import logging

logger = logging.getLogger("py_eventcal")


def log_ics_output(label: str, ical: str) -> None:
    """Log generated iCalendar text line by line.

    Args:
        label: What was serialized (event uid, calendar name)
        ical: Generated iCalendar text
    """
    logger.debug("=" * 80)
    logger.debug(f"<<< ICS OUTPUT: {label} ({len(ical.encode('utf-8'))} bytes)")
    logger.debug("-" * 80)
    for line in ical.split("\r\n"):
        if line:
            logger.debug(f"  {line}")
    logger.debug("=" * 80)


def setup_debug_logging(level: int = logging.DEBUG) -> None:
    """Configure console logging for the py_eventcal logger tree."""
    logger.setLevel(level)

    # Create console handler with custom formatter
    handler = logging.StreamHandler()
    handler.setLevel(level)

    # Simple format - just the message (since we format the logs ourselves)
    formatter = logging.Formatter("%(message)s")
    handler.setFormatter(formatter)

    # Add handler to logger
    logger.addHandler(handler)

    # Prevent propagation to avoid duplicate logs
    logger.propagate = False
