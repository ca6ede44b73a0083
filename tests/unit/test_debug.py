"""Tests for debug logging."""

import logging

from py_eventcal.debug import log_ics_output, logger, setup_debug_logging


def test_log_ics_output(caplog):
    """Test that generated ICS is logged line by line at DEBUG."""
    with caplog.at_level(logging.DEBUG, logger="py_eventcal"):
        log_ics_output("evt-1", "BEGIN:VCALENDAR\r\nVERSION:2.0\r\nEND:VCALENDAR\r\n")

    assert "<<< ICS OUTPUT: evt-1 (45 bytes)" in caplog.text
    assert "  VERSION:2.0" in caplog.messages


def test_setup_debug_logging():
    handlers = list(logger.handlers)
    level, propagate = logger.level, logger.propagate
    try:
        setup_debug_logging()

        assert logger.level == logging.DEBUG
        assert logger.propagate is False
        assert len(logger.handlers) == len(handlers) + 1
        assert logger.handlers[-1].formatter._fmt == "%(message)s"
    finally:
        logger.handlers = handlers
        logger.setLevel(level)
        logger.propagate = propagate
