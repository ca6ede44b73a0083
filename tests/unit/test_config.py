"""Tests for export configuration."""

import pytest

from py_eventcal.config import DEFAULT_PRODID, ExportConfig


def test_defaults(monkeypatch):
    for name in ("EVENTCAL_PRODID", "EVENTCAL_MAX_OCCURRENCES", "EVENTCAL_DEFAULT_CALENDAR_NAME", "EVENTCAL_CACHE_TTL"):
        monkeypatch.delenv(name, raising=False)

    config = ExportConfig.from_env()

    assert config.prodid == DEFAULT_PRODID
    assert config.default_calendar_name == "Calendar"
    assert config.max_occurrences == 10
    assert config.cache_ttl == 300


def test_from_env(monkeypatch):
    """Test that EVENTCAL_* variables override the defaults."""
    monkeypatch.setenv("EVENTCAL_PRODID", "-//Example//Feed//EN")
    monkeypatch.setenv("EVENTCAL_MAX_OCCURRENCES", "25")
    monkeypatch.setenv("EVENTCAL_DEFAULT_CALENDAR_NAME", "Team")
    monkeypatch.setenv("EVENTCAL_CACHE_TTL", "60")

    config = ExportConfig.from_env()

    assert config.prodid == "-//Example//Feed//EN"
    assert config.max_occurrences == 25
    assert config.default_calendar_name == "Team"
    assert config.cache_ttl == 60


def test_from_env_rejects_non_integer(monkeypatch):
    monkeypatch.setenv("EVENTCAL_CACHE_TTL", "five minutes")

    with pytest.raises(ValueError, match="EVENTCAL_CACHE_TTL"):
        ExportConfig.from_env()


def test_cache_control():
    assert ExportConfig(cache_ttl=120).cache_control() == "public, max-age=120, s-maxage=120"
