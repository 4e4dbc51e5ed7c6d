"""Test configuration: settings isolation, a fixed clock and an entry factory."""

import itertools
from datetime import datetime, timedelta

import pytest
import pytz

from wellness_journal.config import reset_settings
from wellness_journal.core.models import JournalEntry

# Wednesday afternoon
NOW = datetime(2025, 3, 12, 15, 0, tzinfo=pytz.utc)

_ids = itertools.count(1)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Route settings to known values and a temp data dir"""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("TIMEZONE", "UTC")
    monkeypatch.setenv("STREAK_CUTOFF_DATE", "2024-01-01")
    monkeypatch.setenv("FIRST_WEEKDAY", "0")
    monkeypatch.setenv("DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("LOG_TO_FILE", "false")
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_entry():
    """Build an entry `days_ago` days before NOW at the given UTC hour"""
    def factory(days_ago=0, hour=10, minute=0, mood=None, emotions=(), owner="user-1", entry_id=None):
        day = (NOW - timedelta(days=days_ago)).date()
        created = datetime(day.year, day.month, day.day, hour, minute, tzinfo=pytz.utc)
        return JournalEntry(
            entry_id=entry_id or f"entry-{next(_ids)}",
            owner_id=owner,
            created_at=created.isoformat(),
            mood_level=mood,
            emotions=frozenset(emotions),
        )
    return factory
