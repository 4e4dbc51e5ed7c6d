"""
Current journaling streak.

The walk always starts at today: a user who wrote every day up to
yesterday but not yet today has a streak of 0.
"""

from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Set

from wellness_journal.config import get_settings
from wellness_journal.core.models import JournalEntry
from wellness_journal.utils.datetime_utils import day_key


def journaled_days(entries: Iterable[JournalEntry]) -> Set[date]:
    """Distinct calendar days with at least one entry"""
    days = set()
    for entry in entries:
        stamp = entry.timestamp
        if stamp is not None:
            days.add(day_key(stamp))
    return days


def calculate_streak(entries: Iterable[JournalEntry], now: datetime,
                     cutoff: Optional[date] = None) -> int:
    """Consecutive days with an entry, counted backward from today"""
    days = journaled_days(entries)
    if not days:
        return 0

    cutoff = cutoff or get_settings().STREAK_CUTOFF_DATE
    current = day_key(now)
    streak = 0

    while current >= cutoff:
        if current not in days:
            break
        streak += 1
        current -= timedelta(days=1)

    return streak
