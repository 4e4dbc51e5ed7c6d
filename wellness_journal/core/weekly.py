import math
from collections import defaultdict
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional

from wellness_journal.core.models import DayBucket, JournalEntry
from wellness_journal.utils.datetime_utils import day_key, last_n_days, weekday_label

WEEK_DAYS = 7


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def average_mood(moods: List[int]) -> Optional[int]:
    if not moods:
        return None
    return round_half_up(sum(moods) / len(moods))


def calculate_weekly_stats(entries: Iterable[JournalEntry], now: datetime) -> List[DayBucket]:
    """Seven day buckets, six days ago through today"""
    by_day: Dict[date, List[JournalEntry]] = defaultdict(list)
    for entry in entries:
        stamp = entry.timestamp
        if stamp is not None:
            by_day[day_key(stamp)].append(entry)

    buckets = []
    for day in last_n_days(day_key(now), WEEK_DAYS):
        day_entries = by_day.get(day, [])
        moods = [e.mood for e in day_entries if e.mood is not None]
        buckets.append(DayBucket(
            day_key=day,
            weekday_label=weekday_label(day),
            average_mood=average_mood(moods),
            has_entry=bool(day_entries),
        ))

    return buckets
