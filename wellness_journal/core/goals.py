"""
Weekly goals.

Built-in goals are recomputed from the entries on every pass. Custom goals
live only in the tracker that created them: they start at 0, are never
updated from entry data and are gone after a reload.
"""

import logging
from datetime import datetime
from typing import List, Optional, Sequence

from wellness_journal.config import get_settings
from wellness_journal.core.models import Goal, GoalKind, JournalEntry, ValidationError, validate_text
from wellness_journal.utils.datetime_utils import week_start

logger = logging.getLogger(__name__)

DAILY_JOURNALING_TARGET = 7
MOOD_AWARENESS_TARGET = 5
CONSISTENCY_TARGET = 10
DEFAULT_CUSTOM_TARGET = 7


def count_entries_since(entries: Sequence[JournalEntry], start: datetime) -> int:
    return sum(1 for e in entries if e.timestamp is not None and e.timestamp >= start)


def count_mood_entries(entries: Sequence[JournalEntry]) -> int:
    return sum(1 for e in entries if e.mood is not None)


def calculate_builtin_goals(entries: Sequence[JournalEntry], streak: int, now: datetime,
                            first_weekday: Optional[int] = None) -> List[Goal]:
    if first_weekday is None:
        first_weekday = get_settings().FIRST_WEEKDAY
    this_week = count_entries_since(entries, week_start(now, first_weekday))

    return [
        Goal(
            title="Daily Journaling",
            description="Write in your journal every day this week",
            progress=min(this_week, DAILY_JOURNALING_TARGET),
            target=DAILY_JOURNALING_TARGET,
            kind=GoalKind.STREAK,
        ),
        Goal(
            title="Mood Awareness",
            description="Track your mood 5 times this week",
            progress=min(count_mood_entries(entries), MOOD_AWARENESS_TARGET),
            target=MOOD_AWARENESS_TARGET,
            kind=GoalKind.COUNT,
        ),
        Goal(
            title="Consistency Challenge",
            description="Maintain your current streak",
            progress=min(streak, CONSISTENCY_TARGET),
            target=CONSISTENCY_TARGET,
            kind=GoalKind.ACTIVITIES,
        ),
    ]


class GoalTracker:
    """Built-in goals plus this session's custom goals"""

    def __init__(self, first_weekday: Optional[int] = None):
        self.first_weekday = first_weekday
        self.custom_goals: List[Goal] = []

    def add_custom_goal(self, title: str, description: str = "",
                        target: int = DEFAULT_CUSTOM_TARGET) -> Goal:
        title = validate_text(title, min_length=1, max_length=200, field_name="title")
        description = validate_text(description or "", min_length=0, max_length=1000,
                                    field_name="description")
        if not isinstance(target, int) or isinstance(target, bool) or target < 1:
            raise ValidationError("target must be a whole number of at least 1")

        goal = Goal(title=title, description=description, progress=0,
                    target=target, kind=GoalKind.CUSTOM)
        self.custom_goals.append(goal)
        logger.info(f"🎯 Custom goal created: {goal.title} (target {goal.target})")
        return goal

    def clear_custom_goals(self) -> None:
        self.custom_goals.clear()

    def calculate(self, entries: Sequence[JournalEntry], streak: int, now: datetime) -> List[Goal]:
        goals = calculate_builtin_goals(entries, streak, now, self.first_weekday)
        goals.extend(self.custom_goals)
        return goals
