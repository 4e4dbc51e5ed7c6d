"""Assembles one ProgressSnapshot from a single read of the entries."""

import logging
from datetime import date, datetime
from typing import Iterable, Optional, Sequence

from wellness_journal.config import get_settings
from wellness_journal.core.achievements import AchievementEvaluator
from wellness_journal.core.goals import GoalTracker
from wellness_journal.core.models import JournalEntry, ProgressSnapshot
from wellness_journal.core.streaks import calculate_streak
from wellness_journal.core.weekly import calculate_weekly_stats
from wellness_journal.utils.datetime_utils import now_local, to_local

logger = logging.getLogger(__name__)

_default_evaluator = AchievementEvaluator()


def overall_average_mood(entries: Iterable[JournalEntry]) -> Optional[float]:
    """Mean of all valid mood levels, one decimal"""
    moods = [e.mood for e in entries if e.mood is not None]
    if not moods:
        return None
    return round(sum(moods) / len(moods), 1)


def build_progress_snapshot(entries: Sequence[JournalEntry], now: Optional[datetime] = None,
                            goal_tracker: Optional[GoalTracker] = None,
                            evaluator: Optional[AchievementEvaluator] = None,
                            cutoff: Optional[date] = None) -> ProgressSnapshot:
    """
    Derive every progress statistic from one immutable entry collection.

    Malformed entries count toward total_entries but are skipped by the
    mood and date aggregates. Any other failure propagates.
    """
    entries = tuple(entries)
    now = to_local(now) if now is not None else now_local()
    goal_tracker = goal_tracker or GoalTracker()
    evaluator = evaluator or _default_evaluator
    cutoff = cutoff or get_settings().STREAK_CUTOFF_DATE

    malformed = sum(1 for e in entries if e.is_malformed)
    if malformed:
        logger.warning(f"⚠️ {malformed} malformed journal entries excluded from mood/date stats")

    streak = calculate_streak(entries, now, cutoff)

    snapshot = ProgressSnapshot(
        total_entries=len(entries),
        current_streak=streak,
        average_mood=overall_average_mood(entries),
        day_buckets=tuple(calculate_weekly_stats(entries, now)),
        achievements=tuple(evaluator.evaluate(entries, streak, now)),
        goals=tuple(goal_tracker.calculate(entries, streak, now)),
        computed_at=now,
    )

    logger.debug(
        f"Snapshot computed: {snapshot.total_entries} entries, "
        f"streak {snapshot.current_streak}, {snapshot.earned_achievements} achievements"
    )
    return snapshot


def empty_snapshot(now: Optional[datetime] = None,
                   goal_tracker: Optional[GoalTracker] = None) -> ProgressSnapshot:
    """Snapshot shown when no entries could be loaded"""
    return build_progress_snapshot((), now=now, goal_tracker=goal_tracker)
