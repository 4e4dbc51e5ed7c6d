#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Wellness Journal - Achievement System
Fixed achievement catalog evaluated against the full entry collection
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from wellness_journal.core.models import Achievement, JournalEntry

logger = logging.getLogger(__name__)

MORNING_START_HOUR = 5
MORNING_END_HOUR = 12

# ===== DATA CLASSES =====

@dataclass(frozen=True)
class AchievementContext:
    """Inputs shared by every checker in one evaluation pass"""
    entries: Sequence[JournalEntry]
    streak: int
    now: datetime

@dataclass
class AchievementDefinition:
    """Catalog entry"""
    achievement_id: str
    title: str
    description: str
    icon: str
    show_progress: bool = False
    earned_at: Optional[Callable[[AchievementContext], Optional[datetime]]] = None

# ===== ACHIEVEMENT CHECKERS =====

class AchievementChecker(ABC):
    """Base class for achievement conditions"""

    @abstractmethod
    def check(self, context: AchievementContext) -> bool:
        pass

    @abstractmethod
    def get_progress(self, context: AchievementContext) -> Tuple[int, int]:
        """(current, target)"""
        pass

class SimpleCountChecker(AchievementChecker):
    """Earned once a counted value reaches the target"""

    def __init__(self, target_count: int, value_getter: Callable[[AchievementContext], int]):
        self.target_count = target_count
        self.value_getter = value_getter

    def check(self, context: AchievementContext) -> bool:
        return self.value_getter(context) >= self.target_count

    def get_progress(self, context: AchievementContext) -> Tuple[int, int]:
        return self.value_getter(context), self.target_count

class StreakChecker(AchievementChecker):
    """Earned once the current streak reaches the target"""

    def __init__(self, target_streak: int):
        self.target_streak = target_streak

    def check(self, context: AchievementContext) -> bool:
        return context.streak >= self.target_streak

    def get_progress(self, context: AchievementContext) -> Tuple[int, int]:
        return context.streak, self.target_streak

# ===== VALUE GETTERS =====

def count_entries(context: AchievementContext) -> int:
    return len(context.entries)

def count_distinct_emotions(context: AchievementContext) -> int:
    emotions = set()
    for entry in context.entries:
        emotions.update(entry.emotions)
    return len(emotions)

def count_morning_entries(context: AchievementContext) -> int:
    count = 0
    for entry in context.entries:
        stamp = entry.timestamp
        if stamp is not None and MORNING_START_HOUR <= stamp.hour < MORNING_END_HOUR:
            count += 1
    return count

def oldest_entry_time(context: AchievementContext) -> Optional[datetime]:
    """Timestamp of the oldest entry, whatever order the entries arrived in"""
    stamps = [e.timestamp for e in context.entries if e.timestamp is not None]
    return min(stamps) if stamps else None

def evaluation_time(context: AchievementContext) -> datetime:
    return context.now

# ===== REGISTRY =====

class AchievementRegistry:
    """Ordered achievement catalog"""

    def __init__(self):
        self.achievements: Dict[str, AchievementDefinition] = {}
        self.checkers: Dict[str, AchievementChecker] = {}
        self._load_default_achievements()

    def register_achievement(self, definition: AchievementDefinition,
                             checker: AchievementChecker) -> None:
        self.achievements[definition.achievement_id] = definition
        self.checkers[definition.achievement_id] = checker
        logger.debug(f"Registered achievement: {definition.achievement_id}")

    def get_achievement(self, achievement_id: str) -> Optional[AchievementDefinition]:
        return self.achievements.get(achievement_id)

    def get_checker(self, achievement_id: str) -> Optional[AchievementChecker]:
        return self.checkers.get(achievement_id)

    def get_all_achievements(self) -> List[AchievementDefinition]:
        return list(self.achievements.values())

    def _load_default_achievements(self):
        self.register_achievement(
            AchievementDefinition(
                achievement_id="first_steps",
                title="First Steps",
                description="Created your first journal entry",
                icon="❤️",
                earned_at=oldest_entry_time
            ),
            SimpleCountChecker(1, count_entries)
        )

        self.register_achievement(
            AchievementDefinition(
                achievement_id="mindful_week",
                title="Mindful Week",
                description="Journaled for 7 days in a row",
                icon="⭐",
                earned_at=evaluation_time
            ),
            StreakChecker(7)
        )

        self.register_achievement(
            AchievementDefinition(
                achievement_id="emotion_explorer",
                title="Emotion Explorer",
                description="Tracked 10 different emotions",
                icon="⚡",
                show_progress=True
            ),
            SimpleCountChecker(10, count_distinct_emotions)
        )

        self.register_achievement(
            AchievementDefinition(
                achievement_id="morning_sunshine",
                title="Morning Sunshine",
                description="Complete 5 morning reflections",
                icon="☀️",
                show_progress=True
            ),
            SimpleCountChecker(5, count_morning_entries)
        )

# ===== EVALUATOR =====

class AchievementEvaluator:
    """Re-derives every achievement from scratch on each call"""

    def __init__(self, registry: Optional[AchievementRegistry] = None):
        self.registry = registry or AchievementRegistry()

    def evaluate(self, entries: Sequence[JournalEntry], streak: int, now: datetime) -> List[Achievement]:
        context = AchievementContext(entries=entries, streak=streak, now=now)
        results = []

        for definition in self.registry.get_all_achievements():
            checker = self.registry.get_checker(definition.achievement_id)
            earned = checker.check(context)

            progress = total = None
            if definition.show_progress:
                progress, total = checker.get_progress(context)

            earned_at = None
            if earned and definition.earned_at is not None:
                earned_at = definition.earned_at(context)

            results.append(Achievement(
                achievement_id=definition.achievement_id,
                title=definition.title,
                description=definition.description,
                icon=definition.icon,
                earned=earned,
                earned_at=earned_at,
                progress=progress,
                total=total,
            ))

        return results


def calculate_achievements(entries: Sequence[JournalEntry], streak: int, now: datetime,
                           evaluator: Optional[AchievementEvaluator] = None) -> List[Achievement]:
    evaluator = evaluator or AchievementEvaluator()
    return evaluator.evaluate(entries, streak, now)


__all__ = [
    'AchievementContext',
    'AchievementDefinition',
    'AchievementChecker',
    'SimpleCountChecker',
    'StreakChecker',
    'AchievementRegistry',
    'AchievementEvaluator',
    'calculate_achievements',
]
