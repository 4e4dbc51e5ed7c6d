#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Wellness Journal - Core Data Models
Journal entries and the derived progress values computed from them
"""

import uuid
from dataclasses import asdict, dataclass, field, replace
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, Optional, Tuple

from wellness_journal.utils.datetime_utils import now_local, parse_timestamp

MIN_MOOD = 1
MAX_MOOD = 5

# ===== EXCEPTIONS =====

class JournalError(Exception):
    """Base error for the journal package"""
    pass

class ValidationError(JournalError):
    """Invalid user-supplied data"""
    pass

# ===== ENUMS =====

class GoalKind(Enum):
    """Goal categories"""
    STREAK = "streak"
    COUNT = "count"
    ACTIVITIES = "activities"
    CUSTOM = "custom"

# ===== VALIDATION HELPERS =====

def validate_text(text: Any, min_length: int = 1, max_length: int = 1000, field_name: str = "text") -> str:
    if not isinstance(text, str):
        raise ValidationError(f"{field_name} must be a string")

    text = text.strip()
    if len(text) < min_length:
        raise ValidationError(f"{field_name} must be at least {min_length} characters")

    if len(text) > max_length:
        raise ValidationError(f"{field_name} must be at most {max_length} characters")

    return text

def is_valid_mood(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and MIN_MOOD <= value <= MAX_MOOD

def normalize_emotions(emotions: Optional[Iterable[Any]]) -> FrozenSet[str]:
    """Distinct non-blank emotion tags"""
    if not emotions or isinstance(emotions, str):
        return frozenset()
    return frozenset(e.strip() for e in emotions if isinstance(e, str) and e.strip())

# ===== JOURNAL ENTRY =====

@dataclass(frozen=True)
class JournalEntry:
    """
    One journal record as delivered by the entry store.

    created_at and mood_level are kept exactly as stored so that a
    malformed record still counts toward the entry total; analytics read
    them through `timestamp` and `mood`.
    """
    entry_id: str
    owner_id: str
    created_at: Any
    mood_level: Any = None
    emotions: FrozenSet[str] = field(default_factory=frozenset)
    title: str = ""
    content: str = ""
    is_voice_entry: bool = False
    updated_at: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.emotions, frozenset):
            object.__setattr__(self, "emotions", normalize_emotions(self.emotions))

    @property
    def timestamp(self) -> Optional[datetime]:
        """created_at in the reference timezone, None if unparsable"""
        return parse_timestamp(self.created_at)

    @property
    def mood(self) -> Optional[int]:
        """Mood level usable for aggregates: a valid 1-5 value on a well-formed entry"""
        if not is_valid_mood(self.mood_level) or self.timestamp is None:
            return None
        return self.mood_level

    @property
    def is_malformed(self) -> bool:
        if self.timestamp is None:
            return True
        return self.mood_level is not None and not is_valid_mood(self.mood_level)

    def with_changes(self, **changes: Any) -> "JournalEntry":
        """New version of this entry; id, owner and created_at never change"""
        for locked in ("entry_id", "owner_id", "created_at"):
            changes.pop(locked, None)
        if "emotions" in changes:
            changes["emotions"] = normalize_emotions(changes["emotions"])
        changes.setdefault("updated_at", now_local().isoformat())
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        created = self.created_at.isoformat() if isinstance(self.created_at, datetime) else self.created_at
        return {
            "id": self.entry_id,
            "user_id": self.owner_id,
            "created_at": created,
            "mood_level": self.mood_level,
            "emotions": sorted(self.emotions),
            "title": self.title,
            "content": self.content,
            "is_voice_entry": self.is_voice_entry,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "JournalEntry":
        return cls(
            entry_id=str(data["id"]),
            owner_id=str(data["user_id"]),
            created_at=data.get("created_at"),
            mood_level=data.get("mood_level"),
            emotions=normalize_emotions(data.get("emotions")),
            title=data.get("title") or "",
            content=data.get("content") or "",
            is_voice_entry=bool(data.get("is_voice_entry", False)),
            updated_at=data.get("updated_at"),
        )

    @classmethod
    def create(cls, owner_id: str, mood_level: Optional[int] = None,
               emotions: Optional[Iterable[str]] = None, title: str = "", content: str = "",
               created_at: Optional[datetime] = None) -> "JournalEntry":
        """New entry stamped with the current time"""
        if mood_level is not None and not is_valid_mood(mood_level):
            raise ValidationError(f"mood_level must be between {MIN_MOOD} and {MAX_MOOD}")
        stamp = (created_at or now_local()).isoformat()
        return cls(
            entry_id=str(uuid.uuid4()),
            owner_id=str(owner_id),
            created_at=stamp,
            mood_level=mood_level,
            emotions=normalize_emotions(emotions),
            title=title,
            content=content,
            updated_at=stamp,
        )

# ===== DERIVED VALUES =====

@dataclass(frozen=True)
class DayBucket:
    """One calendar day of journaling activity"""
    day_key: date
    weekday_label: str
    average_mood: Optional[int] = None
    has_entry: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "day": self.day_key.isoformat(),
            "weekday": self.weekday_label,
            "mood": self.average_mood,
            "journaled": self.has_entry,
        }

@dataclass(frozen=True)
class Achievement:
    """Evaluated state of one catalog achievement"""
    achievement_id: str
    title: str
    description: str
    icon: str
    earned: bool = False
    earned_at: Optional[datetime] = None
    progress: Optional[int] = None
    total: Optional[int] = None

    @property
    def has_progress(self) -> bool:
        return self.progress is not None and self.total is not None

    @property
    def progress_percentage(self) -> float:
        if not self.has_progress:
            return 100.0 if self.earned else 0.0
        if self.total == 0:
            return 100.0
        return min(100.0, (self.progress / self.total) * 100)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["earned_at"] = self.earned_at.isoformat() if self.earned_at else None
        return data

@dataclass(frozen=True)
class Goal:
    """Target/progress pair"""
    title: str
    description: str
    progress: int
    target: int
    kind: GoalKind

    @property
    def remaining(self) -> int:
        return max(0, self.target - self.progress)

    @property
    def percent(self) -> float:
        if self.target <= 0:
            return 100.0
        return min(100.0, self.progress / self.target * 100)

    @property
    def is_complete(self) -> bool:
        return self.progress >= self.target

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "progress": self.progress,
            "target": self.target,
            "type": self.kind.value,
        }

@dataclass(frozen=True)
class ProgressSnapshot:
    """Everything the progress view shows, computed in one pass"""
    total_entries: int
    current_streak: int
    average_mood: Optional[float]
    day_buckets: Tuple[DayBucket, ...]
    achievements: Tuple[Achievement, ...]
    goals: Tuple[Goal, ...]
    computed_at: datetime

    @property
    def earned_achievements(self) -> int:
        return sum(1 for a in self.achievements if a.earned)

    @property
    def today(self) -> DayBucket:
        return self.day_buckets[-1]

    def get_achievement(self, achievement_id: str) -> Optional[Achievement]:
        for achievement in self.achievements:
            if achievement.achievement_id == achievement_id:
                return achievement
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_entries": self.total_entries,
            "current_streak": self.current_streak,
            "average_mood": self.average_mood,
            "earned_achievements": self.earned_achievements,
            "weekly_stats": [b.to_dict() for b in self.day_buckets],
            "achievements": [a.to_dict() for a in self.achievements],
            "goals": [g.to_dict() for g in self.goals],
            "computed_at": self.computed_at.isoformat(),
        }
