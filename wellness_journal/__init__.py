#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Wellness Journal - progress analytics for mood-tagged journal entries

Version: 1.0.0
"""

from .core.models import (
    JournalError,
    ValidationError,
    GoalKind,
    JournalEntry,
    DayBucket,
    Achievement,
    Goal,
    ProgressSnapshot
)

from .core.snapshot import build_progress_snapshot, empty_snapshot

__version__ = "1.0.0"

__all__ = [
    # Errors
    'JournalError',
    'ValidationError',

    # Models
    'GoalKind',
    'JournalEntry',
    'DayBucket',
    'Achievement',
    'Goal',
    'ProgressSnapshot',

    # Assembly
    'build_progress_snapshot',
    'empty_snapshot'
]
