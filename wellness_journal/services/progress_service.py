#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Wellness Journal - Progress Service
Keeps one owner's progress snapshot current while entries change

Every store notification triggers a full refetch and recomputation.
Passes are serialized: a pass already running completes, then a fresh
pass reflecting the latest change runs. A snapshot is never replaced by
one computed from an older read.
"""

import asyncio
import logging
from datetime import datetime
from typing import Callable, List, Optional

from wellness_journal.core.achievements import AchievementEvaluator
from wellness_journal.core.goals import DEFAULT_CUSTOM_TARGET, GoalTracker
from wellness_journal.core.models import Goal, JournalEntry, ProgressSnapshot
from wellness_journal.core.snapshot import build_progress_snapshot
from wellness_journal.services.entry_store import ChangeKind, EntryStore, EntryStoreError, Subscription
from wellness_journal.utils.datetime_utils import now_local

logger = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = "Could not load progress"

SnapshotListener = Callable[[ProgressSnapshot], None]


class ProgressService:
    """Progress snapshot for one owner's session"""

    def __init__(self, store: EntryStore, owner_id: str,
                 goal_tracker: Optional[GoalTracker] = None,
                 evaluator: Optional[AchievementEvaluator] = None,
                 clock: Optional[Callable[[], datetime]] = None):
        self.store = store
        self.owner_id = str(owner_id)
        self.goal_tracker = goal_tracker or GoalTracker()
        self.evaluator = evaluator or AchievementEvaluator()
        self.clock = clock or now_local

        self.snapshot: Optional[ProgressSnapshot] = None
        self.load_error: Optional[str] = None
        self.passes_completed = 0

        self._listeners: List[SnapshotListener] = []
        self._subscription: Optional[Subscription] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._lock: Optional[asyncio.Lock] = None
        self._next_pass = 0
        self._published_pass = 0
        self._pending = False
        self._drain_task: Optional[asyncio.Task] = None
        self._drain_error: Optional[BaseException] = None

    # ===== LIFECYCLE =====

    async def start(self) -> ProgressSnapshot:
        """Subscribe to entry changes and compute the first snapshot"""
        self._loop = asyncio.get_running_loop()
        self._lock = asyncio.Lock()
        self._subscription = self.store.subscribe(self.owner_id, self._on_store_change)
        logger.info(f"📊 Progress tracking started for owner {self.owner_id}")
        return await self.refresh()

    async def stop(self) -> None:
        """Unsubscribe and let a pass already in flight finish"""
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
        self._pending = False
        await self.wait_idle()
        logger.info(f"Progress tracking stopped for owner {self.owner_id}")

    @property
    def is_running(self) -> bool:
        return self._subscription is not None

    # ===== COMPUTATION =====

    async def refresh(self) -> ProgressSnapshot:
        """Refetch all entries and publish a new snapshot"""
        if self._lock is None:
            self._lock = asyncio.Lock()

        async with self._lock:
            self._next_pass += 1
            pass_number = self._next_pass
            load_error = None

            loop = asyncio.get_running_loop()
            try:
                entries = await loop.run_in_executor(None, self.store.list_all, self.owner_id)
            except EntryStoreError as e:
                logger.error(f"❌ Failed to load entries for owner {self.owner_id}: {e}")
                entries = []
                load_error = LOAD_ERROR_MESSAGE

            snapshot = self._compute(entries)
            self._publish(pass_number, snapshot, load_error)
            return self.snapshot

    def _compute(self, entries: List[JournalEntry]) -> ProgressSnapshot:
        return build_progress_snapshot(
            entries,
            now=self.clock(),
            goal_tracker=self.goal_tracker,
            evaluator=self.evaluator,
        )

    def _publish(self, pass_number: int, snapshot: ProgressSnapshot, load_error: Optional[str]) -> None:
        if pass_number <= self._published_pass:
            logger.debug(f"Discarding stale progress pass {pass_number}")
            return

        self._published_pass = pass_number
        self.snapshot = snapshot
        self.load_error = load_error
        self.passes_completed += 1

        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as e:
                logger.error(f"Progress listener failed: {e}")

    # ===== LIVE UPDATES =====

    def add_listener(self, listener: SnapshotListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: SnapshotListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _on_store_change(self, kind: ChangeKind, entry: JournalEntry) -> None:
        # may be called from any thread
        logger.debug(f"Entry {kind.value} for owner {self.owner_id}: {entry.entry_id}")
        if self._loop is None or self._loop.is_closed():
            return
        self._loop.call_soon_threadsafe(self._schedule_refresh)

    def _schedule_refresh(self) -> None:
        if self._subscription is None:
            return
        self._pending = True
        if self._drain_task is None or self._drain_task.done():
            self._drain_task = self._loop.create_task(self._drain())

    async def _drain(self) -> None:
        while self._pending:
            self._pending = False
            try:
                await self.refresh()
            except Exception as e:
                logger.exception(f"❌ Progress recomputation failed for owner {self.owner_id}")
                # first failure is kept until wait_idle reports it
                if self._drain_error is None:
                    self._drain_error = e

    async def wait_idle(self) -> None:
        """Wait until queued recomputations have finished; re-raises their errors"""
        await asyncio.sleep(0)
        while self._drain_task is not None:
            task = self._drain_task
            try:
                await task
            finally:
                if self._drain_task is task:
                    self._drain_task = None

        if self._drain_error is not None:
            error, self._drain_error = self._drain_error, None
            raise error

    # ===== CUSTOM GOALS =====

    async def add_custom_goal(self, title: str, description: str = "",
                              target: int = DEFAULT_CUSTOM_TARGET) -> Goal:
        """Add a session-only goal and recompute so it appears in the snapshot"""
        goal = self.goal_tracker.add_custom_goal(title, description, target)
        await self.refresh()
        return goal
