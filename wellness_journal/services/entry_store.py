#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Wellness Journal - Entry Store
Per-owner journal entry storage with change notifications
"""

import json
import logging
import shutil
import threading
from abc import ABC, abstractmethod
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import pytz

from wellness_journal.core.models import JournalEntry, JournalError

logger = logging.getLogger(__name__)

_OLDEST = datetime.min.replace(tzinfo=pytz.utc)

# ===== EXCEPTIONS =====

class EntryStoreError(JournalError):
    """Entry storage failure"""
    pass

class EntryNotFoundError(EntryStoreError):
    """No entry with the given id"""
    pass

# ===== NOTIFICATIONS =====

class ChangeKind(Enum):
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"

ChangeListener = Callable[[ChangeKind, JournalEntry], None]

class Subscription:
    """Handle returned by EntryStore.subscribe"""

    def __init__(self, store: "EntryStore", owner_id: str, listener: ChangeListener):
        self.store = store
        self.owner_id = owner_id
        self.listener = listener
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self.store._remove_subscription(self)
            self.active = False

# ===== STORES =====

class EntryStore(ABC):
    """Journal entries keyed by owner"""

    def __init__(self):
        self._subscriptions: List[Subscription] = []
        self._subscriptions_lock = threading.Lock()

    @abstractmethod
    def list_all(self, owner_id: str) -> List[JournalEntry]:
        """All entries for an owner; callers must not rely on the order"""
        pass

    @abstractmethod
    def get(self, entry_id: str) -> Optional[JournalEntry]:
        pass

    @abstractmethod
    def insert(self, entry: JournalEntry) -> JournalEntry:
        pass

    @abstractmethod
    def update(self, entry_id: str, **changes: Any) -> JournalEntry:
        pass

    @abstractmethod
    def delete(self, entry_id: str) -> JournalEntry:
        pass

    def subscribe(self, owner_id: str, listener: ChangeListener) -> Subscription:
        subscription = Subscription(self, str(owner_id), listener)
        with self._subscriptions_lock:
            self._subscriptions.append(subscription)
        logger.debug(f"Subscribed to entry changes for owner {owner_id}")
        return subscription

    @property
    def subscriber_count(self) -> int:
        with self._subscriptions_lock:
            return len(self._subscriptions)

    def _remove_subscription(self, subscription: Subscription) -> None:
        with self._subscriptions_lock:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)
        logger.debug(f"Unsubscribed from entry changes for owner {subscription.owner_id}")

    def _notify(self, kind: ChangeKind, entry: JournalEntry) -> None:
        with self._subscriptions_lock:
            targets = [s for s in self._subscriptions if s.owner_id == entry.owner_id]

        for subscription in targets:
            try:
                subscription.listener(kind, entry)
            except Exception as e:
                logger.error(f"Entry change listener failed: {e}")


class InMemoryEntryStore(EntryStore):
    """Entries held in a dict; used directly in tests and as the base of JsonEntryStore"""

    def __init__(self):
        super().__init__()
        self._entries: Dict[str, JournalEntry] = {}
        self._lock = threading.RLock()

    def list_all(self, owner_id: str) -> List[JournalEntry]:
        owner_id = str(owner_id)
        with self._lock:
            entries = [e for e in self._entries.values() if e.owner_id == owner_id]
        # newest first, unparsable timestamps last
        return sorted(entries, key=lambda e: e.timestamp or _OLDEST, reverse=True)

    def get(self, entry_id: str) -> Optional[JournalEntry]:
        with self._lock:
            return self._entries.get(entry_id)

    def insert(self, entry: JournalEntry) -> JournalEntry:
        with self._lock:
            if entry.entry_id in self._entries:
                raise EntryStoreError(f"Entry {entry.entry_id} already exists")
            self._entries[entry.entry_id] = entry
            try:
                self._persist()
            except EntryStoreError:
                del self._entries[entry.entry_id]
                raise
        logger.info(f"📝 Entry {entry.entry_id} added for owner {entry.owner_id}")
        self._notify(ChangeKind.INSERT, entry)
        return entry

    def update(self, entry_id: str, **changes: Any) -> JournalEntry:
        with self._lock:
            current = self._entries.get(entry_id)
            if current is None:
                raise EntryNotFoundError(f"Entry {entry_id} not found")
            updated = current.with_changes(**changes)
            self._entries[entry_id] = updated
            try:
                self._persist()
            except EntryStoreError:
                self._entries[entry_id] = current
                raise
        logger.info(f"✏️ Entry {entry_id} updated")
        self._notify(ChangeKind.UPDATE, updated)
        return updated

    def delete(self, entry_id: str) -> JournalEntry:
        with self._lock:
            removed = self._entries.pop(entry_id, None)
            if removed is None:
                raise EntryNotFoundError(f"Entry {entry_id} not found")
            try:
                self._persist()
            except EntryStoreError:
                self._entries[entry_id] = removed
                raise
        logger.info(f"🗑️ Entry {entry_id} deleted")
        self._notify(ChangeKind.DELETE, removed)
        return removed

    def _persist(self) -> None:
        pass


class JsonEntryStore(InMemoryEntryStore):
    """Entries kept in one JSON file, rewritten atomically on every change"""

    def __init__(self, data_file: Path):
        super().__init__()
        self.data_file = Path(data_file)
        self._load()

    def _load(self) -> None:
        if not self.data_file.exists():
            logger.info(f"Entry file {self.data_file} does not exist, starting empty")
            return

        try:
            with open(self.data_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise EntryStoreError(f"Entry file {self.data_file} is corrupted: {e}")
        except OSError as e:
            raise EntryStoreError(f"Failed to read entry file {self.data_file}: {e}")

        if not isinstance(data, dict):
            raise EntryStoreError(f"Entry file {self.data_file} has an unexpected layout")

        records = data.get("entries", [])
        if not isinstance(records, list):
            raise EntryStoreError(f"Entry file {self.data_file} has an unexpected layout")

        loaded = 0
        for raw in records:
            try:
                entry = JournalEntry.from_dict(raw)
            except (KeyError, TypeError) as e:
                logger.warning(f"Skipping unreadable entry record: {e}")
                continue
            self._entries[entry.entry_id] = entry
            loaded += 1

        logger.info(f"📂 Loaded {loaded} journal entries from {self.data_file}")

    def _persist(self) -> None:
        payload = {"entries": [e.to_dict() for e in self._entries.values()]}
        temp_file = self.data_file.with_suffix(".tmp")

        try:
            self.data_file.parent.mkdir(parents=True, exist_ok=True)
            with open(temp_file, "w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False, indent=2)
            shutil.move(str(temp_file), str(self.data_file))
        except OSError as e:
            if temp_file.exists():
                temp_file.unlink()
            raise EntryStoreError(f"Failed to save entries to {self.data_file}: {e}")
