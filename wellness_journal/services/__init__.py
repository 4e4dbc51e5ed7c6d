# services/__init__.py

"""
Wellness Journal services: entry storage, live progress tracking and the assistant.
"""

from .entry_store import (
    ChangeKind,
    EntryStore,
    EntryStoreError,
    EntryNotFoundError,
    InMemoryEntryStore,
    JsonEntryStore,
    Subscription
)
from .progress_service import ProgressService, LOAD_ERROR_MESSAGE
from .ai_service import AssistantService, FALLBACK_RESPONSE

__all__ = [
    'ChangeKind',
    'EntryStore',
    'EntryStoreError',
    'EntryNotFoundError',
    'InMemoryEntryStore',
    'JsonEntryStore',
    'Subscription',
    'ProgressService',
    'LOAD_ERROR_MESSAGE',
    'AssistantService',
    'FALLBACK_RESPONSE'
]
