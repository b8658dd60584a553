"""Triage admission queue: ordering, counters and durable session state."""

import logging

from .config import TriageSettings
from .errors import AdmissionRejected, RejectionReason, StateStoreError, TriageError
from .queue import TriageQueue
from .records import (
    CRITICAL_PRIORITY,
    MAX_PRIORITY,
    MIN_PRIORITY,
    PRIORITY_CLASSES,
    AdmissionRecord,
    PriorityClass,
    compare_records,
    ordering_key,
)
from .sequence import SequenceAllocator
from .session import SessionController, SessionSnapshot
from .store import LoadResult, LoadStatus, PersistedState, StateStore

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "AdmissionRecord",
    "AdmissionRejected",
    "CRITICAL_PRIORITY",
    "LoadResult",
    "LoadStatus",
    "MAX_PRIORITY",
    "MIN_PRIORITY",
    "PRIORITY_CLASSES",
    "PersistedState",
    "PriorityClass",
    "RejectionReason",
    "SequenceAllocator",
    "SessionController",
    "SessionSnapshot",
    "StateStore",
    "StateStoreError",
    "TriageError",
    "TriageQueue",
    "TriageSettings",
    "compare_records",
    "ordering_key",
]
