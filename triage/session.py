"""Session controller tying the queue, counters and state file together."""

from dataclasses import dataclass, field
import logging
import threading
from typing import Dict, Optional, Tuple

from .errors import AdmissionRejected, RejectionReason, StateStoreError
from .queue import TriageQueue
from .records import CRITICAL_PRIORITY, AdmissionRecord, is_valid_priority, PRIORITY_CLASSES
from .sequence import SequenceAllocator
from .store import LoadResult, LoadStatus, PersistedState, StateStore

logger = logging.getLogger(__name__)


@dataclass
class SessionSnapshot:
    waiting: Tuple[AdmissionRecord, ...]
    treated_count: int
    next_arrival_sequence: int
    counts_by_priority: Dict[int, int] = field(default_factory=dict)

    @property
    def size(self) -> int:
        return len(self.waiting)

    @property
    def critical_count(self) -> int:
        return self.counts_by_priority.get(CRITICAL_PRIORITY, 0)


class SessionController:
    """Owns the single waiting queue for the lifetime of the process.

    Every public operation runs under one lock, so admissions and treatments
    from different threads never interleave. The state file is read only in
    :meth:`start` and written only in :meth:`shutdown`.
    """

    def __init__(self, store: StateStore):
        self._store = store
        self._lock = threading.RLock()
        self._queue = TriageQueue()
        self._allocator = SequenceAllocator()
        self._saved = False

    # ---- lifecycle ----

    def start(self) -> LoadResult:
        with self._lock:
            self._queue = TriageQueue()
            self._allocator = SequenceAllocator()
            self._saved = False

            result = self._store.load()
            if result.status is LoadStatus.OK:
                state = result.state
                self._allocator.restore(state.next_arrival_sequence, state.treated_count)
                for record in state.waiting:
                    self._queue.admit(record)
                logger.info(
                    "Restored %d waiting patient(s); next token %d, %d treated so far",
                    len(self._queue),
                    self._allocator.next_arrival_sequence,
                    self._allocator.treated_count,
                )
            elif result.status is LoadStatus.CORRUPT:
                logger.warning(
                    "Saved state at %s is unusable (%s); starting with an empty queue",
                    self._store.path,
                    result.reason,
                )
            return result

    def shutdown(self) -> bool:
        """Write the full state to the store; returns False if the write failed."""
        with self._lock:
            if self._saved:
                logger.debug("State already saved for this session")
                return True
            state = PersistedState(
                waiting=list(self._queue.snapshot_in_order()),
                next_arrival_sequence=self._allocator.next_arrival_sequence,
                treated_count=self._allocator.treated_count,
            )
            try:
                self._store.save(state)
            except StateStoreError:
                logger.exception("Failed to save session state; this session's queue will be lost")
                return False
            self._saved = True
            logger.info(
                "Saved %d waiting patient(s) and %d treated to %s",
                len(state.waiting),
                state.treated_count,
                self._store.path,
            )
            return True

    def __enter__(self) -> "SessionController":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.shutdown()
        return False

    # ---- public API ----

    def admit_patient(self, name: str, priority: int, category: str = "") -> AdmissionRecord:
        name = name.strip() if isinstance(name, str) else ""
        if not name:
            raise AdmissionRejected(RejectionReason.EMPTY_NAME)
        if not is_valid_priority(priority):
            raise AdmissionRejected(RejectionReason.INVALID_PRIORITY, f"got {priority!r}")
        category = category.strip() if isinstance(category, str) else ""
        category = category or PRIORITY_CLASSES[priority].condition

        with self._lock:
            record = AdmissionRecord(
                name=name,
                priority=priority,
                arrival_sequence=self._allocator.next_arrival(),
                category=category,
            )
            self._queue.admit(record)
            self._saved = False
        logger.info("Admitted %s with token %d at priority %d", record.name, record.arrival_sequence, priority)
        return record

    def treat_next(self) -> Optional[AdmissionRecord]:
        with self._lock:
            record = self._queue.serve_next()
            if record is None:
                logger.debug("Treat requested on an empty queue")
                return None
            self._allocator.record_treated()
            self._saved = False
        logger.info("Treating %s (token %d, priority %d)", record.name, record.arrival_sequence, record.priority)
        return record

    def peek_next(self) -> Optional[AdmissionRecord]:
        with self._lock:
            return self._queue.peek_next()

    def snapshot_in_order(self) -> Tuple[AdmissionRecord, ...]:
        with self._lock:
            return self._queue.snapshot_in_order()

    def size(self) -> int:
        with self._lock:
            return self._queue.size()

    def count_with_priority(self, priority: int) -> int:
        with self._lock:
            return self._queue.count_with_priority(priority)

    def critical_count(self) -> int:
        return self.count_with_priority(CRITICAL_PRIORITY)

    @property
    def treated_count(self) -> int:
        with self._lock:
            return self._allocator.treated_count

    @property
    def next_arrival_sequence(self) -> int:
        with self._lock:
            return self._allocator.next_arrival_sequence

    def snapshot(self) -> SessionSnapshot:
        with self._lock:
            return SessionSnapshot(
                waiting=self._queue.snapshot_in_order(),
                treated_count=self._allocator.treated_count,
                next_arrival_sequence=self._allocator.next_arrival_sequence,
                counts_by_priority=self._queue.counts_by_priority(),
            )
