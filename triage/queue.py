"""Priority-ordered waiting queue."""

from collections import Counter
import heapq
from typing import Iterable, Iterator, List, Optional, Tuple

from .records import AdmissionRecord, ordering_key


class TriageQueue:
    """Waiting patients kept in service order.

    Backed by a binary heap of ``(ordering_key, record)`` pairs. Keys are
    unique because arrival sequences are, so the heap never has to compare
    records. The fully ordered view is cached and rebuilt lazily after a
    mutation.
    """

    def __init__(self, records: Iterable[AdmissionRecord] = ()):
        self._heap: List[Tuple[Tuple[int, int], AdmissionRecord]] = []
        self._by_priority: Counter = Counter()
        self._ordered: Optional[Tuple[AdmissionRecord, ...]] = None
        for record in records:
            self.admit(record)

    # ---- mutation ----

    def admit(self, record: AdmissionRecord):
        heapq.heappush(self._heap, (ordering_key(record), record))
        self._by_priority[record.priority] += 1
        self._ordered = None

    def serve_next(self) -> Optional[AdmissionRecord]:
        if not self._heap:
            return None
        _, record = heapq.heappop(self._heap)
        self._by_priority[record.priority] -= 1
        if not self._by_priority[record.priority]:
            del self._by_priority[record.priority]
        self._ordered = None
        return record

    def clear(self):
        self._heap.clear()
        self._by_priority.clear()
        self._ordered = None

    # ---- queries ----

    def peek_next(self) -> Optional[AdmissionRecord]:
        if not self._heap:
            return None
        return self._heap[0][1]

    def snapshot_in_order(self) -> Tuple[AdmissionRecord, ...]:
        if self._ordered is None:
            self._ordered = tuple(record for _, record in sorted(self._heap))
        return self._ordered

    def size(self) -> int:
        return len(self._heap)

    def count_with_priority(self, priority: int) -> int:
        return self._by_priority.get(priority, 0)

    def counts_by_priority(self) -> dict:
        return dict(self._by_priority)

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)

    def __iter__(self) -> Iterator[AdmissionRecord]:
        return iter(self.snapshot_in_order())
