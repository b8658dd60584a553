"""Admission records, priority classes and the ordering rule."""

from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass(frozen=True)
class PriorityClass:
    level: int
    label: str
    condition: str

    @property
    def display_name(self) -> str:
        return f"{self.level} - {self.label} ({self.condition})"


PRIORITY_CLASSES: Dict[int, PriorityClass] = {
    1: PriorityClass(1, "Critical", "Life Threatening"),
    2: PriorityClass(2, "High", "Severe Injury"),
    3: PriorityClass(3, "Medium", "Flu/Fever"),
    4: PriorityClass(4, "Low", "Checkup"),
}

MIN_PRIORITY = min(PRIORITY_CLASSES)
MAX_PRIORITY = max(PRIORITY_CLASSES)
CRITICAL_PRIORITY = MIN_PRIORITY  # the only class counted and shown as critical


def is_valid_priority(priority) -> bool:
    # bool is an int subclass; True must not pass as class 1
    if isinstance(priority, bool) or not isinstance(priority, int):
        return False
    return priority in PRIORITY_CLASSES


@dataclass(frozen=True)
class AdmissionRecord:
    name: str
    priority: int
    arrival_sequence: int
    category: str = ""

    @property
    def is_critical(self) -> bool:
        return self.priority == CRITICAL_PRIORITY

    @property
    def priority_class(self) -> PriorityClass:
        return PRIORITY_CLASSES[self.priority]


def ordering_key(record: AdmissionRecord) -> Tuple[int, int]:
    """Sort key for the service order: priority first, then arrival."""
    return (record.priority, record.arrival_sequence)


def compare_records(a: AdmissionRecord, b: AdmissionRecord) -> int:
    """Three-way comparison matching :func:`ordering_key`.

    Returns a negative number when ``a`` is served before ``b``, a positive
    number when after, and zero only for records sharing both priority and
    arrival sequence.
    """
    if a.priority != b.priority:
        return a.priority - b.priority
    return a.arrival_sequence - b.arrival_sequence
