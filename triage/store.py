"""Durable encode/decode of the session state to a single JSON file."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import json
import logging
import os
from pathlib import Path
import stat
import tempfile
from typing import Iterable, List, Optional

from .errors import StateStoreError
from .records import AdmissionRecord, is_valid_priority
from .sequence import FIRST_ARRIVAL_SEQUENCE, INITIAL_TREATED_COUNT

logger = logging.getLogger(__name__)

FORMAT_TAG = "triage-state"
FORMAT_VERSION = 1


@dataclass
class PersistedState:
    waiting: List[AdmissionRecord] = field(default_factory=list)
    next_arrival_sequence: int = FIRST_ARRIVAL_SEQUENCE
    treated_count: int = INITIAL_TREATED_COUNT


class LoadStatus(Enum):
    OK = "ok"
    ABSENT = "absent"
    CORRUPT = "corrupt"


@dataclass
class LoadResult:
    status: LoadStatus
    state: Optional[PersistedState] = None
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is LoadStatus.OK

    @classmethod
    def loaded(cls, state: PersistedState) -> "LoadResult":
        return cls(LoadStatus.OK, state=state)

    @classmethod
    def absent(cls) -> "LoadResult":
        return cls(LoadStatus.ABSENT)

    @classmethod
    def corrupt(cls, reason: str) -> "LoadResult":
        return cls(LoadStatus.CORRUPT, reason=reason)


class _Malformed(Exception):
    pass


def encode(waiting: Iterable[AdmissionRecord], next_arrival: int, treated: int) -> bytes:
    """Serialise the waiting records and both counters as one JSON document."""
    document = {
        "format": FORMAT_TAG,
        "version": FORMAT_VERSION,
        "waiting": [
            {
                "priority": record.priority,
                "arrival_sequence": record.arrival_sequence,
                "category": record.category,
                "name": record.name,
            }
            for record in waiting
        ],
        "next_arrival_sequence": next_arrival,
        "treated_count": treated,
    }
    return json.dumps(document, indent=2, ensure_ascii=False).encode("utf-8")


def decode(data: Optional[bytes]) -> LoadResult:
    """Parse bytes produced by :func:`encode`.

    ``None`` or empty input means there is no prior state. Anything that does
    not parse, or parses into a state that breaks the queue invariants, is
    reported as corrupt rather than raised.
    """
    if not data:
        return LoadResult.absent()
    try:
        document = json.loads(data.decode("utf-8"))
        state = _state_from_document(document)
    except (ValueError, RecursionError) as exc:
        # covers bad UTF-8, bad JSON, oversized int literals and runaway nesting
        return LoadResult.corrupt(f"unparseable state: {exc}")
    except _Malformed as exc:
        return LoadResult.corrupt(str(exc))
    return LoadResult.loaded(state)


def _require_int(document: dict, key: str) -> int:
    value = document.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise _Malformed(f"field {key!r} must be an integer, got {value!r}")
    return value


def _require_str(document: dict, key: str) -> str:
    value = document.get(key)
    if not isinstance(value, str):
        raise _Malformed(f"field {key!r} must be a string, got {value!r}")
    return value


def _record_from_entry(entry) -> AdmissionRecord:
    if not isinstance(entry, dict):
        raise _Malformed(f"waiting entry must be an object, got {entry!r}")
    priority = _require_int(entry, "priority")
    if not is_valid_priority(priority):
        raise _Malformed(f"priority {priority} out of range")
    name = _require_str(entry, "name")
    if not name.strip():
        raise _Malformed("waiting entry has an empty name")
    return AdmissionRecord(
        name=name,
        priority=priority,
        arrival_sequence=_require_int(entry, "arrival_sequence"),
        category=_require_str(entry, "category"),
    )


def _state_from_document(document) -> PersistedState:
    if not isinstance(document, dict):
        raise _Malformed("state document must be a JSON object")
    if document.get("format") != FORMAT_TAG:
        raise _Malformed(f"unexpected format tag {document.get('format')!r}")
    if document.get("version") != FORMAT_VERSION:
        raise _Malformed(f"unsupported version {document.get('version')!r}")

    entries = document.get("waiting")
    if not isinstance(entries, list):
        raise _Malformed("field 'waiting' must be a list")
    waiting = [_record_from_entry(entry) for entry in entries]

    next_arrival = _require_int(document, "next_arrival_sequence")
    treated = _require_int(document, "treated_count")
    if next_arrival < FIRST_ARRIVAL_SEQUENCE:
        raise _Malformed(f"next_arrival_sequence {next_arrival} below {FIRST_ARRIVAL_SEQUENCE}")
    if treated < INITIAL_TREATED_COUNT:
        raise _Malformed(f"treated_count {treated} below {INITIAL_TREATED_COUNT}")

    seen = set()
    for record in waiting:
        seq = record.arrival_sequence
        if seq in seen:
            raise _Malformed(f"duplicate arrival sequence {seq}")
        if not FIRST_ARRIVAL_SEQUENCE <= seq < next_arrival:
            raise _Malformed(f"arrival sequence {seq} outside issued range [1, {next_arrival})")
        seen.add(seq)

    return PersistedState(waiting=waiting, next_arrival_sequence=next_arrival, treated_count=treated)


class StateStore:
    """Reads and atomically rewrites one state file."""

    def __init__(self, path):
        self.path = Path(path)

    def load(self) -> LoadResult:
        try:
            data = self.path.read_bytes()
        except FileNotFoundError:
            logger.info("No saved state at %s; starting a fresh session", self.path)
            return LoadResult.absent()
        except OSError as exc:
            return LoadResult.corrupt(f"cannot read {self.path}: {exc}")
        return decode(data)

    def save(self, state: PersistedState):
        payload = encode(state.waiting, state.next_arrival_sequence, state.treated_count)
        directory = self.path.parent
        tmp_name = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "wb", dir=directory, prefix=f".{self.path.name}.", suffix=".tmp", delete=False
            ) as handle:
                tmp_name = handle.name
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            os.chmod(tmp_name, _target_mode(self.path))
            os.replace(tmp_name, self.path)
            _fsync_directory(directory)
        except OSError as exc:
            if tmp_name is not None:
                _discard(tmp_name)
            raise StateStoreError(f"could not write state to {self.path}: {exc}") from exc
        logger.debug("Wrote %d bytes to %s", len(payload), self.path)


def _target_mode(path: Path) -> int:
    """Permissions for the new file: those of the file it replaces, else the umask default."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def _fsync_directory(directory: Path):
    if not hasattr(os, "O_DIRECTORY"):
        return
    fd = os.open(directory, os.O_RDONLY | os.O_DIRECTORY)
    try:
        os.fsync(fd)
    finally:
        os.close(fd)


def _discard(path: str):
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass
