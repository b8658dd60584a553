import json
import os
import stat

import pytest

from triage.errors import StateStoreError
from triage.queue import TriageQueue
from triage.records import AdmissionRecord
from triage.store import FORMAT_TAG, LoadStatus, PersistedState, StateStore, decode, encode

WAITING = [
    AdmissionRecord(name="Alice", priority=3, arrival_sequence=1, category="Flu/Fever"),
    AdmissionRecord(name="Bob", priority=1, arrival_sequence=2, category="Life Threatening"),
    AdmissionRecord(name="Zoë", priority=1, arrival_sequence=5, category="chest pain"),
]


def _document(**overrides):
    document = json.loads(encode(WAITING, 6, 3))
    document.update(overrides)
    return json.dumps(document).encode("utf-8")


def _huge_counter_document():
    text = encode(WAITING, 6, 3).decode("utf-8")
    return text.replace('"next_arrival_sequence": 6', '"next_arrival_sequence": -' + "9" * 5000).encode("utf-8")


DEEPLY_NESTED = b"[" * 200000 + b"]" * 200000


def test_round_trip_restores_records_and_counters():
    result = decode(encode(WAITING, 6, 3))

    assert result.status is LoadStatus.OK
    assert set(result.state.waiting) == set(WAITING)
    assert result.state.next_arrival_sequence == 6
    assert result.state.treated_count == 3


def test_round_trip_rebuilds_same_service_order():
    queue = TriageQueue(WAITING)
    before = queue.snapshot_in_order()

    # order on disk is irrelevant; the queue re-derives it
    result = decode(encode(reversed(before), 6, 3))

    assert TriageQueue(result.state.waiting).snapshot_in_order() == before


def test_encoded_layout_is_self_describing():
    document = json.loads(encode(WAITING[:1], 2, 0))
    assert document["format"] == FORMAT_TAG
    assert document["version"] == 1
    assert list(document["waiting"][0]) == ["priority", "arrival_sequence", "category", "name"]
    assert document["next_arrival_sequence"] == 2
    assert document["treated_count"] == 0


def test_empty_queue_round_trip():
    result = decode(encode([], 1, 0))
    assert result.ok
    assert result.state == PersistedState()


@pytest.mark.parametrize("data", [None, b""])
def test_no_data_is_absent(data):
    assert decode(data).status is LoadStatus.ABSENT


@pytest.mark.parametrize(
    "data",
    [
        b"\xff\xfe not utf-8",
        b"{not json",
        b"[]",
        DEEPLY_NESTED,
        _huge_counter_document(),
        _document(format="something-else"),
        _document(version=99),
        _document(waiting="nope"),
        _document(waiting=[{"priority": 9, "arrival_sequence": 1, "category": "", "name": "x"}]),
        _document(waiting=[{"priority": 1, "arrival_sequence": 1, "category": "", "name": "  "}]),
        _document(waiting=[{"priority": 1, "arrival_sequence": "1", "category": "", "name": "x"}]),
        _document(waiting=[{"priority": 1, "arrival_sequence": 1, "name": "x"}]),
        _document(waiting=["x"]),
        _document(next_arrival_sequence=0),
        _document(treated_count=-1),
        _document(treated_count="3"),
        _document(next_arrival_sequence=5),
        _document(
            waiting=[
                {"priority": 1, "arrival_sequence": 2, "category": "", "name": "a"},
                {"priority": 2, "arrival_sequence": 2, "category": "", "name": "b"},
            ]
        ),
    ],
)
def test_malformed_data_is_corrupt(data):
    result = decode(data)
    assert result.status is LoadStatus.CORRUPT
    assert result.state is None
    assert result.reason


def test_missing_file_loads_as_absent(tmp_path):
    store = StateStore(tmp_path / "state.json")
    assert store.load().status is LoadStatus.ABSENT


def test_save_then_load(tmp_path):
    store = StateStore(tmp_path / "nested" / "state.json")
    store.save(PersistedState(waiting=list(WAITING), next_arrival_sequence=6, treated_count=3))

    result = StateStore(store.path).load()
    assert result.ok
    assert set(result.state.waiting) == set(WAITING)
    assert (result.state.next_arrival_sequence, result.state.treated_count) == (6, 3)


def test_save_leaves_no_temporary_files(tmp_path):
    store = StateStore(tmp_path / "state.json")
    store.save(PersistedState(waiting=list(WAITING), next_arrival_sequence=6, treated_count=0))
    store.save(PersistedState(waiting=[], next_arrival_sequence=6, treated_count=3))

    assert sorted(os.listdir(tmp_path)) == ["state.json"]
    assert store.load().state.waiting == []


def test_failed_replace_keeps_previous_file(tmp_path, monkeypatch):
    store = StateStore(tmp_path / "state.json")
    store.save(PersistedState(waiting=list(WAITING), next_arrival_sequence=6, treated_count=3))

    def _boom(src, dst):
        raise PermissionError("read-only medium")

    monkeypatch.setattr("triage.store.os.replace", _boom)
    with pytest.raises(StateStoreError):
        store.save(PersistedState(waiting=[], next_arrival_sequence=9, treated_count=7))

    monkeypatch.undo()
    assert sorted(os.listdir(tmp_path)) == ["state.json"]
    result = store.load()
    assert result.state.next_arrival_sequence == 6
    assert set(result.state.waiting) == set(WAITING)


def test_unreadable_path_is_corrupt(tmp_path):
    directory = tmp_path / "state.json"
    directory.mkdir()
    result = StateStore(directory).load()
    assert result.status is LoadStatus.CORRUPT


@pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
def test_save_keeps_existing_file_mode(tmp_path):
    store = StateStore(tmp_path / "state.json")
    store.save(PersistedState())
    os.chmod(store.path, 0o644)

    store.save(PersistedState(waiting=list(WAITING), next_arrival_sequence=6, treated_count=1))

    assert stat.S_IMODE(store.path.stat().st_mode) == 0o644


@pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
def test_new_file_gets_umask_default_mode(tmp_path):
    umask = os.umask(0o022)
    try:
        store = StateStore(tmp_path / "state.json")
        store.save(PersistedState())
    finally:
        os.umask(umask)

    assert stat.S_IMODE(store.path.stat().st_mode) == 0o644


@pytest.mark.skipif(not hasattr(os, "O_DIRECTORY"), reason="directory fsync is POSIX only")
def test_save_fsyncs_containing_directory(tmp_path, monkeypatch):
    synced_dirs = []
    real_fsync = os.fsync

    def _tracking_fsync(fd):
        if stat.S_ISDIR(os.fstat(fd).st_mode):
            synced_dirs.append(fd)
        return real_fsync(fd)

    monkeypatch.setattr("triage.store.os.fsync", _tracking_fsync)
    StateStore(tmp_path / "state.json").save(PersistedState())

    assert len(synced_dirs) == 1
