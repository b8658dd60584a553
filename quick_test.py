import tempfile
from pathlib import Path

from triage.logging_config import enable_console_logging
from triage.session import SessionController
from triage.store import StateStore


def regression_test_restart_keeps_order_and_counters(state_file: Path):
    """Treat part of the queue, restart, and check tokens keep counting up."""

    session = SessionController(StateStore(state_file))
    session.start()
    session.admit_patient("Alice", 3, "Flu/Fever")
    session.admit_patient("Bob", 1, "Life Threatening")
    session.admit_patient("Cara", 1, "Life Threatening")

    assert [r.name for r in session.snapshot_in_order()] == ["Bob", "Cara", "Alice"]
    assert session.treat_next().name == "Bob"
    assert session.treat_next().name == "Cara"
    assert session.shutdown()

    restarted = SessionController(StateStore(state_file))
    restarted.start()
    assert [r.name for r in restarted.snapshot_in_order()] == ["Alice"]
    assert restarted.treated_count == 2
    assert restarted.admit_patient("Dan", 2).arrival_sequence == 4
    return restarted


if __name__ == "__main__":
    enable_console_logging(level="INFO")

    with tempfile.TemporaryDirectory() as tmp:
        session = regression_test_restart_keeps_order_and_counters(Path(tmp) / "state.json")

        snap = session.snapshot()
        print("Waiting:", [(r.arrival_sequence, r.priority, r.name) for r in snap.waiting])
        print("Critical:", snap.critical_count)
        print("Treated:", snap.treated_count)
        print("Next token:", snap.next_arrival_sequence)
