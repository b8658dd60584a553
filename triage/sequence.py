"""Monotonic counters for arrival tokens and treated patients."""

FIRST_ARRIVAL_SEQUENCE = 1
INITIAL_TREATED_COUNT = 0


class SequenceAllocator:
    def __init__(self):
        self._next_arrival = FIRST_ARRIVAL_SEQUENCE
        self._treated = INITIAL_TREATED_COUNT

    @property
    def next_arrival_sequence(self) -> int:
        return self._next_arrival

    @property
    def treated_count(self) -> int:
        return self._treated

    def next_arrival(self) -> int:
        """Hand out the current arrival sequence and advance the counter."""
        value = self._next_arrival
        self._next_arrival += 1
        return value

    def peek_next_arrival(self) -> int:
        return self._next_arrival

    def record_treated(self):
        self._treated += 1

    def restore(self, next_arrival: int, treated: int):
        """Resume both counters from persisted values.

        Values below the fresh defaults are refused so a restore can never
        move a counter backwards into already issued tokens.
        """
        if next_arrival < FIRST_ARRIVAL_SEQUENCE:
            raise ValueError(f"next arrival sequence must be >= {FIRST_ARRIVAL_SEQUENCE}, got {next_arrival}")
        if treated < INITIAL_TREATED_COUNT:
            raise ValueError(f"treated count must be >= {INITIAL_TREATED_COUNT}, got {treated}")
        self._next_arrival = int(next_arrival)
        self._treated = int(treated)
