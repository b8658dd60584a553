import pytest

from triage.sequence import SequenceAllocator


def test_fresh_counters_start_at_defaults():
    allocator = SequenceAllocator()
    assert allocator.next_arrival_sequence == 1
    assert allocator.treated_count == 0


def test_arrival_sequences_strictly_increase():
    allocator = SequenceAllocator()
    issued = [allocator.next_arrival() for _ in range(50)]
    assert issued == list(range(1, 51))
    assert allocator.peek_next_arrival() == 51


def test_peek_does_not_consume():
    allocator = SequenceAllocator()
    assert allocator.peek_next_arrival() == 1
    assert allocator.peek_next_arrival() == 1
    assert allocator.next_arrival() == 1


def test_record_treated_increments_by_one():
    allocator = SequenceAllocator()
    allocator.record_treated()
    allocator.record_treated()
    assert allocator.treated_count == 2


def test_restore_resumes_counters():
    allocator = SequenceAllocator()
    allocator.restore(next_arrival=4, treated=2)
    assert allocator.next_arrival() == 4
    assert allocator.treated_count == 2


@pytest.mark.parametrize("next_arrival, treated", [(0, 0), (1, -1), (-5, 3)])
def test_restore_refuses_values_below_defaults(next_arrival, treated):
    allocator = SequenceAllocator()
    allocator.next_arrival()
    with pytest.raises(ValueError):
        allocator.restore(next_arrival, treated)
    assert allocator.next_arrival_sequence == 2
    assert allocator.treated_count == 0
