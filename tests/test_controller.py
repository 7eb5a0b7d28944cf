import pytest

from control.config import SimConfig
from control.controller import AllocationController, Request, requests_from_sizes
from memory.allocator import MemoryInvariantError
from policy.base import Policy, Strategy


def _sim(capacity, policy=Policy.FIRST_FIT, frame_size=2):
    return AllocationController(SimConfig(capacity, frame_size, policy))


def test_three_fours_in_ten_blocks_evicts_first_of_tied_owners():
    sim = _sim(10)
    outcomes = [sim.allocate(r) for r in requests_from_sizes([4, 4, 4])]
    assert [o.allocated for o in outcomes] == [True, True, True]
    # only two blocks were free, so compaction could not help
    assert not outcomes[2].compacted
    assert outcomes[2].evicted == [1]
    assert sim.snapshot() == (3, 3, 3, 3, 2, 2, 2, 2, 0, 0)
    assert sim.stats.vacated == 1
    assert sim.stats.compactions == 0


def test_fragmented_space_is_compacted_before_evicting():
    sim = _sim(10)
    sim.store.restore([1, 1, 0, 0, 2, 2, 0, 0, 3, 3])
    out = sim.allocate(Request(4, 4))
    assert out.allocated and out.compacted and out.evicted == []
    assert sim.snapshot() == (1, 1, 2, 2, 3, 3, 4, 4, 4, 4)
    assert sim.stats.compactions == 1


def test_next_fit_cursor_restarts_after_compaction():
    sim = _sim(10, Policy.NEXT_FIT)
    sim.store.restore([1, 1, 0, 0, 2, 2, 0, 0, 3, 3])
    sim.cursor.position = 9
    assert sim.allocate(Request(4, 3)).compacted
    assert sim.store.blocks_of(4) == [6, 7, 8]
    assert sim.cursor.position == 9


def test_paging_evicts_largest_total_without_compacting():
    sim = _sim(8, Policy.PAGING)
    sim.store.restore([1, 0, 0, 2, 2, 0, 0, 3])
    out = sim.allocate(Request(4, 4))
    assert out.allocated and not out.compacted
    assert out.evicted == [2]
    assert sim.snapshot() == (1, 0, 4, 4, 4, 4, 0, 3)
    assert sim.stats.compactions == 0


@pytest.mark.parametrize("policy", list(Policy))
def test_request_larger_than_memory_is_abandoned_untouched(policy):
    sim = _sim(16, policy)
    sim.run([5, 3, 4])
    before = sim.snapshot()
    out = sim.allocate(Request(4, 17))
    assert not out.allocated
    assert sim.snapshot() == before
    assert sim.stats.abandoned == 1
    assert sim.stats.vacated == 0


def test_paging_abandons_when_frames_cannot_cover_request():
    sim = _sim(9, Policy.PAGING)
    sim.run([2])
    out = sim.allocate(Request(2, 9))
    assert not out.allocated
    assert sim.snapshot() == (1, 1, 0, 0, 0, 0, 0, 0, 0)


def test_run_continues_after_abandonment():
    sim = _sim(8)
    snap = sim.run([3, 20, 2])
    assert snap == (1, 1, 1, 3, 3, 0, 0, 0)
    st = sim.stats
    assert (st.requests, st.allocated, st.abandoned) == (3, 2, 1)


class _AlwaysFails(Strategy):
    def attempt(self, owner, size):
        return False


class _PhantomReclaimer:
    """Claims an eviction every time but frees nothing."""
    def __init__(self):
        self.calls = 0
        self.vacated = 0

    def evict_largest(self):
        self.calls += 1
        return 1


def test_eviction_loop_is_bounded_by_resident_owners():
    sim = _sim(10)
    sim.run([2, 2])
    before = sim.snapshot()
    sim.strategy = _AlwaysFails(sim.store)
    sim.reclaimer = _PhantomReclaimer()
    out = sim.allocate(Request(3, 8))
    assert not out.allocated
    assert sim.reclaimer.calls == 2
    assert sim.snapshot() == before


class _Overwrites(Strategy):
    def attempt(self, owner, size):
        self.store.fill(0, owner, size)
        return True


def test_invariant_breach_is_not_swallowed():
    sim = _sim(10)
    sim.run([4])
    sim.strategy = _Overwrites(sim.store)
    with pytest.raises(MemoryInvariantError):
        sim.allocate(Request(2, 2))


def test_controllers_do_not_share_state():
    a = _sim(10, Policy.NEXT_FIT)
    b = _sim(10, Policy.NEXT_FIT)
    a.run([3, 3])
    assert a.cursor.position == 6
    assert b.cursor.position == 0
    assert b.snapshot() == (0,) * 10
    a.reset()
    assert a.snapshot() == (0,) * 10
    assert a.cursor.position == 0


def test_request_rejects_non_positive_values():
    with pytest.raises(ValueError):
        Request(1, 0)
    with pytest.raises(ValueError):
        Request(0, 3)


def test_config_validation():
    with pytest.raises(ValueError):
        SimConfig(capacity=4, frame_size=8).validate()
    with pytest.raises(ValueError):
        SimConfig(capacity=0).validate()
    assert SimConfig(policy="bf").validate().policy is Policy.BEST_FIT


@pytest.mark.parametrize("name,expected", [
    ("ff", Policy.FIRST_FIT),
    ("Next-Fit", Policy.NEXT_FIT),
    ("best_fit", Policy.BEST_FIT),
    ("wf", Policy.WORST_FIT),
    ("paging", Policy.PAGING),
    ("pages", Policy.PAGING),
])
def test_policy_names(name, expected):
    assert Policy.parse(name) is expected


def test_unknown_policy_name():
    with pytest.raises(ValueError):
        Policy.parse("buddy")
