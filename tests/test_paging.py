import pytest

from memory.allocator import BlockStore
from policy.paging import Paginator


def test_odd_size_reserves_whole_frames_when_scattered():
    store = BlockStore.from_tags([1, 1, 0, 0, 1, 1, 0, 0, 1, 1, 0, 0])
    assert Paginator(store, 2).attempt(7, 5)
    assert store.blocks_of(7) == [2, 3, 6, 7, 10, 11]


def test_even_size_has_no_waste():
    store = BlockStore(8)
    assert Paginator(store, 2).attempt(1, 4)
    assert store.blocks_of(1) == [0, 1, 2, 3]
    assert store.count_free() == 4


def test_unaligned_free_blocks_are_not_frames():
    tags = [1, 0, 0, 1, 1, 0, 0, 1]
    store = BlockStore.from_tags(tags)
    pager = Paginator(store, 2)
    assert pager.free_frames() == []
    assert not pager.attempt(2, 2)
    assert store.snapshot() == tuple(tags)


def test_partial_frame_shortage_commits_nothing():
    tags = [0, 0, 1, 1, 0, 0, 1, 0]
    store = BlockStore.from_tags(tags)
    # five free blocks pass the count check, but only two frames are whole
    assert not Paginator(store, 2).attempt(2, 5)
    assert store.snapshot() == tuple(tags)


def test_frames_needed_rounds_up():
    pager = Paginator(BlockStore(12), 4)
    assert pager.frames_needed(1) == 1
    assert pager.frames_needed(4) == 1
    assert pager.frames_needed(9) == 3
    assert pager.frame_count == 3


def test_rejects_bad_frame_size():
    with pytest.raises(ValueError):
        Paginator(BlockStore(4), 0)
