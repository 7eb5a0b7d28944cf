from __future__ import annotations
from typing import Optional

from memory.allocator import BlockStore, FREE
from policy.base import NextFitCursor, Strategy

def _scan_first(tags, lo: int, hi: int, size: int) -> Optional[int]:
    """Start of the first run of `size` free blocks inside [lo, hi)."""
    start = -1
    count = 0
    for i in range(lo, hi):
        if tags[i] == FREE:
            if start == -1:
                start = i
            count += 1
            if count == size:
                return start
        else:
            start = -1
            count = 0
    return None

class FirstFit(Strategy):
    def attempt(self, owner: int, size: int) -> bool:
        start = _scan_first(self.store.tags, 0, self.store.capacity, size)
        if start is None:
            return False
        self.store.fill(start, owner, size)
        return True

class NextFit(Strategy):
    """First-fit that resumes where the previous next-fit allocation ended."""
    def __init__(self, store: BlockStore, cursor: NextFitCursor):
        super().__init__(store)
        self.cursor = cursor

    def attempt(self, owner: int, size: int) -> bool:
        if self.store.count_free() < size:
            return False
        cap = self.store.capacity
        pos = self.cursor.position % cap
        # runs do not span the wrap point, so the wrapped pass restarts at 0
        start = _scan_first(self.store.tags, pos, cap, size)
        if start is None and pos > 0:
            start = _scan_first(self.store.tags, 0, cap, size)
        if start is None:
            return False
        self.store.fill(start, owner, size)
        self.cursor.position = (start + size) % cap
        return True

class _RunPicker(Strategy):
    """Chooses among maximal free runs of at least `size` blocks."""
    def better(self, length: int, best: int) -> bool:
        raise NotImplementedError

    def attempt(self, owner: int, size: int) -> bool:
        best_start = None
        best_len = 0
        for start, length in self.store.free_runs():
            if length < size:
                continue
            if best_start is None or self.better(length, best_len):
                best_start, best_len = start, length
        if best_start is None:
            return False
        self.store.fill(best_start, owner, size)
        return True

class BestFit(_RunPicker):
    def better(self, length: int, best: int) -> bool:
        return length < best

class WorstFit(_RunPicker):
    def better(self, length: int, best: int) -> bool:
        return length > best
