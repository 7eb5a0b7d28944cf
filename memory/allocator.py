from __future__ import annotations
import logging
from typing import Dict, Iterable, List, Sequence, Tuple

import numpy as np

logger = logging.getLogger(__name__)

FREE = 0


class MemoryInvariantError(RuntimeError):
    """Raised when a fill would overwrite an owned block or leave the store."""
    def __init__(self, index: int, owner: int, reason: str):
        super().__init__(f"block {index}: {reason} (owner={owner})")
        self.index = index
        self.owner = owner


class BlockStore:
    """Fixed-length array of owner tags; 0 is free, N is owned by request N."""

    def __init__(self, capacity: int):
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.capacity = capacity
        self.tags: List[int] = [FREE] * capacity

    @classmethod
    def from_tags(cls, tags: Sequence[int]) -> "BlockStore":
        store = cls(len(tags))
        store.tags = [int(t) for t in tags]
        return store

    def clear(self):
        self.tags = [FREE] * self.capacity

    def count_free(self) -> int:
        return self.tags.count(FREE)

    def used(self) -> int:
        return self.capacity - self.count_free()

    def is_free(self, i: int) -> bool:
        return self.tags[i] == FREE

    def owner_at(self, i: int) -> int:
        return self.tags[i]

    def fill(self, start: int, owner: int, length: int):
        if owner <= 0:
            raise ValueError(f"owner id must be positive, got {owner}")
        if length <= 0:
            raise ValueError(f"fill length must be positive, got {length}")
        # validate the whole range first so a breach never leaves a partial write
        for i in range(start, start + length):
            if i < 0 or i >= self.capacity:
                raise MemoryInvariantError(i, owner, "out of bounds")
            if self.tags[i] != FREE:
                raise MemoryInvariantError(i, self.tags[i], "not empty")
        self.tags[start:start + length] = [owner] * length
        logger.debug("allocate %d through %d to %d", start, start + length - 1, owner)

    def vacate(self, owner: int) -> int:
        n = 0
        for i, t in enumerate(self.tags):
            if t == owner:
                self.tags[i] = FREE
                n += 1
        logger.debug("vacate %d (%d blocks)", owner, n)
        return n

    def compact(self) -> int:
        """Slide occupied blocks toward index 0 keeping their order.

        Returns the number of blocks that changed position.
        """
        moved = 0
        out = 0
        for i in range(self.capacity):
            t = self.tags[i]
            if t == FREE:
                continue
            if i != out:
                self.tags[out] = t
                self.tags[i] = FREE
                moved += 1
            out += 1
        for i in range(out, self.capacity):
            self.tags[i] = FREE
        return moved

    def free_runs(self) -> List[Tuple[int, int]]:
        """Maximal runs of free blocks as (start, length), ascending."""
        return [(s, n) for s, n, t in self._runs() if t == FREE]

    def owner_runs(self) -> List[Tuple[int, int, int]]:
        """Maximal runs of one owner as (start, length, owner), ascending."""
        return [(s, n, t) for s, n, t in self._runs() if t != FREE]

    def _runs(self) -> Iterable[Tuple[int, int, int]]:
        start = 0
        for i in range(1, self.capacity + 1):
            if i == self.capacity or self.tags[i] != self.tags[start]:
                yield start, i - start, self.tags[start]
                start = i

    def owners(self) -> List[int]:
        seen: Dict[int, None] = {}
        for t in self.tags:
            if t != FREE:
                seen.setdefault(t, None)
        return list(seen)

    def blocks_of(self, owner: int) -> List[int]:
        return [i for i, t in enumerate(self.tags) if t == owner]

    def snapshot(self) -> Tuple[int, ...]:
        return tuple(self.tags)

    def restore(self, snapshot: Sequence[int]):
        if len(snapshot) != self.capacity:
            raise ValueError(f"snapshot has {len(snapshot)} blocks, store has {self.capacity}")
        self.tags = list(snapshot)

    def as_array(self) -> np.ndarray:
        return np.asarray(self.tags, dtype=np.int64)
