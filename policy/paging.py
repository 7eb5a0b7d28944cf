from __future__ import annotations
from typing import List

from memory.allocator import BlockStore, FREE
from policy.base import Strategy

class Paginator(Strategy):
    """Simple paging: any free aligned frame can hold any page.

    A whole frame is reserved for every chunk of the request, so a request
    whose size is not a multiple of the frame size wastes the tail of its
    last frame.
    """
    def __init__(self, store: BlockStore, frame_size: int = 2):
        super().__init__(store)
        if frame_size <= 0:
            raise ValueError(f"frame_size must be positive, got {frame_size}")
        self.frame_size = frame_size

    @property
    def frame_count(self) -> int:
        return self.store.capacity // self.frame_size

    def frames_needed(self, size: int) -> int:
        return -(-size // self.frame_size)

    def free_frames(self) -> List[int]:
        fs = self.frame_size
        tags = self.store.tags
        return [f*fs for f in range(self.frame_count)
                if all(t == FREE for t in tags[f*fs:(f+1)*fs])]

    def attempt(self, owner: int, size: int) -> bool:
        if self.store.count_free() < size:
            return False
        need = self.frames_needed(size)
        frames = self.free_frames()
        if len(frames) < need:
            return False
        for start in frames[:need]:
            self.store.fill(start, owner, self.frame_size)
        return True
