from __future__ import annotations
import logging

from memory.allocator import BlockStore
from policy.base import NextFitCursor, Policy

logger = logging.getLogger(__name__)

class Compactor:
    """Defragments a contiguous-policy store into one trailing free run."""
    def __init__(self, store: BlockStore, cursor: NextFitCursor, policy: Policy):
        self.store = store
        self.cursor = cursor
        self.policy = policy
        self.compactions = 0
        self.blocks_moved = 0

    def compact(self) -> int:
        if not self.policy.contiguous:
            # frame alignment would no longer hold after sliding pages
            raise RuntimeError("compaction is not allowed under the paging policy")
        moved = self.store.compact()
        self.cursor.reset()
        self.compactions += 1
        self.blocks_moved += moved
        logger.debug("memory compacted (%d blocks moved)", moved)
        return moved
