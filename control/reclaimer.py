from __future__ import annotations
import logging
from typing import Dict, Optional, Tuple

from memory.allocator import BlockStore

logger = logging.getLogger(__name__)

class Reclaimer:
    """Evicts the resident owner occupying the most memory.

    Contiguous policies size an owner by its longest contiguous run; paging
    sizes it by the total number of blocks it holds, since its frames may be
    scattered. Either way every block carrying the victim's id is freed.
    """
    def __init__(self, store: BlockStore, paging: bool = False):
        self.store = store
        self.paging = paging
        self.vacated = 0

    def sizes(self) -> Dict[int, int]:
        """Owner -> eviction metric, in order of first appearance."""
        out: Dict[int, int] = {}
        for _, length, owner in self.store.owner_runs():
            if self.paging:
                out[owner] = out.get(owner, 0) + length
            else:
                out[owner] = max(out.get(owner, 0), length)
        return out

    def pick_victim(self) -> Optional[Tuple[int, int]]:
        victim = None
        for owner, size in self.sizes().items():
            if victim is None or size > victim[1]:
                victim = (owner, size)
        return victim

    def evict_largest(self) -> Optional[int]:
        self.vacated += 1
        victim = self.pick_victim()
        if victim is None:
            logger.debug("no processes to vacate")
            return None
        owner, metric = victim
        freed = self.store.vacate(owner)
        logger.debug("evicted %d (metric=%d, freed=%d)", owner, metric, freed)
        return owner
