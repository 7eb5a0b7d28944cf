from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Tuple, Union

from control.compactor import Compactor
from control.config import SimConfig
from control.reclaimer import Reclaimer
from memory.allocator import BlockStore
from policy.base import NextFitCursor, Policy, Strategy, build_strategy

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class Request:
    id: int
    size: int

    def __post_init__(self):
        if self.id <= 0:
            raise ValueError(f"request id must be positive, got {self.id}")
        if self.size <= 0:
            raise ValueError(f"request {self.id}: size must be positive, got {self.size}")

def requests_from_sizes(sizes: Iterable[int], first_id: int = 1) -> Iterator[Request]:
    for i, size in enumerate(sizes, start=first_id):
        yield Request(i, int(size))

@dataclass
class Outcome:
    request: Request
    allocated: bool
    compacted: bool = False
    evicted: List[int] = field(default_factory=list)

@dataclass
class AllocStats:
    requests: int = 0
    allocated: int = 0
    abandoned: int = 0
    vacated: int = 0
    compactions: int = 0

class AllocationController:
    """Resolves one request at a time against a single BlockStore.

    attempt -> compact and retry (contiguous policies, fragmented space only)
    -> evict the largest resident and retry, until it fits or nothing is left
    to evict.
    """
    def __init__(self, config: Optional[SimConfig] = None):
        self.config = (config or SimConfig()).validate()
        self.store = BlockStore(self.config.capacity)
        self.cursor = NextFitCursor()
        self.reclaimer = Reclaimer(self.store, paging=not self.policy.contiguous)
        self.compactor = Compactor(self.store, self.cursor, self.policy)
        self.strategy: Strategy = build_strategy(self.policy, self.store, self.cursor,
                                                 self.config.frame_size)
        self._requests = 0
        self._allocated = 0
        self._abandoned = 0

    @property
    def policy(self) -> Policy:
        return self.config.policy

    @property
    def stats(self) -> AllocStats:
        return AllocStats(self._requests, self._allocated, self._abandoned,
                          self.reclaimer.vacated, self.compactor.compactions)

    def reset(self):
        self.store.clear()
        self.cursor.reset()

    def snapshot(self) -> Tuple[int, ...]:
        return self.store.snapshot()

    def can_ever_fit(self, size: int) -> bool:
        if size > self.config.capacity:
            return False
        if self.policy is Policy.PAGING:
            fs = self.config.frame_size
            return -(-size // fs) <= self.config.capacity // fs
        return True

    def allocate(self, request: Request) -> Outcome:
        self._requests += 1
        out = Outcome(request, False)
        rid, size = request.id, request.size

        if not self.can_ever_fit(size):
            return self._abandon(out, "larger than memory")

        if self.strategy.attempt(rid, size):
            return self._done(out)

        before = self.store.snapshot()
        cursor_before = self.cursor.position

        if self.policy.contiguous and self.store.count_free() >= size:
            self.compactor.compact()
            out.compacted = True
            if self.strategy.attempt(rid, size):
                return self._done(out)

        # each eviction removes one resident, so this bounds the loop
        for _ in range(len(self.store.owners())):
            victim = self.reclaimer.evict_largest()
            if victim is None:
                break
            out.evicted.append(victim)
            if self.strategy.attempt(rid, size):
                return self._done(out)

        self.store.restore(before)
        self.cursor.position = cursor_before
        out.evicted.clear()
        return self._abandon(out, "no further eviction possible")

    def run(self, requests: Iterable[Union[Request, int]]) -> Tuple[int, ...]:
        for req in self._as_requests(requests):
            self.allocate(req)
        return self.snapshot()

    def _as_requests(self, items: Iterable[Union[Request, int]]) -> Iterator[Request]:
        next_id = 1
        for item in items:
            if isinstance(item, Request):
                req = item
            else:
                req = Request(next_id, int(item))
            next_id = req.id + 1
            yield req

    def _done(self, out: Outcome) -> Outcome:
        out.allocated = True
        self._allocated += 1
        return out

    def _abandon(self, out: Outcome, reason: str) -> Outcome:
        self._abandoned += 1
        logger.warning("cannot allocate memory for process %d (size=%d): %s",
                       out.request.id, out.request.size, reason)
        return out
