from __future__ import annotations
from dataclasses import dataclass
from enum import Enum

from memory.allocator import BlockStore

class Policy(Enum):
    FIRST_FIT = 'ff'
    NEXT_FIT = 'nf'
    BEST_FIT = 'bf'
    WORST_FIT = 'wf'
    PAGING = 'pages'

    @property
    def contiguous(self) -> bool:
        return self is not Policy.PAGING

    @property
    def label(self) -> str:
        return _LABELS[self]

    @classmethod
    def parse(cls, name: str) -> "Policy":
        key = name.strip().lower().replace('_', '-')
        for p in cls:
            if key in (p.value, p.label):
                return p
        raise ValueError(f"unknown policy {name!r}; expected one of "
                         + ", ".join(f"{p.value}/{p.label}" for p in cls))

_LABELS = {
    Policy.FIRST_FIT: 'first-fit',
    Policy.NEXT_FIT: 'next-fit',
    Policy.BEST_FIT: 'best-fit',
    Policy.WORST_FIT: 'worst-fit',
    Policy.PAGING: 'paging',
}

@dataclass
class NextFitCursor:
    """Scan start for next-fit; survives policy switches within a run."""
    position: int = 0

    def reset(self):
        self.position = 0

class Strategy:
    """Places one request into a BlockStore.

    attempt() returns True after committing the placement, or False with the
    store unchanged.
    """
    def __init__(self, store: BlockStore):
        self.store = store

    def attempt(self, owner: int, size: int) -> bool:
        raise NotImplementedError

def build_strategy(policy: Policy, store: BlockStore, cursor: NextFitCursor,
                   frame_size: int = 2) -> Strategy:
    from policy.fit import FirstFit, NextFit, BestFit, WorstFit
    from policy.paging import Paginator
    if policy is Policy.FIRST_FIT:
        return FirstFit(store)
    if policy is Policy.NEXT_FIT:
        return NextFit(store, cursor)
    if policy is Policy.BEST_FIT:
        return BestFit(store)
    if policy is Policy.WORST_FIT:
        return WorstFit(store)
    if policy is Policy.PAGING:
        return Paginator(store, frame_size)
    raise ValueError(f"unsupported policy {policy!r}")
