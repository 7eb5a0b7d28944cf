from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple
import math

import numpy as np

from memory.allocator import BlockStore, FREE

@dataclass
class FragMetrics:
    total_free: int
    lfe: int
    external_frag: float
    entropy: float
    hole_count: int
    resident: int

def _hole_sizes(free_mask: np.ndarray) -> np.ndarray:
    # pad with occupied sentinels so every hole has a rising and a falling edge
    edges = np.diff(np.concatenate(([0], free_mask.astype(np.int8), [0])))
    starts = np.flatnonzero(edges == 1)
    ends = np.flatnonzero(edges == -1)
    return ends - starts

def _entropy(sizes: np.ndarray) -> float:
    total = int(sizes.sum())
    if total <= 0:
        return 0.0
    ps = sizes[sizes > 0] / total
    return float(-sum(p*math.log(p, 2) for p in ps))

def hole_layout(store: BlockStore) -> Tuple[int, ...]:
    return tuple(int(s) for s in _hole_sizes(store.as_array() == FREE))

def compute_metrics(store: BlockStore) -> FragMetrics:
    tags = store.as_array()
    sizes = _hole_sizes(tags == FREE)
    total_free = int(sizes.sum())
    lfe = int(sizes.max()) if sizes.size else 0
    external = 0.0 if total_free == 0 else max(0.0, 1.0 - (lfe/total_free))
    resident = int(np.unique(tags[tags != FREE]).size)
    return FragMetrics(total_free, lfe, external, _entropy(sizes), int(sizes.size), resident)
