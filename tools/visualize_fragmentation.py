"""
Block Allocation Simulator - Visualizer

Replays a request file through one allocation policy and saves a Matplotlib
heatmap of block ownership after every request (time runs downward).
Requests that needed compaction or eviction are marked as horizontal lines.

How to run (recommended, from repo root):
    python -m tools.visualize_fragmentation --requests traces/mixed_requests.txt --policy nf --out out_fragmentation.png
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Ensure repo root is on sys.path when running as a script:
# (python -m tools.visualize_fragmentation already works without this,
#  but this makes `python tools/visualize_fragmentation.py ...` work too.)
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

import numpy as np
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from control.config import SimConfig
from control.controller import AllocationController, requests_from_sizes
from memory.fragmentation import compute_metrics
from policy.base import Policy
from run_sim import load_requests


def replay(sim: AllocationController, sizes) -> tuple[np.ndarray, list[int]]:
    """
    Allocate every size in order and return (frames, marks): frames is a
    (requests, capacity) array of owner tags, marks the rows whose request
    needed compaction or eviction.
    """
    frames: list[np.ndarray] = []
    marks: list[int] = []
    for req in requests_from_sizes(sizes):
        out = sim.allocate(req)
        if out.compacted or out.evicted:
            marks.append(len(frames))
        frames.append(sim.store.as_array())
    if not frames:
        return np.zeros((0, sim.store.capacity), dtype=np.int64), marks
    return np.stack(frames, axis=0), marks


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--requests", required=True, help="File of request sizes")
    ap.add_argument("--policy", type=Policy.parse, default=Policy.FIRST_FIT)
    ap.add_argument("--out", default="out_fragmentation.png", help="Output image file")
    ap.add_argument("--capacity", type=int, default=128, help="Number of blocks")
    ap.add_argument("--frame-size", type=int, default=2, help="Blocks per frame (paging)")
    args = ap.parse_args()

    req_path = Path(args.requests)
    if not req_path.exists():
        raise SystemExit(f"Request file not found: {req_path}")

    sim = AllocationController(SimConfig(args.capacity, args.frame_size, args.policy))
    H, marks = replay(sim, load_requests(str(req_path)))
    if H.shape[0] == 0:
        raise SystemExit("No requests replayed. Check the request file.")

    # free blocks stay masked so they render as background
    shown = np.ma.masked_equal(H, 0)

    fig = plt.figure(figsize=(10.5, 4.6))
    ax = fig.add_subplot(111)
    ax.imshow(shown, aspect="auto", interpolation="nearest", cmap="tab20")
    ax.set_title(f"Block Ownership Heatmap ({args.policy.label})")
    ax.set_xlabel("block index")
    ax.set_ylabel("request")

    for t in marks:
        ax.axhline(t, linewidth=1, color="black")

    m = compute_metrics(sim.store)
    st = sim.stats
    caption = (
        f"Final: LFE={m.lfe}, holes={m.hole_count}, external_frag={m.external_frag:.3f}, "
        f"vacated={st.vacated}, compactions={st.compactions}, abandoned={st.abandoned}"
    )
    fig.text(0.01, 0.01, caption, fontsize=9)

    fig.tight_layout()
    out_path = Path(args.out)
    fig.savefig(str(out_path), dpi=220)
    print(f"Wrote: {out_path.resolve()}")


if __name__ == "__main__":
    main()
