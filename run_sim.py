from __future__ import annotations
import argparse, logging
from typing import Iterator, List, Sequence
from control.config import SimConfig
from control.controller import AllocationController, requests_from_sizes
from memory.fragmentation import compute_metrics
from policy.base import Policy
from viz.ascii_map import render_map

def load_requests(path: str) -> Iterator[int]:
    """Yield request sizes; any whitespace separates them."""
    with open(path,'r',encoding='utf-8') as f:
        for lineno, line in enumerate(f, start=1):
            for tok in line.split():
                try:
                    size = int(tok)
                except ValueError:
                    raise ValueError(f"{path}:{lineno}: not an integer: {tok!r}") from None
                if size <= 0:
                    raise ValueError(f"{path}:{lineno}: request size must be positive, got {size}")
                yield size

def write_snapshot(path: str, snapshot: Sequence[int]):
    with open(path,'w',encoding='utf-8') as f:
        for tag in snapshot:
            f.write(f"{tag}\n")

def build_parser() -> argparse.ArgumentParser:
    ap=argparse.ArgumentParser(description="Simulate contiguous and paged block allocation.")
    ap.add_argument('--requests', required=True, help="file of request sizes, one per line")
    ap.add_argument('--out', help="write the final owner of every block here, one per line")
    ap.add_argument('--policy', type=Policy.parse, default=Policy.FIRST_FIT,
                    help="ff/first-fit, nf/next-fit, bf/best-fit, wf/worst-fit, pages/paging")
    ap.add_argument('--capacity', type=int, default=128)
    ap.add_argument('--frame-size', type=int, default=2,
                    help="blocks per frame (paging only)")
    ap.add_argument('--show-map', action='store_true')
    ap.add_argument('--log-level', default='WARNING',
                    choices=['DEBUG','INFO','WARNING','ERROR'])
    return ap

def main(argv: List[str] | None = None):
    ap=build_parser()
    args=ap.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(levelname)s %(name)s: %(message)s")

    try:
        cfg=SimConfig(args.capacity, args.frame_size, args.policy).validate()
    except ValueError as e:
        ap.error(str(e))

    sim=AllocationController(cfg)
    try:
        sizes=list(load_requests(args.requests))
    except OSError as e:
        ap.error(f"problem reading file {args.requests}: {e.strerror}")
    except ValueError as e:
        ap.error(str(e))

    for req in requests_from_sizes(sizes):
        sim.allocate(req)

    snap=sim.snapshot()
    if args.out:
        write_snapshot(args.out, snap)

    st=sim.stats
    m=compute_metrics(sim.store)
    print("="*72)
    print("Block Allocation Simulator - Summary")
    print("="*72)
    print(f"Policy: {cfg.policy.label}   Capacity: {cfg.capacity}   Frame size: {cfg.frame_size}")
    print(f"Used: {sim.store.used()}  Free: {sim.store.count_free()}  Resident: {m.resident}")
    print(f"Requests: {st.requests}  Allocated: {st.allocated}  Abandoned: {st.abandoned}")
    print(f"Processes vacated: {st.vacated}  Compaction events: {st.compactions}")
    print("-"*72)
    print(f"Fragmentation: LFE={m.lfe} holes={m.hole_count} external_frag={m.external_frag:.3f} entropy={m.entropy:.3f}")
    if args.show_map:
        print("-"*72)
        print("Memory map (ASCII):")
        print(render_map(sim.store))
    if args.out:
        print(f"Wrote: {args.out}")
    print("="*72)
    return 0

if __name__=='__main__':
    raise SystemExit(main())
