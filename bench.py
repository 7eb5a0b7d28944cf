from __future__ import annotations
import argparse
import subprocess
import sys
import re
from pathlib import Path

PY = sys.executable  # respects venv if activated, otherwise uses current python

POLICIES = ["ff", "nf", "bf", "wf", "pages"]

REQUESTS = str(Path("traces") / "mixed_requests.txt")

PATTERNS = {
    "allocated": re.compile(r"Allocated:\s+(\d+)"),
    "abandoned": re.compile(r"Abandoned:\s+(\d+)"),
    "vacated": re.compile(r"Processes vacated:\s+(\d+)"),
    "compactions": re.compile(r"Compaction events:\s+(\d+)"),
    "lfe": re.compile(r"Fragmentation: LFE=(\d+)"),
    "holes": re.compile(r"holes=(\d+)"),
    "external_frag": re.compile(r"external_frag=([0-9\.]+)"),
}

def run(policy: str, requests: str, capacity: int) -> str:
    cmd = [PY, "run_sim.py", "--requests", requests, "--policy", policy,
           "--capacity", str(capacity)]
    out = subprocess.check_output(cmd, stderr=subprocess.STDOUT, text=True)
    return out

def parse(out: str):
    def get(key, default=None):
        m = PATTERNS[key].search(out)
        return m.group(1) if m else default
    return {
        "allocated": int(get("allocated", 0)),
        "abandoned": int(get("abandoned", 0)),
        "vacated": int(get("vacated", 0)),
        "compactions": int(get("compactions", 0)),
        "lfe": int(get("lfe", 0)),
        "holes": int(get("holes", 0)),
        "external_frag": float(get("external_frag", 0.0)),
    }

def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--requests", default=REQUESTS)
    ap.add_argument("--capacity", type=int, default=128)
    args = ap.parse_args()

    rows=[]
    for policy in POLICIES:
        out = run(policy, args.requests, args.capacity)
        rows.append((policy, parse(out)))

    header = ["policy","allocated","abandoned","vacated","compactions","LFE","holes","ext_frag"]
    print("="*84)
    print(f"Block Allocation Simulator - Policy Table ({args.requests})")
    print("="*84)
    print("{:<7} {:>9} {:>9} {:>8} {:>11} {:>6} {:>6} {:>8}".format(*header))
    for policy, m in rows:
        print("{:<7} {:>9} {:>9} {:>8} {:>11} {:>6} {:>6} {:>8.3f}".format(
            policy, m["allocated"], m["abandoned"], m["vacated"], m["compactions"],
            m["lfe"], m["holes"], m["external_frag"]
        ))
    print("="*84)
    print("Tip: add --show-map to a single run for a visual memory map.")
    print(f"  python run_sim.py --requests {args.requests} --policy wf --show-map")

if __name__ == "__main__":
    main()
