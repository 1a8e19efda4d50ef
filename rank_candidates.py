#!/usr/bin/env python3
"""rank_candidates.py

Rank thermoelectric material candidates with the weighted priority score and
pick the top Queued candidates for the next synthesis round.

Input:
  CSV / JSON dataset or HTTP feed (see material_feed.py), default MATERIALS_SOURCE

Outputs (by default, into outputs_csv/):
  - materials_ranked.csv   (every material, rank + score + breakdown)
  - top_candidates.csv     (Queued materials only, full-pool rank kept)

Examples:
  # Default weights
  python rank_candidates.py --source materials_sample.csv

  # Favour efficiency over cost, top 3
  python rank_candidates.py --source materials_sample.csv --top 3 \
    --weights "efficiency=0.40;cost=0.05"

  # Print JSON instead of a summary
  python rank_candidates.py --json
"""

from __future__ import annotations

import argparse
import csv
import json
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from material_feed import load_materials
from material_stats import recommendation, scored_rows
from prioritization import DEFAULT_WEIGHTS, calculate_roi, parse_weights, rank_materials, top_candidates

load_dotenv()

# Make Windows terminal output safe
if hasattr(sys.stdout, "reconfigure"):
    sys.stdout.reconfigure(encoding="utf-8", errors="replace")


def write_csv(path: Path, rows: List[Dict[str, Any]]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    if not rows:
        path.write_text("", encoding="utf-8-sig")
        return
    fieldnames = list(rows[0].keys())
    with path.open("w", encoding="utf-8-sig", newline="") as f:
        w = csv.DictWriter(f, fieldnames=fieldnames)
        w.writeheader()
        for r in rows:
            w.writerow({k: r.get(k, "") for k in fieldnames})


def main(argv: Optional[List[str]] = None) -> None:
    ap = argparse.ArgumentParser(description="Rank thermoelectric candidates by weighted priority score.")
    ap.add_argument("--source", default=None, help="CSV/JSON path or http(s) URL (default: MATERIALS_SOURCE)")
    ap.add_argument("--out_dir", default=os.environ.get("OUTPUT_DIR", "outputs_csv"), help="Where to write CSVs")
    ap.add_argument("--weights", default="", help="Custom weights: 'efficiency=0.3;cost=0.2' (others keep defaults)")
    ap.add_argument("--top", type=int, default=5, help="How many Queued candidates to recommend (default: 5)")
    ap.add_argument("--json", action="store_true", help="Print ranking as JSON instead of writing CSVs")
    args = ap.parse_args(argv)

    weights = parse_weights(args.weights) if args.weights.strip() else DEFAULT_WEIGHTS
    materials = load_materials(args.source)

    ranked = rank_materials(materials, weights)
    top = top_candidates(materials, args.top, weights)

    if args.json:
        print(json.dumps({"weights": weights.as_dict(), "ranked": scored_rows(ranked)}, indent=2, ensure_ascii=False))
        return

    out_dir = Path(args.out_dir).expanduser().resolve()
    out_dir.mkdir(parents=True, exist_ok=True)

    out_path = out_dir / "materials_ranked.csv"
    write_csv(out_path, scored_rows(ranked))
    print(f"Wrote: {out_path}")

    out_path = out_dir / "top_candidates.csv"
    write_csv(out_path, scored_rows(top))
    print(f"Wrote: {out_path}")

    print("Weights used:")
    for k, v in weights.as_dict().items():
        print(f"  - {k}: {v}")
    total = weights.total()
    print(f"  (sum={total:.2f}, {'balanced' if weights.is_balanced() else 'not balanced'})")

    print(f"\nTop {len(top)} Queued candidates:")
    for s in top:
        rec = recommendation(s.priority_score)
        print(f"  #{s.rank} {s.id} {s.formula}  score={s.priority_score:.2f}  ROI={calculate_roi(s.material):.2f}")
        print(f"     {rec['headline']}")


if __name__ == "__main__":
    main()
