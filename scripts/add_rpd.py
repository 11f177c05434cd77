#!/usr/bin/env python3
"""Add RPD values to a UPMSP results CSV and optionally summarise it per instance."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import pandas as pd

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if SRC.exists():
    sys.path.insert(0, str(SRC))

from upmsp.instance import load_best_known
from upmsp.reporting import add_rpd_column, summarise_by_instance


def main() -> None:
    parser = argparse.ArgumentParser(description="Compute relative percent deviation for solver results")
    parser.add_argument("results", type=str, help="Results CSV with 'instance' and 'makespan' columns")
    parser.add_argument(
        "--best-known",
        type=str,
        default=None,
        help="CSV with columns 'instance' and 'best_makespan' (defaults to the 'best_known' column)",
    )
    parser.add_argument("--output", type=str, default=None, help="Output path (defaults to the input)")
    parser.add_argument("--summary", type=str, default=None, help="Also write the per-instance summary here")
    args = parser.parse_args()

    df = pd.read_csv(args.results)
    best_known = load_best_known(args.best_known) if args.best_known else None
    enriched = add_rpd_column(df, best_known)
    output_path = Path(args.output or args.results)
    enriched.to_csv(output_path, index=False)
    print(f"Wrote {len(enriched)} rows with RPD to {output_path}")

    if args.summary:
        summarise_by_instance(enriched).to_csv(args.summary, index=False)
        print(f"Wrote per-instance summary to {args.summary}")


if __name__ == "__main__":
    main()
