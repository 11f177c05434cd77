# scripts/run_experiments.py
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

# make src importable
THIS_FILE = Path(__file__).resolve()
ROOT = THIS_FILE.parents[1]
SRC_DIR = ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from upmsp.config import ALGORITHMS
from upmsp.instance import attach_best_known, load_best_known, read_instances
from upmsp.reporting import add_rpd_column, summarise_by_instance
from upmsp.runner import run_experiments


def main():
    p = argparse.ArgumentParser(description="Run algorithms x seeds over a set of UPMSP instances")
    # data
    p.add_argument("--instances", type=str, default="data/instances",
                   help="Instance file or directory of .txt instance files")
    p.add_argument("--best-known", type=str, default="data/best_known.csv")
    p.add_argument("--subset", type=str, default="", help="Comma-separated instance names to run")
    p.add_argument("--list-instances", action="store_true")
    # algorithms + runtime
    p.add_argument("--algorithms", type=str, default="sa,lahc,schc,ils")
    p.add_argument("--seeds", type=str, default="0,1,2,3,4")
    p.add_argument("--time-limit", type=float, default=10.0, help="seconds per run")
    p.add_argument("--max-iters", type=int, default=10**8)
    p.add_argument("--outdir", type=str, default="results")
    p.add_argument("--verbose", action="store_true")
    p.add_argument("--trace", action="store_true", help="write JSONL search traces into OUTDIR/traces/")
    # algorithm hyperparameters
    p.add_argument("--list-size", type=int, default=1000)
    p.add_argument("--alpha", type=float, default=0.99)
    p.add_argument("--t0", type=float, default=1.0)
    p.add_argument("--sa-max", type=int, default=10**7)
    p.add_argument("--step-size", type=int, default=1000)
    p.add_argument("--rna-max", type=int, default=9_000_000)
    p.add_argument("--iters-p", type=int, default=700)
    p.add_argument("--p0", type=int, default=80)
    p.add_argument("--p-max", type=int, default=6)
    p.add_argument("--learning", action="store_true")

    args = p.parse_args()
    outdir = Path(args.outdir); outdir.mkdir(parents=True, exist_ok=True)
    trace_dir = str(outdir / "traces") if args.trace else None

    insts = read_instances(args.instances, verbose=args.verbose)
    if args.list_instances:
        print("Instances:", ", ".join(insts))
        print(f"Total: {len(insts)}")
        return

    bk = {}
    if Path(args.best_known).exists():
        bk = load_best_known(args.best_known)
    elif args.verbose:
        print(f"[warn] No best-known file at {args.best_known}")
    attach_best_known(insts, bk)

    algorithms = [x.strip() for x in args.algorithms.split(",") if x.strip()]
    unknown = [a for a in algorithms if a not in ALGORITHMS]
    if unknown:
        p.error(f"unknown algorithm(s): {', '.join(unknown)}")
    seeds = [int(x) for x in args.seeds.split(",") if x.strip()]

    if args.subset.strip():
        wanted = {s.strip() for s in args.subset.split(",")}
        insts = {k: v for k, v in insts.items() if k in wanted}
        if args.verbose:
            print(f"[*] Subset selected: {', '.join(insts.keys())}")

    overrides = dict(
        list_size=args.list_size,
        alpha=args.alpha,
        t0=args.t0,
        sa_max=args.sa_max,
        step_size=args.step_size,
        rna_max=args.rna_max,
        iters_p=args.iters_p,
        p0=args.p0,
        p_max=args.p_max,
        learning=args.learning,
    )

    df = run_experiments(
        insts,
        algorithms=algorithms,
        seeds=seeds,
        time_limit=args.time_limit,
        max_iters=args.max_iters,
        overrides=overrides,
        trace_dir=trace_dir,
        verbose=args.verbose,
    )
    for row in df.itertuples(index=False):
        print(f"{row.instance} | {row.algorithm} | seed={row.seed} -> {row.makespan} in {row.elapsed:.2f}s")
    df.to_csv(outdir / "raw.csv", index=False)

    if bk:
        df = add_rpd_column(df, best_known=bk)
        df.to_csv(outdir / "raw_with_rpd.csv", index=False)

    summ = summarise_by_instance(df)
    summ.to_csv(outdir / "summary_by_instance.csv", index=False)

    agg = dict(makespan_mean=("makespan", "mean"), elapsed_mean=("elapsed", "mean"))
    if df["rpd"].notna().any():
        agg["rpd_mean"] = ("rpd", "mean")
    overall = df.groupby("algorithm").agg(**agg)
    overall.to_csv(outdir / "overall.csv")

    meta = {
        "args": vars(args),
        "n_instances": len(insts),
        "algorithms": algorithms,
        "seeds": seeds,
        "overrides": overrides,
        "trace": bool(args.trace),
    }
    with open(outdir / "meta.json", "w") as f:
        json.dump(meta, f, indent=2)

if __name__ == "__main__":
    main()
