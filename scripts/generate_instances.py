#!/usr/bin/env python3
"""Write random UPMSP instance files.

Usage
-----

```
python scripts/generate_instances.py --jobs 50,100 --machines 10,20 --count 3 --output-dir data/instances
```
"""

import argparse
import random
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if SRC.exists():
    sys.path.insert(0, str(SRC))

from upmsp.instance import generate_instance, write_instance


def _ints(text: str) -> list:
    return [int(x) for x in text.split(",") if x.strip()]


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate random UPMSP instances")
    parser.add_argument("--jobs", type=str, default="50", help="Comma-separated job counts")
    parser.add_argument("--machines", type=str, default="10", help="Comma-separated machine counts")
    parser.add_argument("--count", type=int, default=1, help="Instances per (jobs, machines) pair")
    parser.add_argument("--max-process", type=int, default=99)
    parser.add_argument("--max-setup", type=int, default=49)
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--output-dir", type=str, required=True)
    args = parser.parse_args()

    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    rng = random.Random(args.seed)
    for n_jobs in _ints(args.jobs):
        for n_machines in _ints(args.machines):
            for k in range(1, args.count + 1):
                name = f"I_{n_jobs}_{n_machines}_S_1-{args.max_setup}_{k}"
                problem = generate_instance(
                    n_jobs,
                    n_machines,
                    rng,
                    process_range=(1, args.max_process),
                    setup_range=(1, args.max_setup),
                    name=name,
                )
                path = output_dir / f"{name}.txt"
                write_instance(problem, str(path))
                print(f"Wrote {path}")


if __name__ == "__main__":
    main()
