"""Command line entry point: ``upmsp <instance> <solution> [options]``."""
from __future__ import annotations

import argparse
import json
import sys
from typing import List, Optional

from .config import ALGORITHMS, SolverConfig
from .context import RunContext
from .design import get_design
from .errors import InstanceFormatError, InvariantViolation
from .instance import read_instance
from .reporting import TABLE_BOTTOM, TABLE_HEADER, TABLE_RULE, TABLE_TOP, format_move_table, human_count
from .runner import solve
from .solution import read_solution, write_solution


def _neighborhood(value: str) -> tuple:
    try:
        kind, variant, flag = (int(x) for x in value.split(","))
    except ValueError:
        raise argparse.ArgumentTypeError("expected <id,policy,value>, e.g. 2,0,0") from None
    return kind, variant, flag != 0


def build_parser() -> argparse.ArgumentParser:
    defaults = SolverConfig()
    p = argparse.ArgumentParser(
        prog="upmsp",
        description="Local search for the unrelated parallel machine scheduling problem with setup times.",
    )
    p.add_argument("instance", help="Path of the problem input file")
    p.add_argument("solution", help="Path of the (output) solution file")
    p.add_argument("--algorithm", choices=ALGORITHMS, default=defaults.algorithm)
    p.add_argument("--best-known", type=int, default=None, help="Best known makespan for RPD output")
    p.add_argument("--seed", type=int, default=defaults.seed)
    p.add_argument("--max-iters", type=int, default=defaults.max_iters,
                   help="Maximum number of consecutive non-improving iterations")
    p.add_argument("--time", type=float, default=defaults.time_limit, help="Time limit in seconds")
    p.add_argument("--validate", action="store_true",
                   help="Only check an existing solution file, no search")
    p.add_argument("--initial", default=defaults.initial, choices=("random", "greedy", "naive", "very-naive"))

    g = p.add_argument_group("ILS")
    g.add_argument("--rna-max", type=int, default=defaults.rna_max)
    g.add_argument("--iters-p", type=int, default=defaults.iters_p)
    g.add_argument("--p0", type=int, default=defaults.p0)
    g.add_argument("--p-max", type=int, default=defaults.p_max, help="Level ceiling in multiples of p0")

    g = p.add_argument_group("LAHC")
    g.add_argument("--list-size", type=int, default=defaults.list_size)

    g = p.add_argument_group("SA")
    g.add_argument("--alpha", type=float, default=defaults.alpha)
    g.add_argument("--sa-max", type=int, default=defaults.sa_max)
    g.add_argument("--t0", type=float, default=defaults.t0)

    g = p.add_argument_group("SCHC")
    g.add_argument("--step-size", type=int, default=defaults.step_size)

    g = p.add_argument_group("Neighborhoods")
    g.add_argument("-n", dest="neighborhoods", type=_neighborhood, action="append", default=[],
                   metavar="ID,POLICY,VALUE",
                   help="Disable policy (0..3) of neighborhood id (0..5) if value = 0, enable it otherwise")
    g.add_argument("--learning", action="store_true", help="Select moves with learning automata")

    g = p.add_argument_group("Diagnostics")
    g.add_argument("--check", action="store_true", help="Validate the solution after every iteration (slow)")
    g.add_argument("--trace", type=str, default=None, help="Write search events to this JSONL file")
    g.add_argument("--quiet", action="store_true", help="Do not print the progress table")
    return p


def config_from_args(args: argparse.Namespace) -> SolverConfig:
    config = SolverConfig(
        algorithm=args.algorithm,
        seed=args.seed,
        time_limit=args.time,
        max_iters=args.max_iters,
        best_known=args.best_known,
        rna_max=args.rna_max,
        iters_p=args.iters_p,
        p0=args.p0,
        p_max=args.p_max,
        list_size=args.list_size,
        alpha=args.alpha,
        t0=args.t0,
        sa_max=args.sa_max,
        step_size=args.step_size,
        learning=args.learning,
        validate=args.check,
        initial=args.initial,
    )
    for kind, variant, enabled in args.neighborhoods:
        config.set_neighborhood(kind, variant, enabled)
    config.check()
    return config


def _validate_only(args: argparse.Namespace) -> int:
    problem = read_instance(args.instance)
    try:
        solution = read_solution(problem, args.solution, validate=True)
    except InvariantViolation as exc:
        for problem_text in exc.problems:
            print(problem_text)
        print("\nSolution is invalid!\n")
        return 1
    print(f"\nSolution was validated and has cost {solution.cost}\n")
    return 0


def _search(args: argparse.Namespace) -> int:
    config = config_from_args(args)
    problem = read_instance(args.instance)
    if config.best_known is None:
        config.best_known = problem.best_known

    trace_fh = open(args.trace, "w") if args.trace else None

    def logger(ev: dict) -> None:
        trace_fh.write(json.dumps(ev) + "\n")

    ctx = RunContext(
        best_known=config.best_known,
        verbose=not args.quiet,
        logger=logger if trace_fh else None,
        validate=config.validate,
    )
    design = get_design(config.algorithm)
    print(f"Instance....: {args.instance}")
    print(f"Algorithm...: {design.identifier}")
    print(f"Other params: maxIters={human_count(config.max_iters)}, seed={config.seed}, "
          f"timeLimit={config.time_limit:.2f}s\n")
    if not args.quiet:
        print(TABLE_TOP)
        print(TABLE_HEADER)
        print(TABLE_RULE, flush=True)

    try:
        ctx.restart_clock()
        result = solve(problem, config, ctx)
    finally:
        if trace_fh:
            trace_fh.close()

    if not args.quiet:
        print(TABLE_BOTTOM + "\n")
    print("Neighborhoods statistics:\n")
    print(format_move_table(result.moves) + "\n")

    rpd = ctx.rpd(result.cost)
    if rpd is not None:
        print(f"Best RPD..........: {rpd:.4f}%")
    print(f"Best makespan.....: {result.cost}")
    print(f"N. of Iterations..: {result.iterations}")
    print(f"Total runtime.....: {ctx.elapsed():.2f}s", flush=True)

    write_solution(result.solution, args.solution)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        if args.validate:
            return _validate_only(args)
        return _search(args)
    except (InstanceFormatError, InvariantViolation, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except ValueError as exc:
        parser.error(str(exc))


if __name__ == "__main__":
    sys.exit(main())
