"""Build solvers from a :class:`SolverConfig` and run single or batch experiments."""
from __future__ import annotations

import json
import random
import time
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional

import pandas as pd

from .config import SolverConfig
from .constructive import build_initial
from .context import RunContext
from .design import get_design
from .heuristics import ILS, LAHC, SCHC, Descent, Heuristic, SimulatedAnnealing
from .instance import Problem
from .mechanisms import Mechanism, build_mechanism
from .moves import Move, build_moves
from .reporting import move_statistics
from .solution import Solution


@dataclass
class SolveResult:
    solution: Solution
    cost: int
    iterations: int
    elapsed: float
    initial_cost: int
    moves: pd.DataFrame


def _mechanism(config: SolverConfig, rng: random.Random) -> Mechanism:
    if config.learning:
        return build_mechanism(
            "learning", rng=rng, learning_rate=config.learning_rate, epsilon=config.learning_epsilon
        )
    return build_mechanism("uniform", rng=rng)


def _heuristic(key: str, problem: Problem, config: SolverConfig, rng: random.Random, ctx: RunContext) -> Heuristic:
    mechanism = _mechanism(config, rng)
    if key == "descent":
        return Descent(problem, rng, mechanism=mechanism, ctx=ctx)
    if key == "lahc":
        return LAHC(problem, rng, config.list_size, mechanism=mechanism, ctx=ctx)
    if key == "sa":
        return SimulatedAnnealing(problem, rng, config.alpha, config.t0, config.sa_max, mechanism=mechanism, ctx=ctx)
    if key == "schc":
        return SCHC(problem, rng, config.step_size, mechanism=mechanism, ctx=ctx)
    raise KeyError(f"Unknown heuristic '{key}'")


def build_solver(
    problem: Problem,
    config: SolverConfig,
    rng: random.Random,
    ctx: Optional[RunContext] = None,
    moves: Optional[List[Move]] = None,
) -> Heuristic:
    """Instantiate the heuristic selected by ``config.algorithm`` with its moves registered."""

    config.check()
    if ctx is None:
        ctx = RunContext(best_known=config.best_known, validate=config.validate)
    else:
        ctx.validate = ctx.validate or config.validate
    design = get_design(config.algorithm)
    solver = _heuristic(design.heuristic, problem, config, rng, ctx)
    if design.wrapper == "ils":
        solver = ILS(
            problem,
            rng,
            inner=solver,
            rna_max=config.rna_max,
            iters_p=config.iters_p,
            p0=config.p0,
            p_max=config.p_max,
            ctx=ctx,
        )
    if moves is None:
        moves = build_moves(problem, rng, config.neighborhoods)
    for move in moves:
        solver.add_move(move)
    return solver


def solve(
    problem: Problem,
    config: Optional[SolverConfig] = None,
    ctx: Optional[RunContext] = None,
    initial: Optional[Solution] = None,
) -> SolveResult:
    """Run one search and collect the result with per-move statistics."""

    config = config or SolverConfig()
    best_known = config.best_known if config.best_known is not None else problem.best_known
    ctx = ctx or RunContext(best_known=best_known, validate=config.validate)
    rng = random.Random(config.seed)
    solver = build_solver(problem, config, rng, ctx)

    if initial is None:
        initial = build_initial(config.initial, problem, rng)
    ctx.event("start", algorithm=config.algorithm, seed=config.seed, initial=int(initial.cost))
    ctx.status(0, initial.cost, initial.cost, "s0")

    start = time.time()
    best = solver.run(initial, config.time_limit, config.max_iters)
    elapsed = time.time() - start
    if config.validate:
        best.check()

    ctx.event("end", best=int(best.cost), iterations=int(solver.n_iters), elapsed=round(elapsed, 4))
    return SolveResult(
        solution=best,
        cost=int(best.cost),
        iterations=int(solver.n_iters),
        elapsed=elapsed,
        initial_cost=int(initial.cost),
        moves=move_statistics(solver.moves),
    )


def run_experiments(
    instances: Mapping[str, Problem],
    algorithms: Iterable[str] = ("sa",),
    seeds: Iterable[int] = (0,),
    time_limit: Optional[float] = 10.0,
    max_iters: int = 10**8,
    overrides: Optional[Dict[str, Any]] = None,
    trace_dir: Optional[str] = None,
    verbose: bool = False,
) -> pd.DataFrame:
    """Execute every (instance, algorithm, seed) combination and return one row per run."""

    records: List[dict] = []
    base = SolverConfig(time_limit=time_limit, max_iters=max_iters, **(overrides or {}))
    if trace_dir:
        Path(trace_dir).mkdir(parents=True, exist_ok=True)

    for inst_name, problem in instances.items():
        for algorithm in algorithms:
            for seed in seeds:
                print(f"[{algorithm}] {inst_name} (seed={seed})", flush=True)
                config = replace(base, algorithm=algorithm, seed=seed, best_known=problem.best_known)

                trace_fh = None
                logger = None
                if trace_dir:
                    trace_fh = open(Path(trace_dir) / f"{inst_name}_{algorithm}_seed{seed}.jsonl", "w")

                    def logger(ev: Dict[str, Any], _fh=trace_fh) -> None:
                        _fh.write(json.dumps(ev) + "\n")

                ctx = RunContext(
                    best_known=problem.best_known, verbose=verbose, logger=logger, validate=config.validate
                )
                try:
                    result = solve(problem, config, ctx)
                finally:
                    if trace_fh:
                        trace_fh.close()

                records.append(
                    {
                        "algorithm": algorithm,
                        "instance": inst_name,
                        "seed": seed,
                        "makespan": result.cost,
                        "initial": result.initial_cost,
                        "best_known": problem.best_known,
                        "rpd": ctx.rpd(result.cost),
                        "elapsed": result.elapsed,
                        "iterations": result.iterations,
                    }
                )

    return pd.DataFrame.from_records(records)


__all__ = ["SolveResult", "build_solver", "build_moves", "solve", "run_experiments"]
