# src/upmsp/instance.py
from __future__ import annotations
from dataclasses import dataclass
from functools import cached_property
from typing import Dict, List, Mapping, Optional
import os
import random
import numpy as np
import pandas as pd

from .errors import InstanceFormatError

@dataclass
class Problem:
    name: str
    process_times: np.ndarray  # shape: (machines, jobs)
    setup_times: np.ndarray    # shape: (machines, jobs, jobs); [m, before, after]
    best_known: Optional[int] = None

    def __post_init__(self) -> None:
        self.process_times = np.array(self.process_times, dtype=np.int64)
        self.setup_times = np.array(self.setup_times, dtype=np.int64)
        if self.process_times.ndim != 2:
            raise InstanceFormatError(f"process_times must be 2-D, got shape {self.process_times.shape}")
        m, n = self.process_times.shape
        if m < 1 or n < 1:
            raise InstanceFormatError(f"Instance needs at least one machine and one job, got {m}x{n}")
        if self.setup_times.shape != (m, n, n):
            raise InstanceFormatError(
                f"setup_times must have shape {(m, n, n)}, got {self.setup_times.shape}"
            )
        if (self.process_times < 0).any() or (self.setup_times < 0).any():
            raise InstanceFormatError("Process and setup times must be non-negative")
        diag = self.setup_times[:, np.arange(n), np.arange(n)]
        if diag.any():
            machine, job = map(int, np.argwhere(diag)[0])
            raise InstanceFormatError(f"Setup between equal jobs must be zero (machine {machine}, job {job})")
        # shared read-only by every solution
        self.process_times.setflags(write=False)
        self.setup_times.setflags(write=False)

    @property
    def n_machines(self) -> int: return self.process_times.shape[0]
    @property
    def n_jobs(self) -> int: return self.process_times.shape[1]

    # plain-list views for the hot path; numpy scalar indexing is slow
    @cached_property
    def process_lists(self) -> List[List[int]]: return self.process_times.tolist()
    @cached_property
    def setup_lists(self) -> List[List[List[int]]]: return self.setup_times.tolist()

def _ints(line: str, expected: int, where: str) -> List[int]:
    tokens = line.split()
    if len(tokens) != expected:
        raise InstanceFormatError(f"{where}: expected {expected} integers, got {len(tokens)}")
    try:
        return [int(x) for x in tokens]
    except ValueError as exc:
        raise InstanceFormatError(f"{where}: {exc}") from None

def read_instance(path: str, name: Optional[str] = None) -> Problem:
    """Parse an instance file (header, process-time pairs, per-machine setup matrices)."""
    with open(path, "r") as f:
        lines = [line.rstrip("\n") for line in f]
    it = iter(enumerate(lines, start=1))

    def _next(what: str) -> tuple:
        try:
            return next(it)
        except StopIteration:
            raise InstanceFormatError(f"{path}: unexpected end of file while reading {what}") from None

    lineno, header = _next("header")
    tokens = header.split()
    if len(tokens) < 2:
        raise InstanceFormatError(f"{path}:{lineno}: header must be 'nJobs nMachines'")
    n, m = _ints(" ".join(tokens[:2]), 2, f"{path}:{lineno}")
    if n < 1 or m < 1:
        raise InstanceFormatError(f"{path}:{lineno}: invalid size {n} jobs x {m} machines")
    _next("separator")

    p_times = np.zeros((m, n), dtype=np.int64)
    for job in range(n):
        lineno, line = _next(f"process times of job {job}")
        row = _ints(line, 2 * m, f"{path}:{lineno}")
        for machine in range(m):
            machine_id = row[2 * machine]
            if machine_id != machine:
                raise InstanceFormatError(
                    f"{path}:{lineno}: machine id {machine_id} does not match column {machine}"
                )
            p_times[machine, job] = row[2 * machine + 1]

    _next("SSD separator")
    setups = np.zeros((m, n, n), dtype=np.int64)
    for machine in range(m):
        _next(f"header of machine {machine}")
        for job in range(n):
            lineno, line = _next(f"setup row {job} of machine {machine}")
            setups[machine, job, :] = _ints(line, n, f"{path}:{lineno}")

    if name is None:
        name = os.path.splitext(os.path.basename(path))[0]
    return Problem(name=name, process_times=p_times, setup_times=setups)

def write_instance(problem: Problem, path: str) -> None:
    m, n = problem.n_machines, problem.n_jobs
    with open(path, "w") as f:
        f.write(f"{n} {m}\n")
        f.write(f"{problem.name}\n")
        for job in range(n):
            pairs = []
            for machine in range(m):
                pairs.extend([machine, int(problem.process_times[machine, job])])
            f.write(" ".join(map(str, pairs)) + "\n")
        f.write("SSD\n")
        for machine in range(m):
            f.write(f"M{machine}\n")
            for job in range(n):
                f.write(" ".join(str(int(v)) for v in problem.setup_times[machine, job]) + "\n")

def generate_instance(
    n_jobs: int,
    n_machines: int,
    rng: Optional[random.Random] = None,
    process_range: tuple = (1, 99),
    setup_range: tuple = (1, 49),
    name: Optional[str] = None,
) -> Problem:
    """Random instance with uniform process and setup times (zero diagonal)."""
    rng = rng or random.Random()
    gen = np.random.default_rng(rng.randrange(2**32))
    p_times = gen.integers(process_range[0], process_range[1] + 1, size=(n_machines, n_jobs))
    setups = gen.integers(setup_range[0], setup_range[1] + 1, size=(n_machines, n_jobs, n_jobs))
    setups[:, np.arange(n_jobs), np.arange(n_jobs)] = 0
    if name is None:
        name = f"I_{n_jobs}_{n_machines}_S_{setup_range[0]}-{setup_range[1]}"
    return Problem(name=name, process_times=p_times, setup_times=setups)

def load_best_known(csv_path: str) -> Dict[str, int]:
    df = pd.read_csv(csv_path)
    if not {"instance", "best_makespan"} <= set(df.columns):
        raise ValueError("best_known.csv must have columns: instance,best_makespan")
    return (
        df[["instance", "best_makespan"]]
        .dropna()
        .set_index("instance")["best_makespan"]
        .astype(int)
        .to_dict()
    )

def attach_best_known(instances: Dict[str, Problem], best_known: Mapping[str, int]) -> None:
    for name, val in best_known.items():
        if name in instances:
            instances[name].best_known = int(val)

def read_instances(path: str, verbose: bool = False) -> Dict[str, Problem]:
    """Read one instance file, or every ``.txt`` file of a directory, keyed by name."""
    if os.path.isfile(path):
        problem = read_instance(path)
        return {problem.name: problem}
    files = sorted(f for f in os.listdir(path) if f.lower().endswith(".txt"))
    if not files:
        raise FileNotFoundError(f"No .txt instance files found in {path}")
    instances: Dict[str, Problem] = {}
    for fname in files:
        problem = read_instance(os.path.join(path, fname))
        instances[problem.name] = problem
        if verbose:
            print(f"[*] {problem.name}: {problem.n_jobs} jobs, {problem.n_machines} machines", flush=True)
    return instances
