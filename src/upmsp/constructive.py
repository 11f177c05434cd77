# src/upmsp/constructive.py
from __future__ import annotations
import random
from typing import Callable, Dict, Optional

from .instance import Problem
from .solution import Solution

def random_solution(problem: Problem, rng: random.Random) -> Solution:
    """Shuffled jobs, each appended to a uniformly random machine."""
    jobs = list(range(problem.n_jobs))
    rng.shuffle(jobs)
    solution = Solution(problem)
    for job in jobs:
        solution.machines[rng.randrange(problem.n_machines)].add_job(job)
    solution.update_cost()
    return solution

def greedy_solution(problem: Problem, rng: random.Random) -> Solution:
    """Shuffled jobs, each inserted where it increases its machine's makespan the least."""
    jobs = list(range(problem.n_jobs))
    rng.shuffle(jobs)
    solution = Solution(problem)
    for job in jobs:
        best_delta: Optional[int] = None
        best_machine, best_pos = 0, 0
        for machine in solution.machines:
            for pos in range(machine.n_jobs + 1):
                delta = machine.delta_add(job, pos)
                if best_delta is None or delta < best_delta:
                    best_delta, best_machine, best_pos = delta, machine.id, pos
        solution.machines[best_machine].add_job(job, best_pos)
    solution.update_cost()
    return solution

def naive_solution(problem: Problem, rng: Optional[random.Random] = None) -> Solution:
    """Job j goes to machine j mod M."""
    solution = Solution(problem)
    for job in range(problem.n_jobs):
        solution.machines[job % problem.n_machines].add_job(job)
    solution.update_cost()
    return solution

def very_naive_solution(problem: Problem, rng: Optional[random.Random] = None) -> Solution:
    """Every job on machine 0."""
    solution = Solution(problem)
    for job in range(problem.n_jobs):
        solution.machines[0].add_job(job)
    solution.update_cost()
    return solution

CONSTRUCTIVES: Dict[str, Callable[[Problem, random.Random], Solution]] = {
    "random": random_solution,
    "greedy": greedy_solution,
    "naive": naive_solution,
    "very-naive": very_naive_solution,
}

def build_initial(key: str, problem: Problem, rng: random.Random) -> Solution:
    if key not in CONSTRUCTIVES:
        raise KeyError(f"Unknown constructive '{key}'. Available: {', '.join(sorted(CONSTRUCTIVES))}")
    return CONSTRUCTIVES[key](problem, rng)
