"""Solution representation with O(1) delta-cost maintenance.

A :class:`Solution` owns one :class:`Machine` per machine id.  Each machine
owns its ordered job sequence and a cached makespan that is updated from the
edges adjacent to the changed position only, so moves never need a full
recomputation.  ``validate``/``check`` recompute everything from scratch and
are meant for tests and optional runtime checks.
"""

from __future__ import annotations

from typing import List, Optional

from .errors import InstanceFormatError, InvariantViolation
from .instance import Problem


class Machine:
    """Ordered job sequence of one machine plus its cached makespan."""

    __slots__ = ("id", "jobs", "makespan", "_process", "_setup")

    def __init__(self, problem: Problem, machine_id: int) -> None:
        self.id = machine_id
        self.jobs: List[int] = []
        self.makespan = 0
        self._process: List[int] = problem.process_lists[machine_id]
        self._setup: List[List[int]] = problem.setup_lists[machine_id]

    def __len__(self) -> int:
        return len(self.jobs)

    def __repr__(self) -> str:
        return f"Machine({self.id}, makespan={self.makespan}, jobs={self.jobs})"

    @property
    def n_jobs(self) -> int:
        return len(self.jobs)

    def clone(self) -> "Machine":
        machine = Machine.__new__(Machine)
        machine.id = self.id
        machine.jobs = list(self.jobs)
        machine.makespan = self.makespan
        machine._process = self._process
        machine._setup = self._setup
        return machine

    # region delta cost calculation

    def delta_add(self, job: int, pos: int) -> int:
        """Change in makespan if ``job`` is inserted at ``pos``."""
        jobs, setup = self.jobs, self._setup
        n = len(jobs)
        if n == 0:
            return self._process[job]
        if pos == 0:
            return setup[job][jobs[0]] + self._process[job]
        if pos == n:
            return setup[jobs[-1]][job] + self._process[job]
        prev, nxt = jobs[pos - 1], jobs[pos]
        return -setup[prev][nxt] + setup[prev][job] + self._process[job] + setup[job][nxt]

    def delta_add_pair(self, first: int, second: int, pos: int) -> int:
        """Change in makespan if ``first, second`` are inserted as a block at ``pos``."""
        jobs, setup, process = self.jobs, self._setup, self._process
        n = len(jobs)
        delta = process[first] + setup[first][second] + process[second]
        if pos > 0:
            delta += setup[jobs[pos - 1]][first]
        if pos < n:
            delta += setup[second][jobs[pos]]
        if 0 < pos < n:
            delta -= setup[jobs[pos - 1]][jobs[pos]]
        return delta

    def delta_delete(self, pos: int) -> int:
        """Change in makespan if the job at ``pos`` is removed."""
        jobs, setup, process = self.jobs, self._setup, self._process
        n = len(jobs)
        job = jobs[pos]
        if n == 1:
            return -self.makespan
        if pos == 0:
            return -(setup[job][jobs[1]] + process[job])
        if pos == n - 1:
            return -(setup[jobs[pos - 1]][job] + process[job])
        prev, nxt = jobs[pos - 1], jobs[pos + 1]
        return -(setup[prev][job] + process[job] + setup[job][nxt]) + setup[prev][nxt]

    def delta_set(self, job: int, pos: int) -> int:
        """Change in makespan if the job at ``pos`` is replaced by ``job``."""
        jobs, setup, process = self.jobs, self._setup, self._process
        n = len(jobs)
        old = jobs[pos]
        if n == 1:
            return process[job] - process[old]
        if pos == 0:
            nxt = jobs[1]
            return (setup[job][nxt] + process[job]) - (setup[old][nxt] + process[old])
        if pos == n - 1:
            prev = jobs[pos - 1]
            return (setup[prev][job] + process[job]) - (setup[prev][old] + process[old])
        prev, nxt = jobs[pos - 1], jobs[pos + 1]
        return ((setup[prev][job] + process[job] + setup[job][nxt])
                - (setup[prev][old] + process[old] + setup[old][nxt]))

    # endregion

    def add_job(self, job: int, pos: Optional[int] = None) -> None:
        if pos is None:
            pos = len(self.jobs)
        if not 0 <= pos <= len(self.jobs):
            raise IndexError(f"adding job to invalid index {pos} in machine {self.id}")
        self.makespan += self.delta_add(job, pos)
        self.jobs.insert(pos, job)

    def del_job(self, pos: int) -> int:
        if not 0 <= pos < len(self.jobs):
            raise IndexError(f"deleting job from invalid index {pos} in machine {self.id}")
        self.makespan += self.delta_delete(pos)
        return self.jobs.pop(pos)

    def set_job(self, job: int, pos: int) -> int:
        if not 0 <= pos < len(self.jobs):
            raise IndexError(f"setting job of invalid index {pos} in machine {self.id}")
        self.makespan += self.delta_set(job, pos)
        old = self.jobs[pos]
        self.jobs[pos] = job
        return old

    def recompute_makespan(self) -> int:
        jobs, setup, process = self.jobs, self._setup, self._process
        if not jobs:
            return 0
        total = process[jobs[0]]
        for before, after in zip(jobs, jobs[1:]):
            total += setup[before][after] + process[after]
        return total

    def validate(self) -> List[str]:
        expected = self.recompute_makespan()
        if expected != self.makespan:
            return [f"Makespan is wrong in machine {self.id}: {self.makespan} vs {expected} (expected value)"]
        return []

    def check(self) -> None:
        problems = self.validate()
        if problems:
            raise InvariantViolation(problems)


class Solution:
    """Assignment of every job to one position of one machine."""

    def __init__(self, problem: Problem) -> None:
        self.problem = problem
        self.machines: List[Machine] = [Machine(problem, m) for m in range(problem.n_machines)]
        self.cost = 0
        self.bottleneck: Machine = self.machines[0]

    def __repr__(self) -> str:
        return f"Solution(cost={self.cost}, bottleneck={self.bottleneck.id})"

    def clone(self) -> "Solution":
        other = Solution.__new__(Solution)
        other.problem = self.problem
        other.machines = [machine.clone() for machine in self.machines]
        other.cost = self.cost
        other.bottleneck = other.machines[self.bottleneck.id]
        return other

    @property
    def n_used_machines(self) -> int:
        return sum(1 for machine in self.machines if machine.jobs)

    def update_cost(self) -> int:
        # strict '>' keeps the lowest id on ties
        best = self.machines[0]
        for machine in self.machines:
            if machine.makespan > best.makespan:
                best = machine
        self.bottleneck = best
        self.cost = best.makespan
        return self.cost

    def assignment(self) -> List[List[int]]:
        return [list(machine.jobs) for machine in self.machines]

    def validate(self) -> List[str]:
        """Recompute every invariant from scratch; return the problems found."""
        problems: List[str] = []
        n_jobs = self.problem.n_jobs

        seen = [False] * n_jobs
        for machine in self.machines:
            for job in machine.jobs:
                if not 0 <= job < n_jobs:
                    problems.append(f"Job {job} on machine {machine.id} is out of range")
                    continue
                if seen[job]:
                    problems.append(f"Job {job} is allocated twice")
                seen[job] = True
        for job, allocated in enumerate(seen):
            if not allocated:
                problems.append(f"Job {job} is not allocated to any machine")

        max_value, max_id = 0, 0
        for machine in self.machines:
            if any(not 0 <= job < n_jobs for job in machine.jobs):
                continue
            problems.extend(machine.validate())
            if machine.makespan > max_value:
                max_value, max_id = machine.makespan, machine.id

        if self.cost != max_value:
            problems.append(f"Makespan is wrong: {self.cost} vs {max_value} (expected value)")
        if self.bottleneck.id != max_id:
            problems.append(f"Makespan machine is wrong: {self.bottleneck.id} vs {max_id} (expected machine)")
        if self.bottleneck is not self.machines[self.bottleneck.id]:
            problems.append("Makespan machine does not belong to this solution")
        return problems

    def check(self) -> None:
        problems = self.validate()
        if problems:
            raise InvariantViolation(problems)


def write_solution(solution: Solution, path: str) -> None:
    solution.update_cost()
    with open(path, "w") as f:
        f.write(f"{len(solution.machines)}\n")
        for machine in solution.machines:
            f.write(" ".join(map(str, [machine.n_jobs, *machine.jobs])) + "\n")
        f.write("\n")
        f.write(f"Total makespan: {solution.cost}\n")


def read_solution(problem: Problem, path: str, validate: bool = True) -> Solution:
    """Load a solution file written by :func:`write_solution`.

    With ``validate`` the rebuilt solution is checked and the footer cost (when
    present) must match the recomputed cost.
    """
    with open(path, "r") as f:
        lines = [line.strip() for line in f]
    if not lines:
        raise InstanceFormatError(f"{path}: empty solution file")
    try:
        n_machines = int(lines[0].split()[0])
    except (IndexError, ValueError):
        raise InstanceFormatError(f"{path}: first line must hold the number of machines") from None
    if n_machines != problem.n_machines:
        raise InstanceFormatError(
            f"{path}: solution has {n_machines} machines, instance has {problem.n_machines}"
        )
    if len(lines) < 1 + n_machines:
        raise InstanceFormatError(f"{path}: expected {n_machines} machine lines")

    solution = Solution(problem)
    for machine, line in zip(solution.machines, lines[1:1 + n_machines]):
        try:
            values = [int(x) for x in line.split()]
        except ValueError as exc:
            raise InstanceFormatError(f"{path}: machine {machine.id}: {exc}") from None
        if not values or len(values) != values[0] + 1:
            raise InstanceFormatError(f"{path}: machine {machine.id}: job count does not match the listed jobs")
        for job in values[1:]:
            if not 0 <= job < problem.n_jobs:
                raise InstanceFormatError(f"{path}: machine {machine.id}: job {job} out of range")
            machine.add_job(job)
    solution.update_cost()

    if validate:
        problems = solution.validate()
        for line in lines[1 + n_machines:]:
            if line.startswith("Total makespan"):
                try:
                    reported = int(line.split()[-1])
                except ValueError:
                    raise InstanceFormatError(f"{path}: bad makespan footer") from None
                if reported != solution.cost:
                    problems.append(f"Reported makespan {reported} differs from computed {solution.cost}")
                break
        if problems:
            raise InvariantViolation(problems)
    return solution


__all__ = ["Machine", "Solution", "read_solution", "write_solution"]
