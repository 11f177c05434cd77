# src/upmsp/moves/neighborhoods.py
from __future__ import annotations
from typing import Callable, Iterable, Optional

from ..solution import Machine, Solution
from .base import MachineMove

def _argmin(candidates: Iterable[int], score: Callable[[int], tuple]) -> int:
    """Candidate with the smallest score (ties -> earliest candidate)."""
    best: Optional[int] = None
    best_score: Optional[tuple] = None
    for cand in candidates:
        s = score(cand)
        if best_score is None or s < best_score:
            best, best_score = cand, s
    assert best is not None
    return best

def _switch(machine: Machine, pos1: int, pos2: int) -> None:
    job1, job2 = machine.jobs[pos1], machine.jobs[pos2]
    machine.set_job(job2, pos1)
    machine.set_job(job1, pos2)


class Shift(MachineMove):
    """Move one job to another position of the same machine."""

    label = "Shift"

    def has_move(self, solution: Solution) -> bool:
        return self._has_machine(solution, 2)

    def _apply(self, solution: Solution) -> None:
        machine = self._pick_machine(solution, 2)
        n = machine.n_jobs
        src = self.rng.randrange(n)
        job = machine.del_job(src)
        if self.smart:
            dst = _argmin((q for q in range(n) if q != src), lambda q: (machine.delta_add(job, q),))
        else:
            dst = self._other_position(n, src)
        machine.add_job(job, dst)
        self._state = (machine, job, src, dst)

    def _undo(self, solution: Solution) -> None:
        machine, job, src, dst = self._state
        machine.del_job(dst)
        machine.add_job(job, src)


class SimpleSwap(MachineMove):
    """Exchange two jobs between two machines, keeping their positions."""

    label = "SimpSwap"

    def has_move(self, solution: Solution) -> bool:
        if self.use_bottleneck and solution.bottleneck.n_jobs == 0:
            return False
        return solution.n_used_machines > 1

    def _apply(self, solution: Solution) -> None:
        m1, m2 = self._pick_pair(solution, 1)
        rng = self.rng
        pos1 = rng.randrange(m1.n_jobs)
        job1 = m1.jobs[pos1]
        if self.smart:
            def score(q: int) -> tuple:
                mk1 = m1.makespan + m1.delta_set(m2.jobs[q], pos1)
                mk2 = m2.makespan + m2.delta_set(job1, q)
                return max(mk1, mk2), mk1 + mk2
            pos2 = _argmin(range(m2.n_jobs), score)
        else:
            pos2 = rng.randrange(m2.n_jobs)
        job2 = m2.jobs[pos2]
        m1.set_job(job2, pos1)
        m2.set_job(job1, pos2)
        self._state = (m1, m2, pos1, pos2, job1, job2)

    def _undo(self, solution: Solution) -> None:
        m1, m2, pos1, pos2, job1, job2 = self._state
        m1.set_job(job1, pos1)
        m2.set_job(job2, pos2)


class Swap(MachineMove):
    """Exchange two jobs between two machines, reinserting each at a new position."""

    label = "Swap"

    def has_move(self, solution: Solution) -> bool:
        if self.use_bottleneck and solution.bottleneck.n_jobs == 0:
            return False
        return solution.n_used_machines > 1

    def _insert_position(self, machine: Machine, job: int) -> int:
        if self.smart:
            return _argmin(range(machine.n_jobs + 1), lambda q: (machine.delta_add(job, q),))
        return self.rng.randrange(machine.n_jobs + 1)

    def _apply(self, solution: Solution) -> None:
        m1, m2 = self._pick_pair(solution, 1)
        rng = self.rng
        pos1 = rng.randrange(m1.n_jobs)
        pos2 = rng.randrange(m2.n_jobs)
        job1 = m1.del_job(pos1)
        job2 = m2.del_job(pos2)
        dst1 = self._insert_position(m1, job2)
        m1.add_job(job2, dst1)
        dst2 = self._insert_position(m2, job1)
        m2.add_job(job1, dst2)
        self._state = (m1, m2, pos1, pos2, dst1, dst2, job1, job2)

    def _undo(self, solution: Solution) -> None:
        m1, m2, pos1, pos2, dst1, dst2, job1, job2 = self._state
        m2.del_job(dst2)
        m1.del_job(dst1)
        m2.add_job(job2, pos2)
        m1.add_job(job1, pos1)


class Switch(MachineMove):
    """Exchange the jobs at two positions of one machine."""

    label = "Switch"

    def has_move(self, solution: Solution) -> bool:
        return self._has_machine(solution, 2)

    def _apply(self, solution: Solution) -> None:
        machine = self._pick_machine(solution, 2)
        n = machine.n_jobs
        pos1 = self.rng.randrange(n)
        if self.smart:
            def score(q: int) -> tuple:
                _switch(machine, pos1, q)
                value = machine.makespan
                _switch(machine, pos1, q)
                return (value,)
            pos2 = _argmin((q for q in range(n) if q != pos1), score)
        else:
            pos2 = self._other_position(n, pos1)
        _switch(machine, pos1, pos2)
        self._state = (machine, pos1, pos2)

    def _undo(self, solution: Solution) -> None:
        machine, pos1, pos2 = self._state
        _switch(machine, pos1, pos2)


class TaskMove(MachineMove):
    """Relocate one job to a position of another machine."""

    label = "TaskMove"

    def has_move(self, solution: Solution) -> bool:
        if len(solution.machines) < 2:
            return False
        if self.use_bottleneck:
            return solution.bottleneck.n_jobs > 0
        return solution.n_used_machines > 0

    def _apply(self, solution: Solution) -> None:
        src, dst = self._pick_pair(solution, 0)
        pos = self.rng.randrange(src.n_jobs)
        job = src.del_job(pos)
        if self.smart:
            target = _argmin(range(dst.n_jobs + 1), lambda q: (dst.delta_add(job, q),))
        else:
            target = self.rng.randrange(dst.n_jobs + 1)
        dst.add_job(job, target)
        self._state = (src, dst, job, pos, target)

    def _undo(self, solution: Solution) -> None:
        src, dst, job, pos, target = self._state
        dst.del_job(target)
        src.add_job(job, pos)


class TwoShift(MachineMove):
    """Move a block of two adjacent jobs to another position of the same machine."""

    label = "TwoShift"

    def has_move(self, solution: Solution) -> bool:
        return self._has_machine(solution, 3)

    def _apply(self, solution: Solution) -> None:
        machine = self._pick_machine(solution, 3)
        n = machine.n_jobs
        src = self.rng.randrange(n - 1)
        first = machine.del_job(src)
        second = machine.del_job(src)
        if self.smart:
            dst = _argmin(
                (q for q in range(n - 1) if q != src),
                lambda q: (machine.delta_add_pair(first, second, q),),
            )
        else:
            dst = self._other_position(n - 1, src)
        machine.add_job(second, dst)
        machine.add_job(first, dst)
        self._state = (machine, first, second, src, dst)

    def _undo(self, solution: Solution) -> None:
        machine, first, second, src, dst = self._state
        machine.del_job(dst)
        machine.del_job(dst)
        machine.add_job(second, src)
        machine.add_job(first, src)
