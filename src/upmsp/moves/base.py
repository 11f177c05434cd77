"""Common abstractions for UPMSP moves (neighborhoods).

Every move follows the same protocol: :meth:`Move.do_move` mutates the
solution and returns the delta cost, after which exactly one of
:meth:`Move.accept` or :meth:`Move.reject` must be called.  ``reject``
restores the previous job placements exactly, so the net effect of
``do_move`` + ``reject`` is nil.
"""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ..errors import MoveProtocolError
from ..instance import Problem
from ..solution import Machine, Solution


@dataclass
class MoveStats:
    """Counters kept by every move for the end-of-run statistics table."""

    iterations: int = 0
    improvements: int = 0
    sideways: int = 0
    worsens: int = 0
    rejects: int = 0

    @property
    def accepts(self) -> int:
        return self.improvements + self.sideways + self.worsens


class Move(ABC):
    """Base class for stateful perturbations of a :class:`Solution`.

    Parameters
    ----------
    problem:
        Instance the move operates on.
    rng:
        Random number generator used to sample machines and positions.
    name:
        Display name used in statistics tables.
    priority:
        Static priority; larger is more important.  Seeds the adaptive
        selection probabilities.
    """

    def __init__(self, problem: Problem, rng: random.Random, name: str, priority: int = 1) -> None:
        self.problem = problem
        self.rng = rng
        self.name = name
        self.priority = priority
        self.in_chain = False
        self.pending = False
        self.delta = 0
        self.initial_cost = 0
        self.solution: Optional[Solution] = None
        self.stats = MoveStats()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"

    def __str__(self) -> str:
        return self.name

    @abstractmethod
    def has_move(self, solution: Solution) -> bool:
        """Return whether this move can be applied to ``solution``."""

    @abstractmethod
    def _apply(self, solution: Solution) -> None:
        """Sample and apply one mutation, remembering how to undo it."""

    @abstractmethod
    def _undo(self, solution: Solution) -> None:
        """Exactly invert the last :meth:`_apply`."""

    def do_move(self, solution: Solution) -> int:
        if self.pending:
            raise MoveProtocolError(f"{self.name}: do_move called before accept() or reject()")
        if not self.has_move(solution):
            raise MoveProtocolError(f"{self.name}: do_move called while has_move() is false")
        self.pending = True
        self.stats.iterations += 1
        self.solution = solution
        self.initial_cost = solution.cost
        self._apply(solution)
        if not self.in_chain:
            solution.update_cost()
        self.delta = solution.cost - self.initial_cost
        return self.delta

    def accept(self) -> None:
        if not self.pending:
            raise MoveProtocolError(f"{self.name}: accept() called before do_move()")
        self.pending = False
        if self.delta < 0:
            self.stats.improvements += 1
        elif self.delta == 0:
            self.stats.sideways += 1
        else:
            self.stats.worsens += 1

    def reject(self) -> None:
        if not self.pending:
            raise MoveProtocolError(f"{self.name}: reject() called before do_move()")
        self.pending = False
        self.stats.rejects += 1
        self._undo(self.solution)
        if not self.in_chain:
            self.solution.update_cost()

    def reset(self) -> None:
        """Forget per-run state; counters are kept."""


class MachineMove(Move):
    """Shared machine sampling for the concrete neighborhoods.

    ``smart`` selects the best target position instead of a random one and
    ``use_bottleneck`` makes the move always involve the bottleneck machine.
    """

    label = ""

    def __init__(
        self,
        problem: Problem,
        rng: random.Random,
        smart: bool = False,
        use_bottleneck: bool = False,
        priority: int = 1,
    ) -> None:
        name = self.label + ("Smart" if smart else "") + ("(mk)" if use_bottleneck else "")
        super().__init__(problem, rng, name, priority)
        self.smart = smart
        self.use_bottleneck = use_bottleneck
        self._state: tuple = ()

    # intra-machine moves need one machine holding at least ``min_jobs`` jobs
    def _has_machine(self, solution: Solution, min_jobs: int) -> bool:
        if self.use_bottleneck:
            return solution.bottleneck.n_jobs >= min_jobs
        return any(machine.n_jobs >= min_jobs for machine in solution.machines)

    def _pick_machine(self, solution: Solution, min_jobs: int) -> Machine:
        if self.use_bottleneck:
            return solution.bottleneck
        machines = solution.machines
        while True:
            machine = machines[self.rng.randrange(len(machines))]
            if machine.n_jobs >= min_jobs:
                return machine

    def _pick_pair(self, solution: Solution, min_second: int) -> tuple:
        """Two distinct machines; the first is non-empty (the bottleneck if requested)."""
        machines = solution.machines
        rng = self.rng
        if self.use_bottleneck:
            first = solution.bottleneck
        else:
            first = machines[rng.randrange(len(machines))]
            while first.n_jobs == 0:
                first = machines[rng.randrange(len(machines))]
        while True:
            second = machines[rng.randrange(len(machines))]
            if second is not first and second.n_jobs >= min_second:
                return first, second

    def _other_position(self, n: int, excluded: int) -> int:
        """Uniform position in ``range(n)`` other than ``excluded``."""
        pos = self.rng.randrange(n - 1)
        return pos + 1 if pos >= excluded else pos


__all__ = ["Move", "MachineMove", "MoveStats"]
