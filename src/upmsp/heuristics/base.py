"""Shared machinery of the local search heuristics.

Every heuristic owns a list of moves kept sorted by descending priority and a
selection :class:`~upmsp.mechanisms.Mechanism`.  Concrete heuristics only
differ in their acceptance criterion and restart behaviour; sampling,
bookkeeping of the best solution and reporting live here.
"""

from __future__ import annotations

import random
import time
from abc import ABC, abstractmethod
from typing import List, Optional

from ..context import RunContext
from ..errors import InvariantViolation
from ..instance import Problem
from ..mechanisms import Mechanism, UniformMechanism
from ..moves import Move
from ..solution import Solution


class Heuristic(ABC):
    """Base class for single-solution local search methods.

    Parameters
    ----------
    problem:
        Instance being solved.
    rng:
        Random number generator shared with the moves.
    name:
        Display name.
    mechanism:
        Move selection policy; uniform sampling when omitted.
    ctx:
        Run context used for progress rows, trace events and optional
        invariant checks.
    """

    def __init__(
        self,
        problem: Problem,
        rng: random.Random,
        name: str,
        mechanism: Optional[Mechanism] = None,
        ctx: Optional[RunContext] = None,
    ) -> None:
        self.problem = problem
        self.rng = rng
        self.name = name
        self.mechanism = mechanism or UniformMechanism(rng=rng)
        self.ctx = ctx or RunContext()
        self.moves: List[Move] = []
        self.best_solution: Optional[Solution] = None
        self._n_iters = 0

    def __str__(self) -> str:
        return self.name

    @property
    def n_iters(self) -> int:
        return self._n_iters

    def add_move(self, move: Move) -> None:
        self.moves.append(move)
        # stable sort: equal priorities keep insertion order
        self.moves.sort(key=lambda m: -m.priority)
        self.reset_mechanism()

    def reset_mechanism(self) -> None:
        self.mechanism.reset([m.priority for m in self.moves])

    def reset_moves(self) -> None:
        for move in self.moves:
            move.reset()

    def select_move(self, solution: Solution) -> Move:
        """Draw moves from the mechanism until one is applicable to ``solution``."""

        misses = 0
        while True:
            move = self.moves[self.mechanism.next_action()]
            if move.has_move(solution):
                return move
            misses += 1
            if misses % (4 * len(self.moves)) == 0 and not any(m.has_move(solution) for m in self.moves):
                raise ValueError(f"{self.name}: no registered move is applicable to the solution")

    def accept_move(self, move: Move) -> None:
        move.accept()
        if move.delta < 0:
            self.mechanism.update(1.0)

    def reject_move(self, move: Move) -> None:
        move.reject()
        self.mechanism.update(0.0)

    def _check(self, solution: Solution) -> None:
        if self.ctx.validate:
            problems = solution.validate()
            if problems:
                raise InvariantViolation(problems)

    def _new_best(self, solution: Solution, tag: str = "*") -> None:
        self.best_solution = solution.clone()
        self.ctx.status(self.n_iters, self.best_solution.cost, solution.cost, tag)

    @staticmethod
    def _deadline(time_limit: Optional[float]) -> Optional[float]:
        return None if time_limit is None else time.time() + time_limit

    @staticmethod
    def _time_left(deadline: Optional[float]) -> bool:
        return deadline is None or time.time() < deadline

    @staticmethod
    def _remaining(deadline: Optional[float]) -> Optional[float]:
        return None if deadline is None else max(0.0, deadline - time.time())

    @abstractmethod
    def run(self, initial: Solution, time_limit: Optional[float] = None, max_iters: int = 10**8) -> Solution:
        """Search from ``initial`` and return the best solution found.

        ``initial`` is never modified.  The search stops when ``time_limit``
        seconds have elapsed or after ``max_iters`` consecutive iterations
        without improvement (some heuristics restart instead while time
        remains).
        """


__all__ = ["Heuristic"]
