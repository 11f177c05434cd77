"""Random descent: accept improving and sideways moves only."""

from __future__ import annotations

from typing import Optional

from ..solution import Solution
from .base import Heuristic


class Descent(Heuristic):
    """Stochastic descent with sideways moves.

    A move is accepted when it does not worsen the current cost.  The
    non-improvement counter is only reset by strictly improving moves, so
    long plateaus still end the run.
    """

    def __init__(self, problem, rng, mechanism=None, ctx=None) -> None:
        super().__init__(problem, rng, "Descent", mechanism, ctx)

    def run(self, initial: Solution, time_limit: Optional[float] = None, max_iters: int = 10**8) -> Solution:
        deadline = self._deadline(time_limit)
        self.best_solution = initial
        solution = initial.clone()

        no_improve = 0
        while self._time_left(deadline) and no_improve < max_iters:
            no_improve += 1
            move = self.select_move(solution)
            delta = move.do_move(solution)

            if delta < 0:
                self.accept_move(move)
                no_improve = 0
                if solution.cost < self.best_solution.cost:
                    self._new_best(solution)
            elif delta == 0:
                self.accept_move(move)
            else:
                self.reject_move(move)

            self._check(solution)
            self._n_iters += 1

        return self.best_solution


__all__ = ["Descent"]
