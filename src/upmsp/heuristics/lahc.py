"""Late acceptance hill climbing."""

from __future__ import annotations

from typing import List, Optional

from ..solution import Solution
from .base import Heuristic


class LAHC(Heuristic):
    """Late acceptance hill climbing.

    A worsening move is accepted when the resulting cost is not above the
    cost recorded ``list_size`` iterations earlier.  When the
    non-improvement cap is hit with time remaining the history is reset to
    the starting cost and the search continues.
    """

    def __init__(self, problem, rng, list_size: int = 1000, mechanism=None, ctx=None) -> None:
        super().__init__(problem, rng, "LAHC", mechanism, ctx)
        if list_size <= 0:
            raise ValueError("list_size must be positive")
        self.history: List[int] = [0] * list_size

    def __str__(self) -> str:
        return f"LAHC (listSize={len(self.history)})"

    def run(self, initial: Solution, time_limit: Optional[float] = None, max_iters: int = 10**8) -> Solution:
        deadline = self._deadline(time_limit)
        self.best_solution = initial
        solution = initial.clone()

        size = len(self.history)
        self.history = [initial.cost] * size
        no_improve = 0
        pos = -1

        while self._time_left(deadline):
            while self._time_left(deadline) and no_improve < max_iters:
                no_improve += 1
                pos = (pos + 1) % size

                move = self.select_move(solution)
                delta = move.do_move(solution)

                if delta < 0:
                    self.accept_move(move)
                    no_improve = 0
                    if solution.cost < self.best_solution.cost:
                        self._new_best(solution)
                elif delta == 0 or solution.cost <= self.history[pos]:
                    self.accept_move(move)
                else:
                    self.reject_move(move)

                self.history[pos] = solution.cost
                self._check(solution)
                self._n_iters += 1

            if deadline is None or not self._time_left(deadline):
                break
            no_improve = 0
            self.history = [initial.cost] * size
            self.reset_mechanism()
            self.ctx.text("Resetting LAHC list")

        return self.best_solution


__all__ = ["LAHC"]
