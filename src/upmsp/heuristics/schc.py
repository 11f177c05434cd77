"""Step counting hill climbing."""

from __future__ import annotations

from typing import Optional

from ..solution import Solution
from .base import Heuristic


class SCHC(Heuristic):
    """Step counting hill climbing.

    Worsening moves are accepted while the cost stays within a bound that is
    refreshed to the current cost every ``step_size`` iterations.
    """

    def __init__(self, problem, rng, step_size: int = 1000, mechanism=None, ctx=None) -> None:
        super().__init__(problem, rng, "SCHC", mechanism, ctx)
        if step_size <= 0:
            raise ValueError("step_size must be positive")
        self.step_size = step_size
        self.cost_bound = 0

    def __str__(self) -> str:
        return f"SCHC (stepSize={self.step_size})"

    def run(self, initial: Solution, time_limit: Optional[float] = None, max_iters: int = 10**8) -> Solution:
        deadline = self._deadline(time_limit)
        self.best_solution = initial
        solution = initial.clone()

        self.cost_bound = initial.cost
        no_improve = 0
        steps = 0

        while self._time_left(deadline):
            while self._time_left(deadline) and no_improve < max_iters:
                no_improve += 1
                steps += 1

                move = self.select_move(solution)
                delta = move.do_move(solution)

                if delta < 0:
                    self.accept_move(move)
                    no_improve = 0
                    if solution.cost < self.best_solution.cost:
                        self._new_best(solution)
                elif delta == 0 or solution.cost <= self.cost_bound:
                    self.accept_move(move)
                else:
                    self.reject_move(move)

                if steps >= self.step_size:
                    self.cost_bound = solution.cost
                    steps = 0

                self._check(solution)
                self._n_iters += 1

            if deadline is None or not self._time_left(deadline):
                break
            no_improve = 0
            steps = 0
            self.cost_bound = initial.cost
            self.ctx.text("Restarting SCHC cost bound")

        return self.best_solution


__all__ = ["SCHC"]
