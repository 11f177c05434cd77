"""Simulated annealing with periodic geometric cooling and re-heating."""

from __future__ import annotations

import math
from typing import Optional

from ..solution import Solution
from .base import Heuristic

# temperature below which the schedule restarts from t0
EPS = 1e-6


class SimulatedAnnealing(Heuristic):
    """Simulated annealing.

    Parameters
    ----------
    alpha:
        Cooling rate in (0, 1]; the temperature is multiplied by it every
        ``sa_max`` iterations.
    t0:
        Initial temperature, also used when re-heating.
    sa_max:
        Iterations spent at each temperature.
    """

    def __init__(self, problem, rng, alpha: float = 0.99, t0: float = 1.0, sa_max: int = 10**7,
                 mechanism=None, ctx=None) -> None:
        super().__init__(problem, rng, "SA", mechanism, ctx)
        if not 0.0 < alpha <= 1.0:
            raise ValueError("alpha must be within (0, 1]")
        if t0 <= 0:
            raise ValueError("t0 must be positive")
        if sa_max <= 0:
            raise ValueError("sa_max must be positive")
        self.alpha = alpha
        self.t0 = t0
        self.sa_max = sa_max
        self.temperature = t0

    def __str__(self) -> str:
        return f"SA (alpha={self.alpha}, saMax={self.sa_max}, t0={self.t0})"

    def run(self, initial: Solution, time_limit: Optional[float] = None, max_iters: int = 10**8) -> Solution:
        deadline = self._deadline(time_limit)
        self.best_solution = initial
        solution = initial.clone()

        self.temperature = self.t0
        no_improve = 0
        iters_in_temperature = 0

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
            elif self.rng.random() < math.exp(-delta / self.temperature):
                self.accept_move(move)
            else:
                self.reject_move(move)

            iters_in_temperature += 1
            if iters_in_temperature >= self.sa_max:
                iters_in_temperature = 0
                self.temperature *= self.alpha
                if self.temperature < EPS:
                    self.temperature = self.t0
                    self.ctx.text("Re-heating Simulated Annealing")

            self._check(solution)
            self._n_iters += 1

        return self.best_solution


__all__ = ["SimulatedAnnealing", "EPS"]
