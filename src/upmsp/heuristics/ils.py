"""Iterated local search around an inner acceptance heuristic."""

from __future__ import annotations

from typing import Optional

from ..moves import Move
from ..solution import Solution
from .base import Heuristic
from .descent import Descent


class ILS(Heuristic):
    """Iterated local search.

    Parameters
    ----------
    inner:
        Heuristic run after every perturbation; a :class:`Descent` by default.
    rna_max:
        Non-improvement cap handed to ``inner``.
    iters_p:
        Non-improving perturbation rounds before the level is raised.
    p0:
        Initial perturbation level and level increment.
    p_max:
        Ceiling of the perturbation level as a multiple of ``p0``.

    Perturbation draws moves uniformly at random; move selection during the
    local search phase is left to the mechanism of ``inner``.
    """

    def __init__(
        self,
        problem,
        rng,
        inner: Optional[Heuristic] = None,
        rna_max: int = 9_000_000,
        iters_p: int = 700,
        p0: int = 80,
        p_max: int = 6,
        mechanism=None,
        ctx=None,
    ) -> None:
        super().__init__(problem, rng, "ILS", mechanism, ctx)
        if rna_max <= 0 or iters_p <= 0 or p0 <= 0 or p_max <= 0:
            raise ValueError("rna_max, iters_p, p0 and p_max must be positive")
        self.inner = inner or Descent(problem, rng, ctx=self.ctx)
        self.rna_max = rna_max
        self.iters_p = iters_p
        self.p0 = p0
        self.p_max = p_max * p0
        self.perturb_level = p0

    def __str__(self) -> str:
        return f"ILS (rnaMax={self.rna_max}, itersP={self.iters_p}, p0={self.p0}, pMax={self.p_max}) + {self.inner}"

    @property
    def n_iters(self) -> int:
        return self._n_iters + self.inner.n_iters

    def add_move(self, move: Move) -> None:
        super().add_move(move)
        self.inner.add_move(move)

    def perturb(self, solution: Solution, level: int) -> None:
        """Apply ``level`` random applicable moves, accepting all of them."""

        for _ in range(level):
            move = self.moves[self.rng.randrange(len(self.moves))]
            while not move.has_move(solution):
                move = self.moves[self.rng.randrange(len(self.moves))]
            move.do_move(solution)
            move.accept()

    def next_level(self, level: int) -> int:
        return level + self.p0 if level + self.p0 <= self.p_max else self.p0

    def run(self, initial: Solution, time_limit: Optional[float] = None, max_iters: int = 10**8) -> Solution:
        deadline = self._deadline(time_limit)
        self.best_solution = self.inner.run(initial, self._remaining(deadline), self.rna_max)
        solution = self.best_solution.clone()

        self.perturb_level = self.p0
        rounds_at_level = 0
        no_improve = 0

        while self._time_left(deadline):
            while self._time_left(deadline) and no_improve < max_iters:
                no_improve += 1
                self.perturb(solution, self.perturb_level)
                solution = self.inner.run(solution, self._remaining(deadline), self.rna_max)
                self._check(solution)

                self.ctx.status(self.n_iters, self.best_solution.cost, solution.cost, f"p-{self.perturb_level}")

                if solution.cost < self.best_solution.cost:
                    self.best_solution = solution.clone()
                    rounds_at_level = 0
                    no_improve = 0
                    self.perturb_level = self.p0
                else:
                    solution = self.best_solution.clone()
                    rounds_at_level += 1

                if rounds_at_level >= self.iters_p:
                    rounds_at_level = 0
                    self.perturb_level = self.next_level(self.perturb_level)

                self._n_iters += 1

            if deadline is None or not self._time_left(deadline):
                break
            no_improve = 0
            self.ctx.text("ILS reached maxIters")

        return self.best_solution


__all__ = ["ILS"]
