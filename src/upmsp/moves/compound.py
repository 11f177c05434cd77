"""Chain of moves applied and rejected atomically."""

from __future__ import annotations

import random
from typing import Iterable, List

from ..instance import Problem
from ..solution import Solution
from .base import Move


class CompoundMove(Move):
    """Apply several sub-moves as one; the cost is updated once at the end.

    Sub-moves run in chain mode, so the solution cost is not refreshed between
    them and partial application is never observable from outside.  A sub-move
    that is not applicable at its turn in the chain is skipped.
    """

    def __init__(
        self,
        problem: Problem,
        rng: random.Random,
        name: str,
        moves: Iterable[Move] = (),
        priority: int = 1,
    ) -> None:
        super().__init__(problem, rng, name, priority)
        self.moves: List[Move] = []
        self._applied: List[Move] = []
        for move in moves:
            self.add_move(move)

    def add_move(self, move: Move) -> "CompoundMove":
        move.in_chain = True
        self.moves.append(move)
        return self

    def has_move(self, solution: Solution) -> bool:
        return bool(self.moves) and all(move.has_move(solution) for move in self.moves)

    def _apply(self, solution: Solution) -> None:
        self._applied = []
        for move in self.moves:
            if move.has_move(solution):
                move.do_move(solution)
                self._applied.append(move)

    def _undo(self, solution: Solution) -> None:
        for move in reversed(self._applied):
            move.reject()
        self._applied = []

    def accept(self) -> None:
        super().accept()
        for move in self._applied:
            move.delta = self.delta
            move.accept()
        self._applied = []

    def reset(self) -> None:
        for move in self.moves:
            move.reset()


__all__ = ["CompoundMove"]
