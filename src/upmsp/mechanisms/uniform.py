"""Uniform random move selection (the default)."""

from __future__ import annotations

import random
from typing import Sequence

from .base import Mechanism


class UniformMechanism(Mechanism):
    """Draw every move with the same probability, ignoring rewards."""

    def __init__(self, priorities: Sequence[int] = (), *, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()
        super().__init__(priorities)

    def next_action(self) -> int:
        if not self.n_actions:
            raise ValueError("No moves registered")
        self.last_action = self._rng.randrange(self.n_actions)
        return self.last_action

    def update(self, reward: float) -> None:
        return


__all__ = ["UniformMechanism"]
