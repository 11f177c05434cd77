"""Learning automata move selection (linear reward-penalty scheme)."""

from __future__ import annotations

import random
from typing import Sequence

import numpy as np

from .base import Mechanism


class LearningAutomata(Mechanism):
    """Keep one selection probability per move and reinforce the last one used.

    Parameters
    ----------
    priorities:
        Static move priorities; the initial probabilities are proportional
        to them.
    learning_rate:
        Step applied when the last action is rewarded.
    epsilon:
        Penalty step as a fraction of ``learning_rate``.
    rng:
        :class:`random.Random` instance used to draw actions.
    """

    def __init__(
        self,
        priorities: Sequence[int] = (),
        *,
        learning_rate: float = 1e-4,
        epsilon: float = 1.0,
        rng: random.Random | None = None,
    ) -> None:
        if not 0.0 < learning_rate <= 1.0:
            raise ValueError("learning_rate must be within (0, 1]")
        if not 0.0 <= epsilon <= 1.0 / learning_rate:
            raise ValueError("epsilon * learning_rate must be within [0, 1]")
        self.learning_rate = learning_rate
        self.penalty_rate = learning_rate * epsilon
        self._rng = rng or random.Random()
        self.probabilities = np.zeros(0, dtype=float)
        super().__init__(priorities)

    def reset(self, priorities: Sequence[int]) -> None:
        super().reset(priorities)
        weights = np.asarray(self._priorities, dtype=float)
        if weights.size == 0:
            self.probabilities = weights
            return
        if (weights <= 0).any():
            raise ValueError("Move priorities must be positive")
        self.probabilities = weights / weights.sum()

    def next_action(self) -> int:
        if not self.n_actions:
            raise ValueError("No moves registered")
        w = self._rng.random()
        cumulative = np.cumsum(self.probabilities)
        idx = int(np.searchsorted(cumulative, w, side="right"))
        # rounding can leave the cumulative sum just below one
        self.last_action = min(idx, self.n_actions - 1)
        return self.last_action

    def update(self, reward: float) -> None:
        if self.last_action < 0:
            raise ValueError("update() called before next_action()")
        n = self.n_actions
        if n == 1:
            return
        p = self.probabilities
        used = self.last_action
        a, b = self.learning_rate, self.penalty_rate
        others = p - a * reward * p + b * (1.0 - reward) * (1.0 / (n - 1) - p)
        others[used] = p[used] + a * reward * (1.0 - p[used]) - b * (1.0 - reward) * p[used]
        self.probabilities = others

    def __str__(self) -> str:
        return "\t".join(f"{p:.8f}" for p in self.probabilities)


__all__ = ["LearningAutomata"]
