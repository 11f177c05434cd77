"""Common abstractions for move selection mechanisms.

The heuristics never sample moves themselves: they ask a :class:`Mechanism`
for the index of the next move and report back a reward once the outcome of
that move is known.  Uniform sampling and the learning automata share this
interface, so a heuristic is oblivious to which policy drives it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Sequence


class Mechanism(ABC):
    """Base class for move selection strategies.

    Parameters
    ----------
    priorities:
        Static priority of each registered move, in the order the heuristic
        keeps them.  Concrete mechanisms may use them to seed probabilities.
    """

    def __init__(self, priorities: Sequence[int] = ()):
        self._priorities: List[int] = []
        self.last_action = -1
        self.reset(priorities)

    @property
    def n_actions(self) -> int:
        return len(self._priorities)

    def reset(self, priorities: Sequence[int]) -> None:
        """Forget everything learned and start over with ``priorities``."""

        self._priorities = [int(p) for p in priorities]
        self.last_action = -1

    @abstractmethod
    def next_action(self) -> int:
        """Return the index of the next move to try."""

    @abstractmethod
    def update(self, reward: float) -> None:
        """Reinforce (``reward`` = 1) or penalise (``reward`` = 0) the last action."""


__all__ = ["Mechanism"]
