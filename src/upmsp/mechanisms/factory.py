"""Factory helpers for constructing mechanisms from configuration values."""

from __future__ import annotations

import random
from typing import Sequence

from .automata import LearningAutomata
from .base import Mechanism
from .uniform import UniformMechanism


def build_mechanism(
    name: str,
    priorities: Sequence[int] = (),
    rng: random.Random | None = None,
    **kwargs,
) -> Mechanism:
    """Instantiate a selection mechanism by symbolic name."""

    normalised = name.lower()
    if normalised in {"uniform", "random"}:
        if kwargs:
            unexpected = ", ".join(sorted(kwargs))
            raise TypeError(f"Uniform mechanism does not accept parameters: {unexpected}")
        return UniformMechanism(priorities, rng=rng)
    if normalised in {"learning", "automata", "learning-automata"}:
        return LearningAutomata(priorities, rng=rng, **kwargs)
    raise ValueError(f"Unknown mechanism '{name}'")


__all__ = ["build_mechanism"]
