"""Registry of the neighborhood variants and helpers to build them by index."""

from __future__ import annotations

import random
from typing import Dict, List, Optional, Sequence, Tuple

from ..instance import Problem
from .base import MachineMove, Move
from .compound import CompoundMove
from .neighborhoods import Shift, SimpleSwap, Swap, Switch, TaskMove, TwoShift

NEIGHBORHOOD_KINDS: Dict[str, type] = {
    "shift": Shift,
    "simple-swap": SimpleSwap,
    "swap": Swap,
    "switch": Switch,
    "task-move": TaskMove,
    "two-shift": TwoShift,
}

# (smart, use_bottleneck) per variant slot
VARIANTS: Tuple[Tuple[bool, bool], ...] = (
    (False, True),
    (False, False),
    (True, True),
    (True, False),
)

N_NEIGHBORHOODS = len(NEIGHBORHOOD_KINDS) * len(VARIANTS)


def neighborhood_index(kind: int | str, variant: int) -> int:
    """Bit index of ``(kind, variant)`` in a neighborhood mask."""

    if isinstance(kind, str):
        if kind not in NEIGHBORHOOD_KINDS:
            raise KeyError(f"Unknown neighborhood '{kind}'. Available: {', '.join(NEIGHBORHOOD_KINDS)}")
        kind = list(NEIGHBORHOOD_KINDS).index(kind)
    if not 0 <= kind < len(NEIGHBORHOOD_KINDS):
        raise ValueError(f"Neighborhood id must be within [0, {len(NEIGHBORHOOD_KINDS) - 1}]")
    if not 0 <= variant < len(VARIANTS):
        raise ValueError(f"Neighborhood policy must be within [0, {len(VARIANTS) - 1}]")
    return kind * len(VARIANTS) + variant


def build_move(problem: Problem, rng: random.Random, index: int, priority: int = 1) -> MachineMove:
    kind, variant = divmod(index, len(VARIANTS))
    cls = list(NEIGHBORHOOD_KINDS.values())[kind]
    smart, use_bottleneck = VARIANTS[variant]
    return cls(problem, rng, smart=smart, use_bottleneck=use_bottleneck, priority=priority)


def build_moves(
    problem: Problem,
    rng: random.Random,
    mask: Optional[Sequence[bool]] = None,
    priority: int = 1,
) -> List[Move]:
    """Instantiate every enabled neighborhood variant (all of them by default)."""

    if mask is None:
        mask = [True] * N_NEIGHBORHOODS
    if len(mask) != N_NEIGHBORHOODS:
        raise ValueError(f"Neighborhood mask must have {N_NEIGHBORHOODS} entries, got {len(mask)}")
    return [build_move(problem, rng, idx, priority) for idx, enabled in enumerate(mask) if enabled]


def build_compound(
    problem: Problem,
    rng: random.Random,
    kind: str,
    length: int = 2,
    smart: bool = False,
    use_bottleneck: bool = True,
    priority: int = 1,
) -> CompoundMove:
    """Chain ``length`` copies of one neighborhood, e.g. ``2-TaskMove(mk)``."""

    if length < 1:
        raise ValueError("Compound length must be positive")
    cls = NEIGHBORHOOD_KINDS[kind]
    parts = [cls(problem, rng, smart=smart, use_bottleneck=use_bottleneck) for _ in range(length)]
    return CompoundMove(problem, rng, f"{length}-{parts[0].name}", parts, priority=priority)


__all__ = [
    "NEIGHBORHOOD_KINDS",
    "VARIANTS",
    "N_NEIGHBORHOODS",
    "neighborhood_index",
    "build_move",
    "build_moves",
    "build_compound",
]
