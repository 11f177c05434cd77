"""Moves (neighborhoods) for the UPMSP local search.

Six neighborhood kinds are available, each in a plain and a "smart"
(best-position) variant and with or without the bottleneck-machine policy.
:class:`CompoundMove` chains moves into one atomic step.
"""

from __future__ import annotations

from .base import MachineMove, Move, MoveStats
from .compound import CompoundMove
from .factory import (
    N_NEIGHBORHOODS,
    NEIGHBORHOOD_KINDS,
    VARIANTS,
    build_compound,
    build_move,
    build_moves,
    neighborhood_index,
)
from .neighborhoods import Shift, SimpleSwap, Swap, Switch, TaskMove, TwoShift

__all__ = [
    "Move",
    "MachineMove",
    "MoveStats",
    "CompoundMove",
    "Shift",
    "SimpleSwap",
    "Swap",
    "Switch",
    "TaskMove",
    "TwoShift",
    "NEIGHBORHOOD_KINDS",
    "VARIANTS",
    "N_NEIGHBORHOODS",
    "neighborhood_index",
    "build_move",
    "build_moves",
    "build_compound",
]
