"""Local search heuristics: descent, SA, LAHC, SCHC and ILS."""

from __future__ import annotations

from .base import Heuristic
from .descent import Descent
from .ils import ILS
from .lahc import LAHC
from .sa import SimulatedAnnealing
from .schc import SCHC

__all__ = ["Heuristic", "Descent", "SimulatedAnnealing", "LAHC", "SCHC", "ILS"]
