"""Move selection mechanisms for the local search heuristics."""

from __future__ import annotations

from .automata import LearningAutomata
from .base import Mechanism
from .factory import build_mechanism
from .uniform import UniformMechanism

__all__ = ["Mechanism", "UniformMechanism", "LearningAutomata", "build_mechanism"]
