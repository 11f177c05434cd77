"""Solver configuration with the default parameter values of every heuristic."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .moves.factory import N_NEIGHBORHOODS, neighborhood_index

ALGORITHMS = ("ils", "lahc", "lahc-ils", "sa", "sa-ils", "schc", "schc-ils")


@dataclass
class SolverConfig:
    """All tunables of one solver run.

    ``max_iters`` is the cap on consecutive non-improving iterations;
    ``time_limit`` is in seconds (``None`` disables the deadline).
    ``p_max`` is a multiple of ``p0``.
    """

    algorithm: str = "sa"
    seed: int = 0
    time_limit: Optional[float] = 60.0
    max_iters: int = 10**8
    best_known: Optional[int] = None

    # ILS
    rna_max: int = 9_000_000
    iters_p: int = 700
    p0: int = 80
    p_max: int = 6

    # LAHC
    list_size: int = 1000

    # SA
    alpha: float = 0.99
    t0: float = 1.0
    sa_max: int = 10**7

    # SCHC
    step_size: int = 1000

    neighborhoods: List[bool] = field(default_factory=lambda: [True] * N_NEIGHBORHOODS)
    learning: bool = False
    learning_rate: float = 1e-4
    learning_epsilon: float = 1.0
    validate: bool = False
    initial: str = "random"

    def set_neighborhood(self, kind, variant: int, enabled: bool) -> None:
        self.neighborhoods[neighborhood_index(kind, variant)] = bool(enabled)

    def check(self) -> None:
        """Raise :class:`ValueError` on the first invalid parameter."""

        if self.algorithm not in ALGORITHMS:
            raise ValueError(f"Unknown algorithm '{self.algorithm}'. Available: {', '.join(ALGORITHMS)}")
        if self.time_limit is not None and self.time_limit < 0:
            raise ValueError("time_limit must be non-negative")
        if self.max_iters <= 0:
            raise ValueError("max_iters must be positive")
        for name in ("rna_max", "iters_p", "p0", "p_max", "list_size", "sa_max", "step_size"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")
        if not 0.0 < self.alpha <= 1.0:
            raise ValueError("alpha must be within (0, 1]")
        if self.t0 <= 0:
            raise ValueError("t0 must be positive")
        if len(self.neighborhoods) != N_NEIGHBORHOODS:
            raise ValueError(f"neighborhoods must have {N_NEIGHBORHOODS} entries")
        if not any(self.neighborhoods):
            raise ValueError("At least one neighborhood must be enabled")
        if not 0.0 < self.learning_rate <= 1.0:
            raise ValueError("learning_rate must be within (0, 1]")


__all__ = ["ALGORITHMS", "SolverConfig"]
