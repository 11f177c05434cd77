"""Explicit run context shared by the heuristics of one search run.

Replaces process-wide state (start time, best-known value) with a value that
is passed to every component needing elapsed time or a reference cost.
"""

from __future__ import annotations

import sys
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, TextIO

from .reporting import format_status, format_text


@dataclass
class RunContext:
    """Reporting and checking settings for one run.

    Parameters
    ----------
    best_known:
        Reference makespan used only for the RPD column of progress rows.
    verbose:
        Print progress rows to ``stream`` when true.
    logger:
        Optional callback receiving one ``dict`` per search event (JSONL traces).
    validate:
        Run the full invariant check after every search step.  Slow; meant for
        debugging and tests.
    """

    best_known: Optional[int] = None
    verbose: bool = False
    stream: Optional[TextIO] = None
    logger: Optional[Callable[[Dict[str, Any]], None]] = None
    validate: bool = False
    start_time: float = field(default_factory=time.time)

    def restart_clock(self) -> None:
        self.start_time = time.time()

    def elapsed(self) -> float:
        return time.time() - self.start_time

    def rpd(self, cost: int) -> Optional[float]:
        if self.best_known is None or self.best_known <= 0:
            return None
        return 100.0 * (cost - self.best_known) / self.best_known

    def _print(self, line: str) -> None:
        print(line, file=self.stream or sys.stdout, flush=True)

    def status(self, n_iters: int, best: int, current: int, tag: str = "") -> None:
        if self.verbose:
            self._print(format_status(n_iters, self.rpd(current), best, current, self.elapsed(), tag))
        self.event("status", iters=int(n_iters), best=int(best), current=int(current), tag=tag)

    def text(self, message: str, tag: str = "") -> None:
        if self.verbose:
            self._print(format_text(message, self.elapsed(), tag))
        self.event("text", message=message)

    def event(self, name: str, **fields: Any) -> None:
        if self.logger:
            payload = {"event": name, "elapsed": round(self.elapsed(), 4), **fields}
            self.logger(payload)


__all__ = ["RunContext"]
