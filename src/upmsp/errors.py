"""Exception types raised by the UPMSP solver."""

from __future__ import annotations


class InstanceFormatError(ValueError):
    """Malformed instance or solution file (shape or token mismatch)."""


class InvariantViolation(RuntimeError):
    """A solution or machine disagrees with a from-scratch recomputation."""

    def __init__(self, problems):
        self.problems = list(problems)
        super().__init__("; ".join(self.problems) or "invalid solution")


class MoveProtocolError(RuntimeError):
    """A move was driven out of order (accept/reject/do_move misuse)."""


__all__ = ["InstanceFormatError", "InvariantViolation", "MoveProtocolError"]
