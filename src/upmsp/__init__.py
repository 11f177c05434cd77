"""Local search for the unrelated parallel machine scheduling problem with
sequence-dependent setup times (UPMSP).

The package provides the instance model with O(1) move evaluation, a
family of neighborhoods with a strict do/accept/reject protocol, and the
Descent, SA, LAHC, SCHC and ILS heuristics driven by uniform or learning
automata move selection.
"""

from .config import ALGORITHMS, SolverConfig
from .context import RunContext
from .errors import InstanceFormatError, InvariantViolation, MoveProtocolError
from .instance import Problem, generate_instance, read_instance, write_instance
from .runner import SolveResult, build_solver, run_experiments, solve
from .solution import Machine, Solution, read_solution, write_solution

__all__ = [
    "ALGORITHMS",
    "SolverConfig",
    "RunContext",
    "InstanceFormatError",
    "InvariantViolation",
    "MoveProtocolError",
    "Problem",
    "read_instance",
    "write_instance",
    "generate_instance",
    "Machine",
    "Solution",
    "read_solution",
    "write_solution",
    "SolveResult",
    "build_solver",
    "solve",
    "run_experiments",
]

__version__ = "0.1.0"
