"""Shared fixtures; also puts ``src`` (src layout) on sys.path."""

from __future__ import annotations

import random
import sys
from pathlib import Path

import numpy as np
import pytest

_src = Path(__file__).resolve().parents[1] / "src"
if str(_src) not in sys.path:
    sys.path.insert(0, str(_src))

from upmsp.constructive import naive_solution  # noqa: E402
from upmsp.instance import Problem, generate_instance  # noqa: E402


@pytest.fixture
def tiny_problem() -> Problem:
    """2 machines, 3 jobs, zero setups; optimum makespan is 3."""
    return Problem(
        name="tiny",
        process_times=[[1, 2, 3], [3, 2, 1]],
        setup_times=np.zeros((2, 3, 3), dtype=int),
    )


@pytest.fixture
def small_problem() -> Problem:
    return generate_instance(12, 4, random.Random(7), name="small")


@pytest.fixture
def naive_start(small_problem):
    return naive_solution(small_problem)
