import json
import random

import pytest

from upmsp.cli import main
from upmsp.config import ALGORITHMS, SolverConfig
from upmsp.context import RunContext
from upmsp.design import DESIGNS, describe_design, get_design
from upmsp.heuristics import ILS, LAHC
from upmsp.instance import generate_instance, write_instance
from upmsp.mechanisms import LearningAutomata, UniformMechanism
from upmsp.runner import build_solver, run_experiments, solve
from upmsp.solution import Solution, read_solution


def _quick(**kwargs) -> SolverConfig:
    params = dict(time_limit=None, max_iters=60, rna_max=20, iters_p=2, p0=1, p_max=2, list_size=5, step_size=5)
    params.update(kwargs)
    return SolverConfig(**params)


@pytest.mark.parametrize("algorithm", ALGORITHMS)
def test_solve_every_algorithm(small_problem, algorithm) -> None:
    result = solve(small_problem, _quick(algorithm=algorithm, validate=True))
    assert result.solution.validate() == []
    assert result.cost <= result.initial_cost
    assert result.iterations > 0
    assert len(result.moves) == 24
    assert result.moves["iterations"].sum() > 0


def test_same_seed_same_result(small_problem) -> None:
    a = solve(small_problem, _quick(algorithm="lahc", seed=3))
    b = solve(small_problem, _quick(algorithm="lahc", seed=3))
    assert a.solution.assignment() == b.solution.assignment()


def test_build_solver_wraps_inner_heuristic(small_problem) -> None:
    solver = build_solver(small_problem, _quick(algorithm="lahc-ils"), random.Random(0))
    assert isinstance(solver, ILS)
    assert isinstance(solver.inner, LAHC)
    assert len(solver.moves) == len(solver.inner.moves) == 24


def test_ils_wrapper_leaves_move_learning_to_the_inner_heuristic(small_problem) -> None:
    config = _quick(algorithm="lahc-ils", learning=True)
    solver = build_solver(small_problem, config, random.Random(0))
    assert isinstance(solver.mechanism, UniformMechanism)
    assert isinstance(solver.inner.mechanism, LearningAutomata)


def test_solve_turns_on_validation_of_a_given_context(small_problem) -> None:
    ctx = RunContext()
    solve(small_problem, _quick(algorithm="sa", validate=True), ctx)
    assert ctx.validate is True


def test_run_experiments_validates_every_iteration(small_problem, monkeypatch) -> None:
    calls = []
    original = Solution.validate

    def counting_validate(self):
        calls.append(1)
        return original(self)

    monkeypatch.setattr(Solution, "validate", counting_validate)
    run_experiments(
        {"small": small_problem}, ["sa"], [0], time_limit=None, max_iters=50, overrides={"validate": True}
    )
    # one check per iteration plus the final one
    assert len(calls) > 50


def test_disabled_neighborhoods_are_not_built(small_problem) -> None:
    config = _quick(algorithm="schc")
    for kind in ("shift", "simple-swap", "swap", "switch", "two-shift"):
        for variant in range(4):
            config.set_neighborhood(kind, variant, False)
    config.set_neighborhood("task-move", 0, False)
    result = solve(small_problem, config)
    assert result.moves["move"].tolist() == ["TaskMove", "TaskMoveSmart(mk)", "TaskMoveSmart"]


def test_learning_option(small_problem) -> None:
    result = solve(small_problem, _quick(algorithm="sa", learning=True, learning_rate=0.01))
    assert result.solution.validate() == []


@pytest.mark.parametrize(
    "kwargs",
    [
        {"algorithm": "tabu"},
        {"list_size": 0},
        {"alpha": 0.0},
        {"time_limit": -1.0},
        {"p0": 0},
        {"neighborhoods": [True] * 5},
        {"neighborhoods": [False] * 24},
    ],
)
def test_config_check(kwargs) -> None:
    with pytest.raises(ValueError):
        SolverConfig(**kwargs).check()


def test_config_defaults() -> None:
    config = SolverConfig()
    config.check()
    assert (config.algorithm, config.time_limit, config.max_iters) == ("sa", 60.0, 10**8)
    assert (config.rna_max, config.iters_p, config.p0, config.p_max) == (9_000_000, 700, 80, 6)
    assert (config.list_size, config.step_size) == (1000, 1000)
    assert (config.alpha, config.t0, config.sa_max) == (0.99, 1.0, 10**7)
    assert config.learning is False


def test_design_registry() -> None:
    assert set(DESIGNS) == set(ALGORITHMS)
    text = describe_design("sa-ils")
    assert "ILS + SA" in text and "Wrapped by: ils" in text and "alpha" in text
    with pytest.raises(KeyError):
        get_design("tabu")


def test_run_experiments_frame(small_problem, tmp_path) -> None:
    small_problem.best_known = 50
    df = run_experiments(
        {"small": small_problem},
        algorithms=["lahc", "ils"],
        seeds=[0, 1],
        time_limit=None,
        max_iters=30,
        overrides={"rna_max": 10, "iters_p": 1, "p0": 1, "p_max": 1},
        trace_dir=str(tmp_path / "traces"),
    )
    assert len(df) == 4
    assert set(df.columns) >= {"algorithm", "instance", "seed", "makespan", "rpd", "elapsed", "iterations"}
    assert df["rpd"].tolist() == pytest.approx(((df["makespan"] - 50) * 2.0).tolist())
    traces = sorted((tmp_path / "traces").iterdir())
    assert len(traces) == 4
    first = json.loads(traces[0].read_text().splitlines()[0])
    assert first["event"] == "start"


def test_run_context_rpd_and_output(capsys) -> None:
    ctx = RunContext(best_known=100, verbose=True)
    assert ctx.rpd(110) == pytest.approx(10.0)
    assert RunContext().rpd(110) is None
    ctx.status(12345, 105, 110, "*")
    ctx.text("Resetting LAHC list")
    out = capsys.readouterr().out
    assert "12K" in out and "10.00" in out and "*" in out
    assert "Resetting LAHC list" in out


@pytest.fixture
def instance_file(tmp_path):
    problem = generate_instance(10, 3, random.Random(0), name="cli")
    path = tmp_path / "cli.txt"
    write_instance(problem, str(path))
    return str(path), problem


def test_cli_search_then_validate(instance_file, tmp_path, capsys) -> None:
    path, problem = instance_file
    out = str(tmp_path / "out.txt")
    trace = tmp_path / "trace.jsonl"
    code = main([path, out, "--algorithm", "schc", "--time", "0.2", "--seed", "4",
                 "--max-iters", "50", "-n", "5,0,0", "--trace", str(trace), "--best-known", "100"])
    assert code == 0
    text = capsys.readouterr().out
    assert "Best makespan" in text and "Best RPD" in text
    assert "TwoShift(mk)" not in text and "TwoShiftSmart" in text
    solution = read_solution(problem, out)
    assert solution.validate() == []
    assert trace.read_text().strip()

    assert main([path, out, "--validate"]) == 0
    assert f"has cost {solution.cost}" in capsys.readouterr().out


def test_cli_validate_reports_invalid_solution(instance_file, tmp_path, capsys) -> None:
    path, _ = instance_file
    bad = tmp_path / "bad.txt"
    bad.write_text("3\n2 0 1\n0\n0\n\nTotal makespan: 1\n")
    assert main([path, str(bad), "--validate"]) == 1
    out = capsys.readouterr().out
    assert "not allocated" in out and "invalid" in out


def test_cli_errors(tmp_path, instance_file, capsys) -> None:
    assert main([str(tmp_path / "missing.txt"), str(tmp_path / "o.txt")]) == 2
    broken = tmp_path / "broken.txt"
    broken.write_text("x y\n")
    assert main([str(broken), str(tmp_path / "o.txt")]) == 2
    path, _ = instance_file
    with pytest.raises(SystemExit):
        main([path, str(tmp_path / "o.txt"), "-n", "1,2"])
    with pytest.raises(SystemExit):
        main([path, str(tmp_path / "o.txt"), "--list-size", "0"])
