import random

import pytest

from upmsp.errors import MoveProtocolError
from upmsp.moves import (
    N_NEIGHBORHOODS,
    CompoundMove,
    Shift,
    Switch,
    TaskMove,
    TwoShift,
    build_compound,
    build_move,
    build_moves,
    neighborhood_index,
)
from upmsp.solution import Solution

ALL = list(range(N_NEIGHBORHOODS))


def test_registry_order_and_names(small_problem) -> None:
    moves = build_moves(small_problem, random.Random(0))
    assert len(moves) == 24
    assert [m.name for m in moves[:4]] == ["Shift(mk)", "Shift", "ShiftSmart(mk)", "ShiftSmart"]
    assert moves[neighborhood_index("two-shift", 3)].name == "TwoShiftSmart"
    assert moves[neighborhood_index(1, 0)].name == "SimpSwap(mk)"


def test_mask_selects_variants(small_problem) -> None:
    mask = [False] * N_NEIGHBORHOODS
    mask[neighborhood_index("task-move", 1)] = True
    moves = build_moves(small_problem, random.Random(0), mask)
    assert [m.name for m in moves] == ["TaskMove"]
    with pytest.raises(ValueError):
        build_moves(small_problem, random.Random(0), [True] * 3)


@pytest.mark.parametrize("kind, variant", [(6, 0), (0, 4), (-1, 0)])
def test_neighborhood_index_bounds(kind, variant) -> None:
    with pytest.raises(ValueError):
        neighborhood_index(kind, variant)


@pytest.mark.parametrize("index", ALL)
def test_do_then_reject_restores_everything(small_problem, naive_start, index) -> None:
    rng = random.Random(index)
    move = build_move(small_problem, rng, index)
    solution = naive_start
    before = solution.assignment()
    cost = solution.cost
    bottleneck = solution.bottleneck.id
    makespans = [m.makespan for m in solution.machines]
    for _ in range(30):
        assert move.has_move(solution)
        move.do_move(solution)
        move.reject()
        assert solution.assignment() == before
        assert solution.cost == cost
        assert solution.bottleneck.id == bottleneck
        assert [m.makespan for m in solution.machines] == makespans
    assert move.stats.rejects == 30
    assert move.stats.iterations == 30


@pytest.mark.parametrize("index", ALL)
def test_do_then_accept_changes_cost_by_delta(small_problem, naive_start, index) -> None:
    move = build_move(small_problem, random.Random(100 + index), index)
    solution = naive_start
    applied = 0
    for _ in range(40):
        if not move.has_move(solution):
            continue
        cost = solution.cost
        delta = move.do_move(solution)
        move.accept()
        applied += 1
        assert solution.cost == cost + delta
        assert solution.validate() == []
    assert applied > 0
    assert move.stats.accepts == applied


def test_intra_machine_moves_keep_job_sets(small_problem, naive_start) -> None:
    rng = random.Random(4)
    for cls in (Shift, Switch, TwoShift):
        move = cls(small_problem, rng)
        sets = [sorted(m.jobs) for m in naive_start.machines]
        for _ in range(20):
            move.do_move(naive_start)
            move.accept()
        assert [sorted(m.jobs) for m in naive_start.machines] == sets


def test_bottleneck_variant_touches_bottleneck(small_problem, naive_start) -> None:
    move = TaskMove(small_problem, random.Random(3), use_bottleneck=True)
    source = naive_start.bottleneck
    size = source.n_jobs
    move.do_move(naive_start)
    assert source.n_jobs == size - 1
    move.reject()
    assert source.n_jobs == size


def test_smart_task_move_picks_best_position(small_problem, naive_start) -> None:
    move = TaskMove(small_problem, random.Random(8), smart=True)
    for _ in range(10):
        move.do_move(naive_start)
        _, dst, job, _, target = move._state
        trial = dst.clone()
        trial.del_job(target)
        best = min(trial.delta_add(job, q) for q in range(trial.n_jobs + 1))
        assert dst.makespan - trial.makespan == best
        move.reject()


def test_has_move_on_degenerate_solutions(tiny_problem) -> None:
    solution = Solution(tiny_problem)
    solution.machines[0].add_job(0)
    solution.update_cost()
    rng = random.Random(0)
    assert not Shift(tiny_problem, rng).has_move(solution)
    assert not TwoShift(tiny_problem, rng).has_move(solution)
    assert TaskMove(tiny_problem, rng, use_bottleneck=True).has_move(solution)
    for index in range(N_NEIGHBORHOODS):
        move = build_move(tiny_problem, rng, index)
        if move.has_move(solution):
            move.do_move(solution)
            move.reject()


def test_protocol_misuse_raises(small_problem, naive_start) -> None:
    move = Shift(small_problem, random.Random(0))
    with pytest.raises(MoveProtocolError):
        move.accept()
    with pytest.raises(MoveProtocolError):
        move.reject()
    move.do_move(naive_start)
    with pytest.raises(MoveProtocolError):
        move.do_move(naive_start)
    move.accept()
    with pytest.raises(MoveProtocolError):
        move.accept()


def test_do_move_requires_has_move(tiny_problem) -> None:
    solution = Solution(tiny_problem)
    solution.machines[0].add_job(0)
    solution.update_cost()
    with pytest.raises(MoveProtocolError):
        Shift(tiny_problem, random.Random(0)).do_move(solution)


def test_compound_do_then_reject_is_atomic(small_problem, naive_start) -> None:
    rng = random.Random(21)
    compound = CompoundMove(
        small_problem,
        rng,
        "mixed",
        [TaskMove(small_problem, rng), Shift(small_problem, rng), TaskMove(small_problem, rng, smart=True)],
    )
    assert all(m.in_chain for m in compound.moves)
    before = naive_start.assignment()
    cost = naive_start.cost
    for _ in range(25):
        compound.do_move(naive_start)
        compound.reject()
        assert naive_start.assignment() == before
        assert naive_start.cost == cost
        assert naive_start.validate() == []


def test_compound_accept_reports_net_delta(small_problem, naive_start) -> None:
    compound = build_compound(small_problem, random.Random(5), "task-move", 2, use_bottleneck=False)
    assert compound.name == "2-TaskMove"
    for _ in range(25):
        cost = naive_start.cost
        delta = compound.do_move(naive_start)
        compound.accept()
        assert naive_start.cost == cost + delta
        assert naive_start.validate() == []
    assert compound.stats.accepts == 25
    assert all(m.stats.accepts == 25 for m in compound.moves)


def test_compound_protocol(small_problem, naive_start) -> None:
    compound = build_compound(small_problem, random.Random(5), "swap")
    with pytest.raises(MoveProtocolError):
        compound.reject()
    compound.do_move(naive_start)
    with pytest.raises(MoveProtocolError):
        compound.do_move(naive_start)
    compound.reject()
    with pytest.raises(ValueError):
        build_compound(small_problem, random.Random(5), "swap", 0)
