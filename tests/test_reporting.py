import random

import pandas as pd
import pytest

from upmsp.moves import build_moves
from upmsp.reporting import (
    MOVE_COLUMNS,
    add_rpd_column,
    format_move_table,
    format_status,
    format_text,
    human_count,
    move_statistics,
    summarise_by_instance,
)


@pytest.mark.parametrize(
    "value, text",
    [(0, "0"), (9999, "9999"), (12_345, "12K"), (45_000_000, "45M"), (3 * 10**11, "300G")],
)
def test_human_count(value, text) -> None:
    assert human_count(value) == text


def test_status_and_text_rows() -> None:
    row = format_status(100, None, 50, 60, 1.5, "*")
    assert row.split("|")[2].strip() == "-"
    assert row.rstrip().endswith("*")
    assert "1.50" in format_text("Re-heating Simulated Annealing", 1.5)


def test_move_statistics_table(small_problem, naive_start) -> None:
    moves = build_moves(small_problem, random.Random(0))
    moves[0].do_move(naive_start)
    moves[0].reject()
    moves[1].do_move(naive_start)
    moves[1].accept()
    df = move_statistics(moves)
    assert list(df.columns) == MOVE_COLUMNS
    assert df.loc[0, "rejects"] == 1
    assert df.loc[1, "accepts"] == 1
    table = format_move_table(df)
    assert "Shift(mk)" in table and "TwoShiftSmart" in table


def test_add_rpd_column() -> None:
    df = pd.DataFrame({"instance": ["a", "b", "c"], "makespan": [110, 90, 5]})
    out = add_rpd_column(df, {"a": 100, "b": 90})
    assert out.loc[0, "rpd"] == pytest.approx(10.0)
    assert out.loc[1, "rpd"] == pytest.approx(0.0)
    assert pd.isna(out.loc[2, "rpd"])
    assert "rpd" not in df.columns
    with pytest.raises(ValueError):
        add_rpd_column(pd.DataFrame({"makespan": [1]}))


def test_summarise_by_instance() -> None:
    df = pd.DataFrame(
        {
            "algorithm": ["sa", "sa", "lahc"],
            "instance": ["a", "a", "a"],
            "makespan": [10, 12, 11],
            "elapsed": [1.0, 3.0, 2.0],
            "rpd": [0.0, 20.0, 10.0],
        }
    )
    summary = summarise_by_instance(df)
    sa = summary[summary["algorithm"] == "sa"].iloc[0]
    assert sa["makespan_mean"] == 11
    assert sa["makespan_min"] == 10
    assert sa["rpd_mean"] == 10.0
    with pytest.raises(ValueError):
        summarise_by_instance(df.drop(columns=["elapsed"]))
