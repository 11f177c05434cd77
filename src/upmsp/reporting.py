"""Reporting helpers: progress table rows, move statistics and RPD columns."""

from __future__ import annotations

from typing import Iterable, Mapping, Optional

import pandas as pd

TABLE_TOP = "    /--------------------------------------------------------\\"
TABLE_HEADER = "    | {:>8} | {:>8} | {:>8} | {:>8} | {:>10} | ".format("Iter", "RPD(%)", "S*", "S'", "Time")
TABLE_RULE = "    |----------|----------|----------|----------|------------|"
TABLE_BOTTOM = "    \\--------------------------------------------------------/"

MOVE_COLUMNS = ["move", "iterations", "improvements", "sideways", "worsens", "accepts", "rejects"]


def human_count(value: int) -> str:
    """Render a counter as 12K / 34M / 5G once it gets long."""

    if value >= 1e11:
        return f"{value / 1e9:.0f}G"
    if value >= 1e7:
        return f"{value / 1e6:.0f}M"
    if value >= 1e4:
        return f"{value / 1e3:.0f}K"
    return str(int(value))


def format_status(
    n_iters: int,
    rpd: Optional[float],
    best: int,
    current: int,
    elapsed: float,
    tag: str = "",
) -> str:
    rpd_str = "-" if rpd is None else f"{rpd:8.2f}"
    return (
        f"    | {human_count(n_iters):>8} | {rpd_str:>8} | {best:>8d} | {current:>8d} "
        f"| {elapsed:>10.2f} | {tag}"
    )


def format_text(text: str, elapsed: float, tag: str = "") -> str:
    return f"    | {text:<40} | {elapsed:>10.2f} | {tag}"


def move_statistics(moves: Iterable) -> pd.DataFrame:
    """Return one row of counters per move (neighborhood)."""

    rows = [
        {
            "move": move.name,
            "iterations": move.stats.iterations,
            "improvements": move.stats.improvements,
            "sideways": move.stats.sideways,
            "worsens": move.stats.worsens,
            "accepts": move.stats.accepts,
            "rejects": move.stats.rejects,
        }
        for move in moves
    ]
    return pd.DataFrame(rows, columns=MOVE_COLUMNS)


def format_move_table(stats: pd.DataFrame) -> str:
    lines = [
        "    /----------------------------------------------------------------\\",
        "    | {:<18} | {:>8} | {:>8} | {:>8} | {:>8} |".format(
            "Move", "Improvs.", "Sideways", "Accepts", "Rejects"
        ),
        "    |--------------------|----------|----------|----------|----------|",
    ]
    for row in stats.itertuples(index=False):
        lines.append(
            "    | {:<18} | {:>8} | {:>8} | {:>8} | {:>8} |".format(
                row.move,
                human_count(row.improvements),
                human_count(row.sideways),
                human_count(row.accepts),
                human_count(row.rejects),
            )
        )
    lines.append("    \\----------------------------------------------------------------/")
    return "\n".join(lines)


def add_rpd_column(df: pd.DataFrame, best_known: Mapping[str, int] | None = None) -> pd.DataFrame:
    """Return a copy of *df* with a normalised ``rpd`` column.

    Parameters
    ----------
    df:
        DataFrame with at least ``instance`` and ``makespan`` columns.
    best_known:
        Optional mapping from instance name to best known makespan.  When
        provided, the ``best_known`` column will be filled/overwritten with the
        mapped values before computing the RPD.
    """

    if "instance" not in df.columns:
        raise ValueError("Input DataFrame must contain an 'instance' column")
    if "makespan" not in df.columns:
        raise ValueError("Input DataFrame must contain a 'makespan' column")

    result = df.copy()
    if best_known is not None:
        result["best_known"] = result["instance"].map(best_known)
    if "best_known" not in result.columns:
        result["best_known"] = pd.NA
    known = pd.to_numeric(result["best_known"], errors="coerce")
    mask = known.notna() & (known > 0)
    result["rpd"] = float("nan")
    result.loc[mask, "rpd"] = (result.loc[mask, "makespan"] - known[mask]) / known[mask] * 100.0
    return result


def summarise_by_instance(df: pd.DataFrame) -> pd.DataFrame:
    """Compute summary statistics grouped by algorithm and instance."""

    required = {"algorithm", "instance", "makespan", "elapsed"}
    missing = required.difference(df.columns)
    if missing:
        raise ValueError(f"DataFrame missing required columns: {', '.join(sorted(missing))}")
    agg_dict: dict[str, object] = {
        "makespan": ["mean", "min", "std"],
        "elapsed": "mean",
    }
    if "iterations" in df.columns:
        agg_dict["iterations"] = "mean"
    if "rpd" in df.columns:
        df = df.assign(rpd=pd.to_numeric(df["rpd"], errors="coerce"))
        agg_dict["rpd"] = "mean"
    grouped = df.groupby(["algorithm", "instance"], as_index=False).agg(agg_dict)
    # Flatten MultiIndex columns produced by aggregation
    grouped.columns = [
        "_".join(filter(None, map(str, col))).rstrip("_") for col in grouped.columns.values
    ]
    return grouped
