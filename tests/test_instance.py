import random

import numpy as np
import pandas as pd
import pytest

from upmsp.errors import InstanceFormatError
from upmsp.instance import (
    Problem,
    attach_best_known,
    generate_instance,
    load_best_known,
    read_instance,
    read_instances,
    write_instance,
)

VALID = """3 2
instance-x
0 4 1 6
0 5 1 2
0 7 1 3
SSD
M0
0 1 2
3 0 4
5 6 0
M1
0 2 2
2 0 2
2 2 0
"""


def _write(tmp_path, text, name="inst.txt"):
    path = tmp_path / name
    path.write_text(text)
    return str(path)


def test_read_instance_parses_tables(tmp_path) -> None:
    problem = read_instance(_write(tmp_path, VALID))
    assert problem.name == "inst"
    assert (problem.n_machines, problem.n_jobs) == (2, 3)
    assert problem.process_times.tolist() == [[4, 5, 7], [6, 2, 3]]
    assert problem.setup_times[0, 1, 2] == 4
    assert problem.setup_times[1, 2, 0] == 2


def test_tables_are_read_only(tmp_path) -> None:
    problem = read_instance(_write(tmp_path, VALID))
    with pytest.raises(ValueError):
        problem.process_times[0, 0] = 1


def test_write_then_read_keeps_tables(tmp_path) -> None:
    problem = generate_instance(6, 3, random.Random(1), name="gen")
    path = str(tmp_path / "gen.txt")
    write_instance(problem, path)
    again = read_instance(path)
    assert np.array_equal(problem.process_times, again.process_times)
    assert np.array_equal(problem.setup_times, again.setup_times)


def test_generated_instance_has_zero_diagonal() -> None:
    problem = generate_instance(8, 2, random.Random(3))
    for m in range(2):
        assert np.diag(problem.setup_times[m]).tolist() == [0] * 8
    assert problem.process_times.min() >= 1


@pytest.mark.parametrize(
    "text",
    [
        "3\n",  # header without machine count
        VALID.replace("0 5 1 2", "0 5 2 2"),  # machine id does not match column
        VALID.replace("0 5 1 2", "0 5 1"),  # missing token
        VALID.replace("3 0 4", "3 9 4"),  # non-zero diagonal
        VALID.replace("0 4 1 6", "0 -4 1 6"),  # negative time
        "\n".join(VALID.splitlines()[:-2]) + "\n",  # truncated
    ],
)
def test_malformed_instance_is_rejected(tmp_path, text) -> None:
    with pytest.raises(InstanceFormatError):
        read_instance(_write(tmp_path, text))


def test_problem_shape_mismatch() -> None:
    with pytest.raises(InstanceFormatError):
        Problem("bad", [[1, 2]], np.zeros((1, 3, 3), dtype=int))


def test_read_instances_from_directory(tmp_path) -> None:
    _write(tmp_path, VALID, "a.txt")
    _write(tmp_path, VALID, "b.txt")
    (tmp_path / "notes.md").write_text("ignored")
    instances = read_instances(str(tmp_path))
    assert sorted(instances) == ["a", "b"]


def test_best_known_csv(tmp_path) -> None:
    csv = tmp_path / "bk.csv"
    pd.DataFrame({"instance": ["a", "zzz"], "best_makespan": [10, 20]}).to_csv(csv, index=False)
    instances = {"a": read_instance(_write(tmp_path, VALID, "a.txt"))}
    best_known = load_best_known(str(csv))
    attach_best_known(instances, best_known)
    assert best_known == {"a": 10, "zzz": 20}
    assert instances["a"].best_known == 10


def test_best_known_csv_requires_columns(tmp_path) -> None:
    csv = tmp_path / "bk.csv"
    pd.DataFrame({"name": ["a"], "value": [1]}).to_csv(csv, index=False)
    with pytest.raises(ValueError):
        load_best_known(str(csv))
