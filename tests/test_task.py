"""
Task loader and color canonicalization tests.
"""

import json
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from arcwave.task import Pair, TaskError, parse_grid, parse_task, load_task
from arcwave.kernel import color_ordering, recolor_grid, recolor_pair


TASK = {
    "train": [
        {"input": [[1, 2], [2, 1]], "output": [[2, 1], [1, 2]]},
    ],
    "test": [
        {"input": [[3, 4], [4, 3]]},
    ],
}


# ═══════════════════════════════════════════════════════════════════════
# Task loader
# ═══════════════════════════════════════════════════════════════════════

def test_parse_task():
    train, test = parse_task(TASK)

    assert train == [Pair(input=[[1, 2], [2, 1]], output=[[2, 1], [1, 2]])]
    assert test[0].input == [[3, 4], [4, 3]]
    # Missing test output is pre-filled with the unset sentinel
    assert test[0].output == [[None, None], [None, None]]
    assert test[0].shape == (2, 2)


def test_parse_task_keeps_given_test_output():
    task = dict(TASK, test=[{"input": [[3]], "output": [[4]]}])
    _, test = parse_task(task)
    assert test[0].output == [[4]]


def test_parse_grid_copies_rows():
    raw = [[1, 2]]
    grid = parse_grid(raw)
    grid[0][0] = 9
    assert raw == [[1, 2]]


@pytest.mark.parametrize("raw", [
    [],
    [[]],
    [[1, 2], [3]],
    [[10]],
    [[-1]],
    [[True]],
    [["1"]],
    "not a grid",
])
def test_parse_grid_rejects(raw):
    with pytest.raises(TaskError):
        parse_grid(raw)


def test_parse_task_structural_errors():
    with pytest.raises(TaskError):
        parse_task([])
    with pytest.raises(TaskError):
        parse_task({"train": [], "test": TASK["test"]})
    with pytest.raises(TaskError):
        parse_task({"train": TASK["train"], "test": []})
    with pytest.raises(TaskError):
        parse_task({"train": [{"input": [[1]]}], "test": TASK["test"]})
    with pytest.raises(TaskError):
        parse_task({"train": [{"input": [[1, 2]], "output": [[1], [2]]}], "test": TASK["test"]})


def test_task_error_is_value_error():
    assert issubclass(TaskError, ValueError)


def test_load_task(tmp_path):
    path = tmp_path / "task.json"
    path.write_text(json.dumps(TASK))

    train, test = load_task(path)
    assert len(train) == 1
    assert len(test) == 1


# ═══════════════════════════════════════════════════════════════════════
# Color canonicalization
# ═══════════════════════════════════════════════════════════════════════

def test_color_ordering_ascending_count_stable():
    assert color_ordering([[1, 2], [2, 1]]) == [0, 3, 4, 5, 6, 7, 8, 9, 1, 2]
    assert color_ordering([[5, 5, 5], [5, 7, 7]]) == [0, 1, 2, 3, 4, 6, 8, 9, 7, 5]


def test_color_ordering_ignores_unset():
    assert color_ordering([[None, 0]]) == [1, 2, 3, 4, 5, 6, 7, 8, 9, 0]


def test_recolor_grid_by_rank():
    own = color_ordering([[3, 4], [4, 3]])
    target = color_ordering([[1, 2], [2, 1]])

    assert recolor_grid([[3, 4], [4, 3]], own, target) == [[1, 2], [2, 1]]
    assert recolor_grid([[None, 3]], own, target) == [[None, 1]]


def test_recolor_pair_uses_input_ranking():
    pair = Pair(input=[[5, 5, 6]], output=[[6, 5, 0]])
    ordering = color_ordering([[1, 2, 2]])

    recolored = recolor_pair(pair, ordering)
    assert isinstance(recolored, Pair)
    assert recolored.input == [[2, 2, 1]]
    assert recolored.output == [[1, 2, 0]]


def test_recolor_pair_into_own_ordering_is_identity():
    pair = Pair(input=[[1, 1, 4]], output=[[4, 1, 7]])
    assert recolor_pair(pair, color_ordering(pair.input)) == pair


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
