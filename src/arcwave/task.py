"""
Task model & loader

Parses an ARC task document into Pair objects:

    {"train": [{"input": grid, "output": grid}, ...],
     "test":  [{"input": grid, "output": grid?}, ...]}

Grids are lists of rows of symbols 0..9, indexed G[r][c]. Test outputs that
are absent from the document are pre-filled with the unset sentinel (None).
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple, Union

from .kernel.domain import NUM_SYMBOLS

Grid = List[List[int]]
PartialGrid = List[List[Optional[int]]]


class TaskError(ValueError):
    """Raised when a task document or grid is malformed."""
    pass


@dataclass(frozen=True)
class Pair:
    """An input grid and its (possibly unset) output grid of the same shape."""
    input: Grid
    output: PartialGrid

    @property
    def shape(self) -> Tuple[int, int]:
        return grid_shape(self.input)


def grid_shape(G: PartialGrid) -> Tuple[int, int]:
    """(H, W) of a rectangular grid."""
    return len(G), (len(G[0]) if G else 0)


def blank_grid(H: int, W: int) -> PartialGrid:
    """H×W grid of unset cells."""
    return [[None] * W for _ in range(H)]


def parse_grid(raw, where: str = "grid", allow_unset: bool = False) -> PartialGrid:
    """
    Validate and copy a grid.

    Raises:
        TaskError: If the grid is empty, ragged, or holds a non-symbol value.
    """
    if not isinstance(raw, list) or not raw:
        raise TaskError(f"{where}: expected a non-empty list of rows")

    rows = []
    width = None
    for r, row in enumerate(raw):
        if not isinstance(row, list) or not row:
            raise TaskError(f"{where}: row {r} must be a non-empty list")
        if width is None:
            width = len(row)
        elif len(row) != width:
            raise TaskError(f"{where}: row {r} has {len(row)} cols, expected {width}")
        for c, value in enumerate(row):
            if value is None and allow_unset:
                continue
            if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value < NUM_SYMBOLS:
                raise TaskError(
                    f"{where}: value {value!r} at ({r},{c}) is not a symbol 0..{NUM_SYMBOLS - 1}"
                )
        rows.append(list(row))

    return rows


def parse_pair(raw, where: str, require_output: bool = True) -> Pair:
    if not isinstance(raw, dict) or "input" not in raw:
        raise TaskError(f"{where}: expected an object with an 'input' grid")

    X = parse_grid(raw["input"], f"{where}.input")

    if raw.get("output") is None:
        if require_output:
            raise TaskError(f"{where}: missing 'output' grid")
        Y = blank_grid(*grid_shape(X))
    else:
        Y = parse_grid(raw["output"], f"{where}.output", allow_unset=not require_output)

    if grid_shape(X) != grid_shape(Y):
        raise TaskError(
            f"{where}: input shape {grid_shape(X)} != output shape {grid_shape(Y)}"
        )

    return Pair(input=X, output=Y)


def parse_task(task_json: dict) -> Tuple[List[Pair], List[Pair]]:
    """
    Parse a task document into (train, test) pairs.

    Raises:
        TaskError: On any structural problem, no training pairs, or no test inputs.
    """
    if not isinstance(task_json, dict):
        raise TaskError("task: expected a JSON object with 'train' and 'test'")

    raw_train = task_json.get("train", [])
    raw_test = task_json.get("test", [])

    if not isinstance(raw_train, list) or len(raw_train) == 0:
        raise TaskError("task: at least one training pair is required")
    if not isinstance(raw_test, list) or len(raw_test) == 0:
        raise TaskError("task: at least one test input is required")

    train = [parse_pair(p, f"train[{i}]") for i, p in enumerate(raw_train)]
    test = [parse_pair(p, f"test[{i}]", require_output=False) for i, p in enumerate(raw_test)]

    return train, test


def load_task(path: Union[str, Path]) -> Tuple[List[Pair], List[Pair]]:
    """Read a task JSON file and parse it."""
    with open(path, 'r') as f:
        return parse_task(json.load(f))
