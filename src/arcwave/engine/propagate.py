"""
Constraint Propagation

Seed per-cell domains from the input layer, then narrow them with a FIFO
worklist until the queue drains or a domain empties.

Worklist policy (frozen in param_registry):
  - The popped cell re-constrains its four DIAGONAL neighbors, in the order
    (-1,-1), (-1,+1), (+1,-1), (+1,+1)
  - Only interior cells (off the outer ring) are propagation targets; the
    outer ring is constrained by seeding alone
  - A target that newly collapses is enqueued; a target that empties aborts
    the worklist (failure is reported to the caller)
  - The initial pass runs one worklist per cell and keeps going past a failure

A target is constrained by the support check against its orthogonal
neighbors: symbol s survives iff, for every in-bounds lateral neighbor in
direction d, the neighbor domain holds some t with Rule(d, s, t).
"""

from collections import deque
from enum import Enum
from typing import Iterable, Tuple

from ..core.registry import param_registry
from ..kernel.domain import DomainGrid, domain_symbols, is_collapsed
from .rules import DIRECTION_OFFSETS, LATERAL_DIRECTIONS, Direction, RuleSet


class ConstraintResult(Enum):
    CONTRADICTION = "contradiction"
    COLLAPSED = "collapsed"
    UNCHANGED = "unchanged"  # nothing removed, or still ambiguous


DIAGONAL_OFFSETS: Tuple[Tuple[int, int], ...] = tuple(
    (dr, dc) for dr, dc in param_registry()["propagation_feed"]
)


def _classify(old: int, new: int) -> ConstraintResult:
    if new == old:
        return ConstraintResult.UNCHANGED
    if new == 0:
        return ConstraintResult.CONTRADICTION
    if is_collapsed(new):
        return ConstraintResult.COLLAPSED
    return ConstraintResult.UNCHANGED


def constrain(
    rules: RuleSet,
    direction: Direction,
    source: int,
    target: int
) -> Tuple[int, ConstraintResult]:
    """
    Remove from target every symbol without support in source.

    Symbol s in target is supported iff some t in source satisfies
    Rule(direction, s, t).

    Args:
        rules: Induced rule set
        direction: Direction from the target cell to the source cell
        source: Neighbor domain mask
        target: Domain mask to narrow

    Returns:
        (narrowed_target, result) where result is CONTRADICTION / COLLAPSED
        only if this call removed at least one symbol.
    """
    narrowed = target
    for s in domain_symbols(target):
        if rules.support_mask(direction, s) & source == 0:
            narrowed &= ~(1 << s)

    return narrowed, _classify(target, narrowed)


def constrain_cell(rules: RuleSet, grid: DomainGrid, r: int, c: int) -> ConstraintResult:
    """
    Support-check cell (r, c) against its in-bounds orthogonal neighbors.

    Writes the narrowed domain back to the grid.
    """
    old = grid.get(r, c)
    mask = old

    for direction in LATERAL_DIRECTIONS:
        dr, dc = DIRECTION_OFFSETS[direction]
        nr, nc = r + dr, c + dc
        if not grid.in_bounds(nr, nc):
            continue
        mask, _ = constrain(rules, direction, grid.get(nr, nc), mask)
        if mask == 0:
            break

    if mask != old:
        grid.set(r, c, mask)

    return _classify(old, mask)


def seed_domains(rules: RuleSet, X: list) -> Tuple[DomainGrid, int]:
    """
    Initialize a DomainGrid from the input layer.

    Each cell starts full and is intersected with {s : Rule(ABOVE, s, X[r][c])}.
    If that set is empty the cell keeps the full domain (fallback).

    Args:
        rules: Induced rule set
        X: Test input grid

    Returns:
        (grid, fallback_cells): seeded grid with a clean trail, and the number
        of cells that fell back to the full domain.
    """
    H = len(X)
    W = len(X[0]) if X else 0
    grid = DomainGrid(H, W)

    fallback_cells = 0
    for r in range(H):
        for c in range(W):
            admitted = rules.above_mask(X[r][c])
            if admitted:
                grid.set(r, c, grid.get(r, c) & admitted)
            else:
                fallback_cells += 1

    grid.commit()
    return grid, fallback_cells


def propagate(rules: RuleSet, grid: DomainGrid, seeds: Iterable[Tuple[int, int]]) -> bool:
    """
    Run the diagonal-fed worklist from the given seed cells.

    Args:
        rules: Induced rule set
        grid: Domains (modified in place; every write is on the undo trail)
        seeds: Cells whose domains just changed, in queue order

    Returns:
        True at queue-empty, False at the first contradiction.
    """
    queue = deque(seeds)

    while queue:
        r, c = queue.popleft()

        for dr, dc in DIAGONAL_OFFSETS:
            rr, cc = r + dr, c + dc
            if not grid.is_interior(rr, cc):
                continue

            result = constrain_cell(rules, grid, rr, cc)
            if result is ConstraintResult.COLLAPSED:
                queue.append((rr, cc))
            elif result is ConstraintResult.CONTRADICTION:
                return False

    return True


def propagate_all(rules: RuleSet, grid: DomainGrid) -> bool:
    """
    Initial pass: run a separate worklist from every cell in row-major order.

    A worklist that hits a contradiction leaves its emptied cell in place and
    the pass moves on to the next cell. Empty cells are later ignored by the
    search (never branched on, never narrowed further).

    Returns:
        True iff no worklist reached a contradiction.
    """
    ok = True
    for r, c, _ in list(grid.cells()):
        if not propagate(rules, grid, [(r, c)]):
            ok = False
    return ok


def arc_violations(rules: RuleSet, grid: DomainGrid) -> int:
    """
    Count (interior cell, symbol, direction) triples lacking support.

    Zero means every surviving symbol of every interior cell is supported by
    each orthogonal neighbor. Contradicted neighbors are counted as well.
    """
    violations = 0
    for r, c, mask in grid.cells():
        if not grid.is_interior(r, c):
            continue
        for s in domain_symbols(mask):
            for direction in LATERAL_DIRECTIONS:
                dr, dc = DIRECTION_OFFSETS[direction]
                if rules.support_mask(direction, s) & grid.get(r + dr, c + dc) == 0:
                    violations += 1
    return violations
