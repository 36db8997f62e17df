"""
Backtracking Search

Depth-first search over a DomainGrid, guided by minimum remaining values and
bounded by an anytime iteration budget.

Each entry (a "recursive call" of the classic formulation):
  1. Spends one unit of budget; past the limit, the current grid is returned
     as a best-effort result
  2. Collects undetermined cells (cardinality > 1); none left → success
  3. Orders them by ascending cardinality (stable, so ties stay row-major)
  4. For each cell, for each surviving symbol ascending: collapse, propagate
     from that cell, and descend on success; the first successful descent wins
  5. If every branch fails → failure, and the parent tries its next branch

Branches share one grid: each branch records an undo mark before it
collapses, and rolls back to it when it fails. The recursion is kept on an
explicit stack of frames so board size never hits the interpreter limit.
"""

import os
import sys
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..core.registry import param_registry
from ..kernel.domain import DomainGrid, cardinality, domain_symbols
from .propagate import propagate
from .rules import RuleSet


@dataclass
class SearchBudget:
    """
    Iteration budget passed explicitly through the search.

    spend() counts one entry and returns True once the count exceeds limit.
    """
    limit: int = field(default_factory=lambda: param_registry()["max_iterations"])
    spent: int = 0

    def spend(self) -> bool:
        self.spent += 1
        return self.spent > self.limit

    @property
    def exhausted(self) -> bool:
        return self.spent > self.limit


@dataclass
class _Frame:
    branches: List[Tuple[int, int, int]]  # (r, c, symbol) in MRV order
    next_branch: int = 0
    active_mark: Optional[int] = None  # undo mark of the branch being explored


def mrv_branches(grid: DomainGrid) -> List[Tuple[int, int, int]]:
    """
    Branch list for one entry: undetermined cells by ascending cardinality
    (row-major among ties), each expanded into its symbols ascending.
    """
    unsolved = [
        (r, c, mask) for r, c, mask in grid.cells() if cardinality(mask) > 1
    ]
    unsolved.sort(key=lambda cell: cardinality(cell[2]))

    return [
        (r, c, symbol)
        for r, c, mask in unsolved
        for symbol in domain_symbols(mask)
    ]


def solve(rules: RuleSet, grid: DomainGrid, budget: SearchBudget) -> Optional[DomainGrid]:
    """
    Search for an assignment consistent with the propagation rules.

    Args:
        rules: Induced rule set
        grid: Propagated domains (modified in place)
        budget: Shared iteration budget; budget.spent counts entries

    Returns:
        The grid on success or on budget exhaustion (best effort, possibly
        partially collapsed); None if every branch failed.
    """
    trace = bool(os.environ.get("ARCWAVE_DEBUG_SEARCH"))
    stack: List[_Frame] = []
    entering = True

    while True:
        if entering:
            entering = False

            if budget.spend():
                if trace:
                    print(f"[search] budget exhausted at depth {len(stack)}", file=sys.stderr)
                return grid

            branches = mrv_branches(grid)
            if not branches:
                return grid

            if trace:
                print(
                    f"[search] iteration {budget.spent}, depth {len(stack)}, "
                    f"{len(branches)} branches",
                    file=sys.stderr
                )
            stack.append(_Frame(branches=branches))

        frame = stack[-1]

        # A child failed: roll back the branch it was exploring
        if frame.active_mark is not None:
            grid.undo(frame.active_mark)
            frame.active_mark = None

        while frame.next_branch < len(frame.branches):
            r, c, symbol = frame.branches[frame.next_branch]
            frame.next_branch += 1

            mark = grid.mark()
            grid.collapse(r, c, symbol)
            if propagate(rules, grid, [(r, c)]):
                frame.active_mark = mark
                entering = True
                break
            grid.undo(mark)

        if entering:
            continue

        # Every branch of this frame failed
        stack.pop()
        if not stack:
            return None
