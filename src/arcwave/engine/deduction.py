"""
Deduction

Predict one test output from an induced rule set:

  1. Seed domains from the input layer (ABOVE rules; full-domain fallback)
  2. Initial propagation, one worklist per cell in row-major order; a
     contradiction empties that cell and the pass continues
  3. Backtracking search under an iteration budget (always run; empty cells
     are never branched on)
  4. Extraction of the output grid and diagnostic counts

Outcomes:
  - "solved":           search left no cell with more than one symbol
  - "budget_exhausted": best-effort grid returned when the budget ran out
  - "exhausted":        every branch failed; extraction runs on an all-empty
                        grid, so every cell counts as no_solution

A contradiction in the initial pass is reported as initial_propagation_ok =
False; the emptied cells come out as None and count as no_solution.
"""

import sys
from typing import List, Optional, Tuple, TypedDict

from ..core.bytesio import serialize_domains_be_row_major
from ..core.hashing import blake3_hash
from ..kernel.domain import EMPTY_DOMAIN, NUM_SYMBOLS, DomainGrid
from .extract import extract_solution
from .propagate import arc_violations, propagate_all, seed_domains
from .rules import RuleSet
from .search import SearchBudget, solve


class DeduceStats(TypedDict):
    outcome: str
    iterations: int
    max_iterations: int
    fallback_cells: int
    initial_propagation_ok: bool
    collapsed: int
    no_solution: int
    uncollapsed: int
    total_cells: int
    arc_violations: int
    domains_hash: str


def deduce(
    X: List[List[int]],
    rules: RuleSet,
    max_iterations: Optional[int] = None,
    debug: bool = False
) -> Tuple[List[List[Optional[int]]], DeduceStats]:
    """
    Predict the output grid for test input X.

    Args:
        X: Test input grid (symbols 0..9)
        rules: Rule set from induce_rules()
        max_iterations: Search budget (default: param_registry()["max_iterations"])
        debug: Print the diagnostic counts to stderr

    Returns:
        (Y, stats): Y holds symbols where resolved and None elsewhere.
    """
    grid, fallback_cells = seed_domains(rules, X)
    budget = SearchBudget() if max_iterations is None else SearchBudget(limit=max_iterations)

    initial_ok = propagate_all(rules, grid)
    grid.commit()

    solution = solve(rules, grid, budget)
    if solution is None:
        final = DomainGrid(grid.H, grid.W, fill=EMPTY_DOMAIN)
        outcome = "exhausted"
    else:
        final = solution
        outcome = "budget_exhausted" if budget.exhausted else "solved"

    Y, counts = extract_solution(final)

    stats = DeduceStats(
        outcome=outcome,
        iterations=budget.spent,
        max_iterations=budget.limit,
        fallback_cells=fallback_cells,
        initial_propagation_ok=initial_ok,
        collapsed=counts["collapsed"],
        no_solution=counts["no_solution"],
        uncollapsed=counts["uncollapsed"],
        total_cells=counts["total_cells"],
        arc_violations=arc_violations(rules, final),
        domains_hash=blake3_hash(
            serialize_domains_be_row_major(final.snapshot(), final.H, final.W, NUM_SYMBOLS)
        )
    )

    if debug:
        print(f"Outcome: {outcome} ({budget.spent} iterations)", file=sys.stderr)
        print(f"Uncollapsed tile count: {stats['uncollapsed']}", file=sys.stderr)
        print(f"No solution count: {stats['no_solution']}", file=sys.stderr)

    return Y, stats
