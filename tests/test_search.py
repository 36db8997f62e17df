"""
Backtracking search tests.

The explicit-stack search with an undo trail must behave exactly like the
classic recursive search over board copies: same branch order (MRV, ties
row-major, symbols ascending), same budget accounting, same first solution.
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from arcwave.engine import (
    Direction,
    Rule,
    RuleSet,
    LATERAL_DIRECTIONS,
    SearchBudget,
    mrv_branches,
    solve,
    seed_domains,
    propagate,
    propagate_all,
    induce_rules,
)
from arcwave.kernel import DomainGrid, cardinality, domain_of, domain_symbols
from arcwave.task import Pair


def lateral(*pairs):
    return RuleSet(
        Rule(direction, a, b) for direction in LATERAL_DIRECTIONS for a, b in pairs
    )


PERMISSIVE = lateral((1, 1), (1, 2), (2, 1), (2, 2))


def _reference_solve(rules, grid, limit, counter):
    """Recursive search over board copies, used as an oracle."""
    counter[0] += 1
    if counter[0] > limit:
        return grid

    unsolved = [(r, c, m) for r, c, m in grid.cells() if cardinality(m) > 1]
    unsolved.sort(key=lambda cell: cardinality(cell[2]))
    if not unsolved:
        return grid

    for r, c, mask in unsolved:
        for symbol in domain_symbols(mask):
            branch = grid.copy()
            branch.collapse(r, c, symbol)
            if not propagate(rules, branch, [(r, c)]):
                continue
            result = _reference_solve(rules, branch, limit, counter)
            if result is not None:
                return result
    return None


def _checkerboard_task():
    output = [[1 if (r + c) % 2 == 0 else 2 for c in range(4)] for r in range(4)]
    rules = induce_rules([Pair(input=[[0] * 4 for _ in range(4)], output=output)])
    grid, _ = seed_domains(rules, [[0] * 4 for _ in range(4)])
    assert propagate_all(rules, grid)
    grid.commit()
    return rules, grid


# ═══════════════════════════════════════════════════════════════════════
# Budget
# ═══════════════════════════════════════════════════════════════════════

def test_budget_defaults_to_registry():
    budget = SearchBudget()
    assert budget.limit == 500
    assert budget.spent == 0
    assert not budget.exhausted


def test_budget_spend():
    budget = SearchBudget(limit=2)
    assert not budget.spend()
    assert not budget.spend()
    assert budget.spend()
    assert budget.exhausted
    assert budget.spent == 3


def test_zero_budget_returns_grid_untouched():
    grid = DomainGrid(3, 3, fill=domain_of(1, 2))
    budget = SearchBudget(limit=0)

    result = solve(PERMISSIVE, grid, budget)
    assert result is grid
    assert budget.spent == 1
    assert budget.exhausted
    assert all(mask == domain_of(1, 2) for _, _, mask in grid.cells())


def test_budget_one_collapses_single_cell():
    grid = DomainGrid(3, 3, fill=domain_of(1, 2))
    budget = SearchBudget(limit=1)

    result = solve(PERMISSIVE, grid, budget)
    assert result is grid
    assert budget.spent == 2
    assert grid.get(0, 0) == domain_of(1)
    undetermined = [(r, c) for r, c, m in grid.cells() if cardinality(m) > 1]
    assert len(undetermined) == 8


# ═══════════════════════════════════════════════════════════════════════
# Branch order
# ═══════════════════════════════════════════════════════════════════════

def test_mrv_branch_order():
    grid = DomainGrid(2, 2)
    grid.set(0, 0, domain_of(5, 6, 7))
    grid.set(0, 1, domain_of(3))
    grid.set(1, 0, domain_of(8, 2))
    grid.set(1, 1, domain_of(0, 9))

    # (1,0) and (1,1) tie on cardinality 2 and keep row-major order
    assert mrv_branches(grid) == [
        (1, 0, 2), (1, 0, 8),
        (1, 1, 0), (1, 1, 9),
        (0, 0, 5), (0, 0, 6), (0, 0, 7),
    ]


def test_single_cell_ascending_tie_break():
    rules = induce_rules([
        Pair(input=[[3]], output=[[5]]),
        Pair(input=[[3]], output=[[4]]),
    ])
    grid, _ = seed_domains(rules, [[3]])
    assert grid.get(0, 0) == domain_of(4, 5)

    budget = SearchBudget()
    result = solve(rules, grid, budget)
    assert result.get(0, 0) == domain_of(4)
    assert budget.spent == 2


def test_full_solve_counts_entries():
    grid = DomainGrid(3, 3, fill=domain_of(1, 2))
    budget = SearchBudget()

    result = solve(PERMISSIVE, grid, budget)
    # One entry per collapse plus the final entry that finds nothing left
    assert budget.spent == 10
    assert all(mask == domain_of(1) for _, _, mask in result.cells())


# ═══════════════════════════════════════════════════════════════════════
# Failure and backtracking
# ═══════════════════════════════════════════════════════════════════════

def test_exhaustion_returns_none_and_restores_grid():
    grid = DomainGrid(3, 3, fill=domain_of(1))
    for r, c in [(0, 0), (0, 2), (2, 0), (2, 2)]:
        grid.set(r, c, domain_of(1, 2))
    grid.commit()
    before = grid.snapshot()

    # No lateral rules: any check of the center empties it
    budget = SearchBudget()
    assert solve(RuleSet(), grid, budget) is None
    assert budget.spent == 1
    assert grid.snapshot() == before


def test_matches_recursive_copy_search():
    print("\n" + "=" * 70)
    print("Explicit-stack search vs recursive copy search (4x4 checkerboard)")
    print("=" * 70)

    for limit in (0, 1, 5, 50, 200):
        rules, grid = _checkerboard_task()
        oracle_grid = grid.copy()

        budget = SearchBudget(limit=limit)
        result = solve(rules, grid, budget)

        counter = [0]
        expected = _reference_solve(rules, oracle_grid, limit, counter)

        print(f"  limit={limit}: spent={budget.spent}, oracle={counter[0]}")
        assert budget.spent == counter[0]
        if expected is None:
            assert result is None
        else:
            assert result is not None
            assert result.snapshot() == expected.snapshot()


def test_search_is_deterministic():
    rules, grid_a = _checkerboard_task()
    _, grid_b = _checkerboard_task()

    result_a = solve(rules, grid_a, SearchBudget(limit=100))
    result_b = solve(rules, grid_b, SearchBudget(limit=100))

    assert (result_a is None) == (result_b is None)
    if result_a is not None:
        assert result_a.snapshot() == result_b.snapshot()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
