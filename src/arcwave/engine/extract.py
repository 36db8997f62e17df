"""
Solution Extraction

Convert final domains into a concrete (possibly partial) output grid.

Per cell:
  - exactly one symbol  → emit it                       (collapsed)
  - zero symbols        → emit None, count no_solution  (contradiction)
  - several symbols     → emit None, count uncollapsed  (still ambiguous)

A partial grid is a valid result; nothing here raises on unresolved cells.
"""

from typing import List, Optional, Tuple, TypedDict

from ..kernel.domain import DomainGrid, is_collapsed, unique_symbol


class ExtractStats(TypedDict):
    collapsed: int
    no_solution: int
    uncollapsed: int
    total_cells: int


def extract_solution(grid: DomainGrid) -> Tuple[List[List[Optional[int]]], ExtractStats]:
    """
    Read the output grid and diagnostic counts off a DomainGrid.

    Invariant: collapsed + no_solution + uncollapsed == H * W.
    """
    Y: List[List[Optional[int]]] = [[None] * grid.W for _ in range(grid.H)]
    collapsed = 0
    no_solution = 0
    uncollapsed = 0

    for r, c, mask in grid.cells():
        if mask == 0:
            no_solution += 1
        elif is_collapsed(mask):
            Y[r][c] = unique_symbol(mask)
            collapsed += 1
        else:
            uncollapsed += 1

    stats = ExtractStats(
        collapsed=collapsed,
        no_solution=no_solution,
        uncollapsed=uncollapsed,
        total_cells=grid.H * grid.W
    )
    return Y, stats
