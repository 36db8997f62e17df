"""
Color canonicalization

Remap symbols by frequency rank so that rules induced on one task generalize
to grids that use different symbols for the same structural roles.

ordering = the 10 symbols sorted by ascending occurrence count in a grid
(stable sort, so ties fall back to ascending symbol). Outputs are not counted.
"""

from dataclasses import replace
from typing import TYPE_CHECKING, List, Optional

from .domain import NUM_SYMBOLS

if TYPE_CHECKING:
    from ..task import Pair


def color_ordering(G: List[List[Optional[int]]]) -> List[int]:
    """
    Symbols sorted by ascending count in G (ties by ascending symbol).

    Unset cells are ignored.
    """
    counts = [0] * NUM_SYMBOLS
    for row in G:
        for value in row:
            if value is not None:
                counts[value] += 1

    return [symbol for symbol, _ in sorted(enumerate(counts), key=lambda item: item[1])]


def recolor_grid(
    G: List[List[Optional[int]]],
    own_ordering: List[int],
    ordering: List[int]
) -> List[List[Optional[int]]]:
    """Map each symbol v to ordering[rank of v in own_ordering]; None stays None."""
    rank = {symbol: i for i, symbol in enumerate(own_ordering)}
    return [
        [None if v is None else ordering[rank[v]] for v in row]
        for row in G
    ]


def recolor_pair(pair: "Pair", ordering: List[int]) -> "Pair":
    """
    Recolor both grids of a pair into `ordering`.

    The pair's own ranking is taken from its input grid, so the same
    substitution is applied to input and output.
    """
    own = color_ordering(pair.input)
    return replace(
        pair,
        input=recolor_grid(pair.input, own, ordering),
        output=recolor_grid(pair.output, own, ordering),
    )
