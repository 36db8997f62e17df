"""
Domains & DomainGrid

Per-cell candidate-symbol sets packed as bitmasks.

Domain representation:
  - Python int with NUM_SYMBOLS least-significant bits
  - bit s == 1 ⟺ symbol s is still possible at the cell
  - cardinality 0 = contradiction, 1 = collapsed, >1 = undetermined

DomainGrid keeps an undo trail of (index, previous mask) so that a search
branch can be rolled back exactly instead of deep-copying the board.
"""

from typing import Iterator, List, Tuple

from ..core.registry import param_registry

NUM_SYMBOLS: int = param_registry()["num_symbols"]
FULL_DOMAIN: int = (1 << NUM_SYMBOLS) - 1
EMPTY_DOMAIN: int = 0


def _check_symbol(symbol: int) -> None:
    if isinstance(symbol, bool) or not isinstance(symbol, int) or not 0 <= symbol < NUM_SYMBOLS:
        raise ValueError(f"Symbol {symbol!r} outside 0..{NUM_SYMBOLS - 1}")


def domain_of(*symbols: int) -> int:
    """Build a domain mask containing exactly the given symbols."""
    mask = 0
    for symbol in symbols:
        _check_symbol(symbol)
        mask |= 1 << symbol
    return mask


def domain_test(mask: int, symbol: int) -> bool:
    """True iff symbol is still possible in the domain."""
    _check_symbol(symbol)
    return (mask >> symbol) & 1 == 1


def domain_set(mask: int, symbol: int, present: bool) -> int:
    """Return the domain with symbol added (present=True) or removed."""
    _check_symbol(symbol)
    if present:
        return mask | (1 << symbol)
    return mask & ~(1 << symbol)


def cardinality(mask: int) -> int:
    """Number of surviving symbols."""
    return bin(mask).count("1")


def is_contradiction(mask: int) -> bool:
    return mask == 0


def is_collapsed(mask: int) -> bool:
    # exactly one bit set (power of 2)
    return mask != 0 and mask & (mask - 1) == 0


def unique_symbol(mask: int) -> int:
    """
    Return the single surviving symbol of a collapsed domain.

    Raises:
        ValueError: If the domain is not collapsed.
    """
    if not is_collapsed(mask):
        raise ValueError(
            f"unique_symbol: domain {mask:b} has {cardinality(mask)} symbols, expected 1"
        )
    return mask.bit_length() - 1


def domain_symbols(mask: int) -> List[int]:
    """Surviving symbols in ascending order."""
    return [s for s in range(NUM_SYMBOLS) if (mask >> s) & 1]


class DomainGrid:
    """
    H×W board of domain bitmasks with bounds-checked access and an undo trail.

    Every write that changes a cell is logged on the trail. mark() returns the
    current trail position; undo(mark) restores every cell written since then.
    """

    def __init__(self, H: int, W: int, fill: int = FULL_DOMAIN):
        if H < 0 or W < 0:
            raise ValueError(f"DomainGrid: negative dimensions H={H}, W={W}")
        if fill < 0 or fill >> NUM_SYMBOLS != 0:
            raise ValueError(f"DomainGrid: fill mask {fill:b} has bits outside the alphabet")
        self.H = H
        self.W = W
        self._cells: List[int] = [fill] * (H * W)
        self._trail: List[Tuple[int, int]] = []

    def in_bounds(self, r: int, c: int) -> bool:
        return 0 <= r < self.H and 0 <= c < self.W

    def is_interior(self, r: int, c: int) -> bool:
        """True for cells off the outer ring (0 < r < H-1 and 0 < c < W-1)."""
        return 0 < r < self.H - 1 and 0 < c < self.W - 1

    def _index(self, r: int, c: int) -> int:
        if not self.in_bounds(r, c):
            raise IndexError(f"DomainGrid: cell ({r},{c}) outside {self.H}x{self.W}")
        return r * self.W + c

    def get(self, r: int, c: int) -> int:
        return self._cells[self._index(r, c)]

    def set(self, r: int, c: int, mask: int) -> None:
        if mask < 0 or mask >> NUM_SYMBOLS != 0:
            raise ValueError(f"DomainGrid: mask {mask:b} has bits outside the alphabet")
        idx = self._index(r, c)
        old = self._cells[idx]
        if old != mask:
            self._trail.append((idx, old))
            self._cells[idx] = mask

    def collapse(self, r: int, c: int, symbol: int) -> None:
        """Reduce cell (r, c) to exactly one symbol."""
        self.set(r, c, domain_of(symbol))

    def mark(self) -> int:
        return len(self._trail)

    def undo(self, mark: int) -> None:
        """Roll back every write made after mark (newest first)."""
        if mark < 0 or mark > len(self._trail):
            raise ValueError(f"DomainGrid: invalid undo mark {mark} (trail={len(self._trail)})")
        while len(self._trail) > mark:
            idx, old = self._trail.pop()
            self._cells[idx] = old

    def commit(self) -> None:
        """Forget the trail; current state becomes the new baseline."""
        self._trail.clear()

    def cells(self) -> Iterator[Tuple[int, int, int]]:
        """Yield (r, c, mask) in row-major order."""
        for idx, mask in enumerate(self._cells):
            yield idx // self.W, idx % self.W, mask

    def snapshot(self) -> List[List[int]]:
        """Row lists of masks (a detached copy)."""
        return [self._cells[r * self.W:(r + 1) * self.W] for r in range(self.H)]

    def copy(self) -> "DomainGrid":
        other = DomainGrid(self.H, self.W)
        other._cells = list(self._cells)
        return other

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DomainGrid):
            return NotImplemented
        return (self.H, self.W, self._cells) == (other.H, other.W, other._cells)

    def __repr__(self) -> str:
        return f"DomainGrid({self.H}x{self.W})"
