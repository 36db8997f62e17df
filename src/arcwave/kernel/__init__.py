"""
Kernel: domain bitmasks and color canonicalization.

Components:
  - domain: Domain bitmask ops and the undoable DomainGrid
  - palette: frequency-ranked color ordering and pair recoloring
"""

from .domain import (
    NUM_SYMBOLS,
    FULL_DOMAIN,
    EMPTY_DOMAIN,
    domain_of,
    domain_test,
    domain_set,
    cardinality,
    is_contradiction,
    is_collapsed,
    unique_symbol,
    domain_symbols,
    DomainGrid
)
from .palette import (
    color_ordering,
    recolor_grid,
    recolor_pair
)

__all__ = [
    # Domain
    "NUM_SYMBOLS",
    "FULL_DOMAIN",
    "EMPTY_DOMAIN",
    "domain_of",
    "domain_test",
    "domain_set",
    "cardinality",
    "is_contradiction",
    "is_collapsed",
    "unique_symbol",
    "domain_symbols",
    "DomainGrid",

    # Palette
    "color_ordering",
    "recolor_grid",
    "recolor_pair",
]
