"""
Constraint engine

Rule induction, propagation, search and extraction.

Modules:
- rules.py: Direction, Rule, RuleSet and induce_rules()
- propagate.py: seeding, constrain(), diagonal-fed worklist propagation
- search.py: MRV backtracking under an anytime SearchBudget
- extract.py: final domains → output grid + diagnostic counts
- deduction.py: seed → propagate → search → extract for one test input
"""

from .rules import (
    Direction,
    Rule,
    RuleSet,
    DIRECTION_INDEX,
    DIRECTION_OFFSETS,
    LATERAL_DIRECTIONS,
    induce_rules,
    induce_pair_rules,
    format_rules,
    rules_hash,
)
from .propagate import (
    ConstraintResult,
    constrain,
    constrain_cell,
    seed_domains,
    propagate,
    propagate_all,
    arc_violations,
)
from .search import SearchBudget, mrv_branches, solve
from .extract import ExtractStats, extract_solution
from .deduction import DeduceStats, deduce

__all__ = [
    "Direction",
    "Rule",
    "RuleSet",
    "DIRECTION_INDEX",
    "DIRECTION_OFFSETS",
    "LATERAL_DIRECTIONS",
    "induce_rules",
    "induce_pair_rules",
    "format_rules",
    "rules_hash",
    "ConstraintResult",
    "constrain",
    "constrain_cell",
    "seed_domains",
    "propagate",
    "propagate_all",
    "arc_violations",
    "SearchBudget",
    "mrv_branches",
    "solve",
    "ExtractStats",
    "extract_solution",
    "DeduceStats",
    "deduce",
]
