"""
ARC-AGI Constraint-Propagation Solver

Induces local adjacency rules from training pairs and resolves a test grid by
diagonal-fed propagation and MRV backtracking under an anytime budget.
"""

__version__ = "0.1.0"

from .task import Pair, TaskError, parse_task, load_task
from .engine import RuleSet, induce_rules, deduce
from .runner import solve, solve_with_determinism_check

__all__ = [
    "Pair",
    "TaskError",
    "parse_task",
    "load_task",
    "RuleSet",
    "induce_rules",
    "deduce",
    "solve",
    "solve_with_determinism_check",
]
