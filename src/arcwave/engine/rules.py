"""
Rule Induction

Derive directional binary constraints from training pairs.

For every cell p of every training output Y_i:
  - Lateral rules (output-to-output): Rule(d, Y_i[p], Y_i[p + offset(d)])
    for d in NORTH, WEST, SOUTH, EAST when the neighbor is in bounds
  - Layer rule (output-to-input): Rule(ABOVE, Y_i[p], X_i[p])

Rules from different trainings are combined by set union: a rule is admitted
if it was observed in ANY training. Adding trainings never removes a rule.
"""

from enum import Enum
from typing import Dict, Iterable, Iterator, List, NamedTuple, Sequence, Tuple

from ..core.hashing import blake3_hash
from ..core.registry import param_registry
from ..kernel.domain import NUM_SYMBOLS
from ..task import Pair


class Direction(Enum):
    NORTH = "NORTH"
    WEST = "WEST"
    SOUTH = "SOUTH"
    EAST = "EAST"
    ABOVE = "ABOVE"


_REGISTRY = param_registry()

# Encoding index and lateral offsets come from the frozen registry tables
DIRECTION_INDEX: Dict[Direction, int] = {
    Direction[name]: idx for name, idx in _REGISTRY["direction_index"].items()
}
DIRECTION_OFFSETS: Dict[Direction, Tuple[int, int]] = {
    Direction[name]: (dr, dc) for name, (dr, dc) in _REGISTRY["direction_offsets"].items()
}
LATERAL_DIRECTIONS: Tuple[Direction, ...] = tuple(
    sorted(DIRECTION_OFFSETS, key=lambda d: DIRECTION_INDEX[d])
)


class Rule(NamedTuple):
    """Symbol a may legally appear with symbol b in this direction."""
    direction: Direction
    a: int
    b: int

    def __str__(self) -> str:
        return f"{self.a} {self.direction.name} of {self.b}"


def _rule_key(rule: Rule) -> Tuple[int, int, int]:
    return DIRECTION_INDEX[rule.direction], rule.a, rule.b


class RuleSet:
    """
    Immutable set of Rules with precomputed support masks.

    support_mask(d, a): bitmask over b such that Rule(d, a, b) is admitted.
    above_mask(x):      bitmask over a such that Rule(ABOVE, a, x) is admitted.
    """

    __slots__ = ("_rules", "_support", "_above")

    def __init__(self, rules: Iterable[Rule] = ()):
        frozen = frozenset(rules)
        support: Dict[Tuple[Direction, int], int] = {}
        above: Dict[int, int] = {}

        for rule in frozen:
            if not isinstance(rule, Rule):
                raise TypeError(f"RuleSet: expected Rule, got {type(rule).__name__}")
            for symbol in (rule.a, rule.b):
                if not 0 <= symbol < NUM_SYMBOLS:
                    raise ValueError(f"RuleSet: symbol {symbol} outside 0..{NUM_SYMBOLS - 1}")
            key = (rule.direction, rule.a)
            support[key] = support.get(key, 0) | (1 << rule.b)
            if rule.direction is Direction.ABOVE:
                above[rule.b] = above.get(rule.b, 0) | (1 << rule.a)

        self._rules = frozen
        self._support = support
        self._above = above

    def __contains__(self, rule: object) -> bool:
        return rule in self._rules

    def __iter__(self) -> Iterator[Rule]:
        # Canonical order: direction index, then a, then b
        return iter(sorted(self._rules, key=_rule_key))

    def __len__(self) -> int:
        return len(self._rules)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RuleSet):
            return NotImplemented
        return self._rules == other._rules

    def __hash__(self) -> int:
        return hash(self._rules)

    def __repr__(self) -> str:
        return f"RuleSet({len(self._rules)} rules)"

    def union(self, other: "RuleSet") -> "RuleSet":
        return RuleSet(self._rules | other._rules)

    def issubset(self, other: "RuleSet") -> bool:
        return self._rules <= other._rules

    def support_mask(self, direction: Direction, a: int) -> int:
        return self._support.get((direction, a), 0)

    def above_mask(self, input_symbol: int) -> int:
        return self._above.get(input_symbol, 0)

    def counts(self) -> Dict[str, int]:
        """Number of rules per direction, keyed by direction name in index order."""
        result = {d.name: 0 for d in sorted(Direction, key=lambda d: DIRECTION_INDEX[d])}
        for rule in self._rules:
            result[rule.direction.name] += 1
        return result


def induce_pair_rules(pair: Pair) -> RuleSet:
    """
    Rules observed in a single training pair.

    Raises:
        ValueError: If input and output shapes differ.
    """
    X, Y = pair.input, pair.output
    H = len(Y)
    W = len(Y[0]) if Y else 0

    if len(X) != H or any(len(row) != W for row in X) or any(len(row) != W for row in Y):
        raise ValueError(
            f"induce_rules: input/output shape mismatch ({len(X)} rows vs {H} rows)"
        )

    rules = set()
    for r in range(H):
        for c in range(W):
            symbol = Y[r][c]
            for direction in LATERAL_DIRECTIONS:
                dr, dc = DIRECTION_OFFSETS[direction]
                nr, nc = r + dr, c + dc
                if 0 <= nr < H and 0 <= nc < W:
                    rules.add(Rule(direction, symbol, Y[nr][nc]))
            rules.add(Rule(Direction.ABOVE, symbol, X[r][c]))

    return RuleSet(rules)


def induce_rules(pairs: Sequence[Pair]) -> RuleSet:
    """
    Union of the rules observed in every training pair.

    Args:
        pairs: Non-empty sequence of training pairs (order is irrelevant).

    Returns:
        RuleSet admitted by at least one training.

    Raises:
        ValueError: If pairs is empty or a pair's shapes disagree.
    """
    if len(pairs) == 0:
        raise ValueError("induce_rules: at least one training pair is required")

    rules = RuleSet()
    for pair in pairs:
        rules = rules.union(induce_pair_rules(pair))

    return rules


def format_rules(rules: RuleSet) -> List[str]:
    """One line per rule in canonical order."""
    return [str(rule) for rule in rules]


def rules_hash(rules: RuleSet) -> str:
    """
    Hash a rule set in canonical order.

    Each rule serializes as 3 bytes: direction index, a, b.
    """
    result = bytearray(b"RUL1")
    result.extend(len(rules).to_bytes(4, "big"))
    for rule in rules:
        result.extend(bytes(_rule_key(rule)))
    return blake3_hash(bytes(result))
