"""
Receipts

Every solver run records what it did as an ordered key/value payload: task
shape, palette, rule counts and hashes, and per-test deduction stats. The
payload is sealed together with the registry hash, so two runs can be
compared by a single section_hash.

Payload values are restricted to JSON scalars (no floats), lists and
string-keyed dicts; nothing that depends on memory layout or the clock.
"""

import json
from typing import Any, Callable, Dict, Optional, Union

from .registry import param_registry
from .hashing import blake3_hash


class Receipts:
    """Ordered payload for one section, sealed by digest()."""

    def __init__(self, section: str):
        self.section = section
        self.payload: Dict[str, Any] = {}

    def put(self, key: str, value: Any) -> None:
        """
        Record one value.

        Raises:
            ReceiptError: On a repeated key or a value outside the allowed types.
        """
        if key in self.payload:
            raise ReceiptError(f"Duplicate key in receipts: '{key}'")
        _check_value(value, key)
        self.payload[key] = value

    def digest(self) -> dict:
        """
        Sealed form: section, registry_version, param_registry_hash, payload,
        and section_hash over all four.
        """
        registry = param_registry()
        sealed = {
            "section": self.section,
            "registry_version": registry["registry_version"],
            "param_registry_hash": blake3_hash(stable_json_bytes(registry)),
            "payload": dict(self.payload),
        }
        sealed["section_hash"] = blake3_hash(stable_json_bytes(sealed))
        return sealed


def stable_json_bytes(obj: Any) -> bytes:
    """Sorted-key, compact, UTF-8 JSON."""
    return json.dumps(obj, sort_keys=True, ensure_ascii=False, separators=(',', ':')).encode('utf-8')


def first_difference(payload_a: dict, payload_b: dict) -> Optional[str]:
    """First key (run A's order, then keys only in run B) whose values differ."""
    for key in list(payload_a) + [k for k in payload_b if k not in payload_a]:
        if payload_a.get(key, "<MISSING>") != payload_b.get(key, "<MISSING>"):
            return key
    return None


def assert_double_run_equal(run: Callable[[], Union[Receipts, dict]]) -> dict:
    """
    Call run() twice and compare the sealed receipts.

    Args:
        run: Returns either a Receipts instance or an already sealed digest.

    Returns:
        The digest of the first run.

    Raises:
        DeterminismError: If the two section hashes differ.
    """
    digests = []
    for _ in range(2):
        result = run()
        digests.append(result.digest() if isinstance(result, Receipts) else result)
    digest_a, digest_b = digests

    if digest_a["section_hash"] != digest_b["section_hash"]:
        payload_a = digest_a["payload"]
        payload_b = digest_b["payload"]
        key = first_difference(payload_a, payload_b)
        raise DeterminismError(
            section=digest_a["section"],
            first_differing_key=key,
            value_a=payload_a.get(key, "<MISSING>"),
            value_b=payload_b.get(key, "<MISSING>"),
            hash_a=digest_a["section_hash"],
            hash_b=digest_b["section_hash"]
        )

    return digest_a


def _check_value(value: Any, key: str) -> None:
    if value is None or isinstance(value, (bool, int, str)):
        return
    if isinstance(value, float):
        raise ReceiptError(f"Floats forbidden in receipts (key: '{key}')")
    if isinstance(value, (list, tuple)):
        for i, item in enumerate(value):
            _check_value(item, f"{key}[{i}]")
        return
    if isinstance(value, dict):
        for k, v in value.items():
            if not isinstance(k, str):
                raise ReceiptError(f"Non-string dict key {k!r} in receipts (key: '{key}')")
            _check_value(v, f"{key}.{k}")
        return
    raise ReceiptError(f"Invalid type {type(value).__name__} in receipts (key: '{key}')")


class ReceiptError(Exception):
    """Raised on a duplicate key or a disallowed value type."""
    pass


class DeterminismError(RuntimeError):
    """Two runs of the same input produced different receipts."""

    def __init__(
        self,
        section: str,
        first_differing_key: Optional[str],
        value_a: Any,
        value_b: Any,
        hash_a: str,
        hash_b: str
    ):
        self.section = section
        self.first_differing_key = first_differing_key
        self.value_a = value_a
        self.value_b = value_b
        self.hash_a = hash_a
        self.hash_b = hash_b
        super().__init__(
            f"Determinism check failed in section '{section}' at key "
            f"'{first_differing_key}'\n"
            f"  Run 1: {value_a}\n"
            f"  Run 2: {value_b}"
        )
