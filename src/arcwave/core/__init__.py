"""
Core foundation: receipts, hashing, serialization, parameter registry.

Frozen constants and deterministic byte-level I/O shared by every stage.
"""

from .registry import param_registry, RegistryError
from .hashing import blake3_hash
from .bytesio import (
    serialize_grid_be_row_major,
    serialize_domains_be_row_major,
    SerializationError
)
from .receipts import (
    Receipts,
    assert_double_run_equal,
    first_difference,
    stable_json_bytes,
    ReceiptError,
    DeterminismError
)

__all__ = [
    # Registry
    "param_registry",
    "RegistryError",

    # Hashing
    "blake3_hash",

    # Serialization
    "serialize_grid_be_row_major",
    "serialize_domains_be_row_major",
    "SerializationError",

    # Receipts
    "Receipts",
    "assert_double_run_equal",
    "first_difference",
    "stable_json_bytes",
    "ReceiptError",
    "DeterminismError",
]
