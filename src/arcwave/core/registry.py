"""
Parameter Registry

Frozen constants for deterministic solver operation.
All global parameters (symbol alphabet, iteration budget, direction encoding,
propagation and branching policy, etc.) are defined here with exact values.

No randomness, no environment leakage, no optionals.
"""


def param_registry() -> dict:
    """
    Returns a frozen mapping of all global constants used by the solver.

    Keys and values are JSON-serializable primitives or lists/tuples.
    This registry is hashed into every section receipt to prove parametric consistency.

    Returns:
        dict: Frozen parameter mapping with exact keys and values.

    Raises:
        RegistryError: If any required key is missing (internal consistency check).
    """
    registry = {
        # Version binding (bumped whenever a policy below changes)
        "registry_version": "1.0",
        "endianness": "BE",  # big-endian integers in byte frames

        # Symbol alphabet: integers 0..num_symbols-1
        "num_symbols": 10,

        # Anytime search budget (recursive entries per deduction)
        "max_iterations": 500,

        # Explicit Direction -> index table (encoding is independent of declaration order)
        "direction_index": {"NORTH": 0, "WEST": 1, "SOUTH": 2, "EAST": 3, "ABOVE": 4},

        # Lateral neighbor offsets (dr, dc) in row-major grid coordinates
        "direction_offsets": {
            "NORTH": [-1, 0],
            "WEST": [0, -1],
            "SOUTH": [1, 0],
            "EAST": [0, 1],
        },

        # Worklist feed: popped cell re-constrains its diagonal neighbors, in this order
        "propagation_feed": [[-1, -1], [-1, 1], [1, -1], [1, 1]],
        "propagation_targets": "interior",  # outer ring is never a propagation target
        "queue_order": "row-major-per-cell-fifo",

        # Branching: MRV (stable, ties row-major), then ascending symbol, first solution wins
        "branch_order": "mrv-row-major-ascending-symbol",

        # Cells whose input symbol has no ABOVE rule keep the full domain
        "seed_fallback": "full-domain",

        # Unset/unresolved cells are a distinct tag, never a symbol
        "unset_sentinel": None,

        # Hashing
        "hash_algo": "BLAKE3",

        # Byte frame tags for serialization (ASCII 4-byte tags)
        "byte_frame_tags": {
            "GRID": "GRD1",
            "DOMAINS": "DOM1"
        }
    }

    # Consistency check: ensure all required keys are present
    required_keys = {
        "registry_version", "endianness", "num_symbols", "max_iterations",
        "direction_index", "direction_offsets", "propagation_feed",
        "propagation_targets", "queue_order", "branch_order", "seed_fallback",
        "unset_sentinel", "hash_algo", "byte_frame_tags"
    }

    actual_keys = set(registry.keys())
    if actual_keys != required_keys:
        missing = required_keys - actual_keys
        extra = actual_keys - required_keys
        raise RegistryError(
            f"param_registry() key mismatch. Missing: {missing}, Extra: {extra}"
        )

    return registry


class RegistryError(Exception):
    """Raised when param_registry() has missing or unexpected keys."""
    pass
