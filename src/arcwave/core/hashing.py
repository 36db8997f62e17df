"""
BLAKE3 Hashing

Deterministic hash function for all receipts, rule sets and grid serialization.

No seeding, no randomness, no timestamps.
"""

import blake3


def blake3_hash(data: bytes) -> str:
    """
    Return hex-encoded BLAKE3 digest of the byte stream.

    Args:
        data: Raw bytes to hash.

    Returns:
        str: Hexadecimal digest (64 characters for BLAKE3-256).

    Example:
        >>> len(blake3_hash(b"test"))
        64
    """
    hasher = blake3.blake3()
    hasher.update(data)
    return hasher.hexdigest()
