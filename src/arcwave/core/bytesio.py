"""
Byte Serialization (Big-Endian, Row-Major)

Stable, deterministic byte serialization for grids and domain grids.

Frame layout (frozen):
  - 4 ASCII bytes tag
  - 2 bytes H, 2 bytes W (uint16, big-endian)
  - Row-major payload, one fixed-width record per cell

No timestamps, no padding.
"""

from typing import List, Optional

UNSET_BYTE = 0xFF


def serialize_grid_be_row_major(
    G: List[List[Optional[int]]],
    H: int,
    W: int,
    num_symbols: int = 10
) -> bytes:
    """
    Encode a (possibly partial) grid as a deterministic byte stream for hashing.

    Format (exact):
      - 4 ASCII bytes tag: b"GRD1"
      - 2 bytes H (uint16, big-endian)
      - 2 bytes W (uint16, big-endian)
      - Payload: for each row r in 0..H-1, for each col c in 0..W-1:
          1 byte: the symbol, or 0xFF when the cell is unset (None)

    Args:
        G: Grid as list of H rows, each row a list of W symbols or None.
        H: Height (must match len(G)).
        W: Width (must match len(G[0]) for all rows).
        num_symbols: Size of the symbol alphabet.

    Returns:
        bytes: Deterministic serialization.

    Raises:
        SerializationError: If dimensions mismatch or a symbol is out of range.
    """
    if len(G) != H:
        raise SerializationError(f"Grid height mismatch: expected {H}, got {len(G)}")
    if H > 0 and any(len(row) != W for row in G):
        raise SerializationError(f"Grid width mismatch: expected {W}")
    if H > 65535 or W > 65535:
        raise SerializationError(f"Dimensions too large: H={H}, W={W}")

    stream = bytearray()
    stream.extend(b"GRD1")
    stream.extend(H.to_bytes(2, byteorder='big'))
    stream.extend(W.to_bytes(2, byteorder='big'))

    for r in range(H):
        for c in range(W):
            value = G[r][c]
            if value is None:
                stream.append(UNSET_BYTE)
                continue
            if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value < num_symbols:
                raise SerializationError(
                    f"Symbol {value!r} at ({r},{c}) outside 0..{num_symbols - 1}"
                )
            stream.append(value)

    return bytes(stream)


def serialize_domains_be_row_major(
    D: List[List[int]],
    H: int,
    W: int,
    num_symbols: int = 10
) -> bytes:
    """
    Encode per-cell domain bitmasks as a deterministic byte stream.

    Format (exact):
      - 4 ASCII bytes tag: b"DOM1"
      - 2 bytes H (uint16, big-endian)
      - 2 bytes W (uint16, big-endian)
      - Payload: for each (r, c) in row-major order:
          ceil(num_symbols/8) bytes big-endian; bit s set iff symbol s possible

    Args:
        D: Domain masks as list of H rows of W ints.
        H: Height.
        W: Width.
        num_symbols: Size of the symbol alphabet.

    Returns:
        bytes: Deterministic serialization.

    Raises:
        SerializationError: If dimensions mismatch or a mask has bits beyond the alphabet.
    """
    if len(D) != H:
        raise SerializationError(f"Domain height mismatch: expected {H}, got {len(D)}")
    if H > 0 and any(len(row) != W for row in D):
        raise SerializationError(f"Domain width mismatch: expected {W}")
    if H > 65535 or W > 65535:
        raise SerializationError(f"Dimensions too large: H={H}, W={W}")

    num_bytes = (num_symbols + 7) // 8

    stream = bytearray()
    stream.extend(b"DOM1")
    stream.extend(H.to_bytes(2, byteorder='big'))
    stream.extend(W.to_bytes(2, byteorder='big'))

    for r in range(H):
        for c in range(W):
            mask = D[r][c]
            if mask < 0 or mask >> num_symbols != 0:
                raise SerializationError(
                    f"Domain mask {mask:b} at ({r},{c}) has bits outside [0..{num_symbols - 1}]"
                )
            stream.extend(mask.to_bytes(num_bytes, byteorder='big'))

    return bytes(stream)


class SerializationError(Exception):
    """Raised when serialization encounters invalid dimensions or symbols."""
    pass
