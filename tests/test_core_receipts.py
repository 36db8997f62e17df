"""
Core foundation tests: param_registry, byte framing, BLAKE3, receipts.

Verifies the frozen constants every stage depends on and the determinism
machinery (stable JSON, section hashes, double-run comparison).
"""

import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from arcwave.core import (
    param_registry,
    blake3_hash,
    serialize_grid_be_row_major,
    serialize_domains_be_row_major,
    stable_json_bytes,
    Receipts,
    assert_double_run_equal,
    first_difference,
    SerializationError,
    ReceiptError,
    DeterminismError,
)


# ═══════════════════════════════════════════════════════════════════════
# param_registry
# ═══════════════════════════════════════════════════════════════════════

def test_registry_frozen_values():
    registry = param_registry()

    assert registry["num_symbols"] == 10
    assert registry["max_iterations"] == 500
    assert registry["direction_index"] == {
        "NORTH": 0, "WEST": 1, "SOUTH": 2, "EAST": 3, "ABOVE": 4
    }
    assert registry["direction_offsets"]["NORTH"] == [-1, 0]
    assert registry["direction_offsets"]["EAST"] == [0, 1]
    assert registry["propagation_feed"] == [[-1, -1], [-1, 1], [1, -1], [1, 1]]
    assert registry["unset_sentinel"] is None


def test_registry_is_stable():
    # Each call builds a fresh dict; contents and hash must not drift
    a = param_registry()
    b = param_registry()
    assert a == b
    assert a is not b
    assert blake3_hash(stable_json_bytes(a)) == blake3_hash(stable_json_bytes(b))


# ═══════════════════════════════════════════════════════════════════════
# Byte framing
# ═══════════════════════════════════════════════════════════════════════

def test_serialize_grid_exact_bytes():
    data = serialize_grid_be_row_major([[1, None], [9, 0]], 2, 2)

    expected = b"GRD1" + b"\x00\x02" + b"\x00\x02" + bytes([1, 0xFF, 9, 0])
    print(f"\nGRD1 frame: {data.hex()}")
    assert data == expected


def test_serialize_grid_rejects_bad_input():
    with pytest.raises(SerializationError):
        serialize_grid_be_row_major([[10]], 1, 1)
    with pytest.raises(SerializationError):
        serialize_grid_be_row_major([[1, 2]], 1, 3)
    with pytest.raises(SerializationError):
        serialize_grid_be_row_major([[1], [2]], 1, 1)
    with pytest.raises(SerializationError):
        serialize_grid_be_row_major([[True]], 1, 1)


def test_serialize_domains_exact_bytes():
    data = serialize_domains_be_row_major([[0b11, 0x3FF]], 1, 2)

    # 10 symbols → 2 bytes per cell, big-endian
    expected = b"DOM1" + b"\x00\x01" + b"\x00\x02" + b"\x00\x03" + b"\x03\xff"
    assert data == expected


def test_serialize_domains_rejects_out_of_alphabet_bits():
    with pytest.raises(SerializationError):
        serialize_domains_be_row_major([[1 << 10]], 1, 1)
    with pytest.raises(SerializationError):
        serialize_domains_be_row_major([[-1]], 1, 1)


def test_blake3_hash_shape():
    h = blake3_hash(b"arcwave")
    assert len(h) == 64
    assert h == blake3_hash(b"arcwave")
    assert h != blake3_hash(b"arcwavf")


# ═══════════════════════════════════════════════════════════════════════
# Receipts
# ═══════════════════════════════════════════════════════════════════════

def test_receipts_digest_fields():
    r = Receipts("unit")
    r.put("count", 3)
    r.put("grid", [[1, 2], [3, None]])
    digest = r.digest()

    assert digest["section"] == "unit"
    assert digest["registry_version"] == param_registry()["registry_version"]
    assert digest["payload"] == {"count": 3, "grid": [[1, 2], [3, None]]}
    assert len(digest["section_hash"]) == 64
    assert len(digest["param_registry_hash"]) == 64


def test_receipts_hash_tracks_content():
    a = Receipts("unit")
    a.put("x", 1)
    a.put("y", 2)

    b = Receipts("unit")
    b.put("x", 1)
    b.put("y", 2)

    assert a.digest()["section_hash"] == b.digest()["section_hash"]

    c = Receipts("unit")
    c.put("x", 1)
    c.put("y", 3)
    assert a.digest()["section_hash"] != c.digest()["section_hash"]


def test_receipts_reject_duplicates_and_floats():
    r = Receipts("unit")
    r.put("k", 1)

    with pytest.raises(ReceiptError):
        r.put("k", 2)
    with pytest.raises(ReceiptError):
        r.put("ratio", 0.5)
    with pytest.raises(ReceiptError):
        r.put("nested", {"inner": [1, 2.0]})
    with pytest.raises(ReceiptError):
        r.put("keys", {1: "int key"})
    with pytest.raises(ReceiptError):
        r.put("obj", object())


def test_assert_double_run_equal_passes():
    def build():
        r = Receipts("double-run")
        r.put("value", 42)
        return r

    assert_double_run_equal(build)


def test_assert_double_run_equal_reports_first_difference():
    calls = []

    def build():
        calls.append(1)
        r = Receipts("double-run")
        r.put("stable", "same")
        r.put("counter", len(calls))
        return r

    with pytest.raises(DeterminismError) as exc_info:
        assert_double_run_equal(build)

    err = exc_info.value
    assert err.section == "double-run"
    assert err.first_differing_key == "counter"
    assert (err.value_a, err.value_b) == (1, 2)
    assert err.hash_a != err.hash_b
    assert isinstance(err, RuntimeError)


def test_assert_double_run_equal_accepts_sealed_digests():
    def run():
        r = Receipts("double-run")
        r.put("grid", [[1, None]])
        return r.digest()

    digest = assert_double_run_equal(run)
    assert digest["payload"] == {"grid": [[1, None]]}
    assert digest["section_hash"] == run()["section_hash"]


def test_first_difference():
    assert first_difference({"a": 1, "b": 2}, {"a": 1, "b": 2}) is None
    assert first_difference({"a": 1, "b": 2}, {"a": 1, "b": 3}) == "b"
    assert first_difference({"a": 1}, {"a": 1, "z": 0}) == "z"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
