"""Tests for the binary codec primitives.

Tests cover:
- Fixed-width little-endian reads and their bounds
- Length-prefixed text and blobs (including empty values)
- Offsets chaining across sequential reads
- Encoder round trips at boundary values
- Error reporting (truncation, invalid UTF-8, out-of-range writes)
"""

from __future__ import annotations

import math
import struct

import pytest

from linkoftrust.core.exceptions import DecodeError, InvalidTextError, TruncatedError
from linkoftrust.wire.codec import (
    U32_MAX,
    U64_MAX,
    read_bytes,
    read_f32_le,
    read_text,
    read_u32_le,
    read_u64_le,
    write_bytes,
    write_f32_le,
    write_text,
    write_u32_le,
    write_u64_le,
)


# =============================================================================
# FIXED-WIDTH READS
# =============================================================================


class TestFixedWidth:
    """Tests for u32/u64/f32 readers."""

    def test_u32_little_endian(self):
        value, off = read_u32_le(b"\x01\x02\x03\x04")
        assert value == 0x04030201
        assert off == 4

    def test_u64_little_endian(self):
        value, off = read_u64_le(b"\x01\x00\x00\x00\x02\x00\x00\x00")
        assert value == 1 + (2 << 32)
        assert off == 8

    def test_f32(self):
        value, off = read_f32_le(struct.pack("<f", 0.5))
        assert value == 0.5
        assert off == 4

    def test_read_at_offset(self):
        buf = b"\xff\xff" + struct.pack("<I", 7)
        value, off = read_u32_le(buf, 2)
        assert value == 7
        assert off == 6

    @pytest.mark.parametrize("reader,width", [
        (read_u32_le, 4),
        (read_u64_le, 8),
        (read_f32_le, 4),
    ])
    def test_truncated(self, reader, width):
        with pytest.raises(TruncatedError) as exc_info:
            reader(b"\x00" * (width - 1))
        assert exc_info.value.needed == width
        assert exc_info.value.available == width - 1
        assert exc_info.value.offset == 0

    def test_truncated_past_end_offset(self):
        with pytest.raises(TruncatedError) as exc_info:
            read_u32_le(b"\x00\x00", 10)
        assert exc_info.value.available == 0

    def test_truncated_is_decode_error(self):
        with pytest.raises(DecodeError):
            read_u64_le(b"")

    def test_input_not_mutated(self):
        buf = bytearray(b"\x05\x00\x00\x00")
        read_u32_le(buf)
        assert buf == bytearray(b"\x05\x00\x00\x00")


# =============================================================================
# LENGTH-PREFIXED READS
# =============================================================================


class TestLengthPrefixed:
    """Tests for text and blob readers."""

    def test_read_text(self):
        buf = b"\x04\x00\x00\x00abcd"
        text, off = read_text(buf)
        assert text == "abcd"
        assert off == 8

    def test_read_empty_text(self):
        text, off = read_text(b"\x00\x00\x00\x00")
        assert text == ""
        assert off == 4

    def test_read_utf8_text(self):
        encoded = "héllo ✓".encode("utf-8")
        buf = struct.pack("<I", len(encoded)) + encoded
        text, off = read_text(buf)
        assert text == "héllo ✓"
        assert off == len(buf)

    def test_invalid_utf8(self):
        with pytest.raises(InvalidTextError):
            read_text(b"\x02\x00\x00\x00\xff\xfe")

    def test_text_body_truncated(self):
        with pytest.raises(TruncatedError) as exc_info:
            read_text(b"\x05\x00\x00\x00abc")
        assert exc_info.value.needed == 5
        assert exc_info.value.available == 3
        assert exc_info.value.offset == 4

    def test_text_length_truncated(self):
        with pytest.raises(TruncatedError):
            read_text(b"\x05\x00")

    def test_read_bytes_uninterpreted(self):
        buf = b"\x03\x00\x00\x00\xff\x00\xfe"
        blob, off = read_bytes(buf)
        assert blob == b"\xff\x00\xfe"
        assert off == 7

    def test_sequential_reads(self):
        buf = write_text("alice") + write_u64_le(42) + write_text("") + write_f32_le(-1.5)
        name, off = read_text(buf, 0)
        number, off = read_u64_le(buf, off)
        empty, off = read_text(buf, off)
        weight, off = read_f32_le(buf, off)
        assert (name, number, empty, weight) == ("alice", 42, "", -1.5)
        assert off == len(buf)


# =============================================================================
# ROUND TRIPS
# =============================================================================


class TestRoundTrip:
    """Encoding then decoding returns the original value."""

    @pytest.mark.parametrize("value", [0, 1, U32_MAX])
    def test_u32(self, value):
        assert read_u32_le(write_u32_le(value)) == (value, 4)

    @pytest.mark.parametrize("value", [0, 1, U64_MAX])
    def test_u64(self, value):
        assert read_u64_le(write_u64_le(value)) == (value, 8)

    @pytest.mark.parametrize("value", [0.0, 1.0, -2.25, 0.5, -0.0])
    def test_f32_exact(self, value):
        decoded, _ = read_f32_le(write_f32_le(value))
        assert decoded == value
        assert math.copysign(1.0, decoded) == math.copysign(1.0, value)

    def test_f32_rounds_to_single_precision(self):
        decoded, _ = read_f32_le(write_f32_le(0.7))
        assert decoded == pytest.approx(0.7, rel=1e-6)

    @pytest.mark.parametrize("value", ["", "bob", "9ecEKLrX9cWKV9ERGRpWVCW7R8QktsJSZe4HrW1fkbuC"])
    def test_text(self, value):
        encoded = write_text(value)
        assert read_text(encoded) == (value, len(encoded))

    def test_bytes(self):
        assert read_bytes(write_bytes(b"\x00\x01")) == (b"\x00\x01", 6)


class TestWriters:
    """Writer range checks."""

    @pytest.mark.parametrize("value", [-1, U32_MAX + 1])
    def test_u32_out_of_range(self, value):
        with pytest.raises(ValueError):
            write_u32_le(value)

    @pytest.mark.parametrize("value", [-1, U64_MAX + 1])
    def test_u64_out_of_range(self, value):
        with pytest.raises(ValueError):
            write_u64_le(value)
