"""Binary primitives for contract storage values.

Every reader takes ``(buffer, offset)`` and returns ``(value, next_offset)``
so that fields can be read one after another:

    identity, off = read_text(value, 0)
    cost, off = read_text(value, off)

Layout conventions (little-endian throughout):
- u32 / u64: fixed width unsigned integers
- f32: IEEE-754 single precision
- text: u32 byte length followed by that many UTF-8 bytes
- bytes: u32 byte length followed by that many raw bytes

Readers never modify the buffer. The writers at the bottom of the module
produce the same layout and are used to build storage values.
"""

from __future__ import annotations

import struct

from ..core.exceptions import InvalidTextError, TruncatedError

_U32 = struct.Struct("<I")
_U64 = struct.Struct("<Q")
_F32 = struct.Struct("<f")

U32_MAX = 2**32 - 1
U64_MAX = 2**64 - 1


def _require(buffer: bytes, offset: int, width: int) -> None:
    available = max(0, len(buffer) - offset)
    if offset < 0 or available < width:
        raise TruncatedError(needed=width, available=available, offset=offset)


# -----------------------------------------------------------------------------
# Readers
# -----------------------------------------------------------------------------


def read_u32_le(buffer: bytes, offset: int = 0) -> tuple[int, int]:
    """Read an unsigned 32-bit little-endian integer."""
    _require(buffer, offset, _U32.size)
    (value,) = _U32.unpack_from(buffer, offset)
    return value, offset + _U32.size


def read_u64_le(buffer: bytes, offset: int = 0) -> tuple[int, int]:
    """Read an unsigned 64-bit little-endian integer."""
    _require(buffer, offset, _U64.size)
    (value,) = _U64.unpack_from(buffer, offset)
    return value, offset + _U64.size


def read_f32_le(buffer: bytes, offset: int = 0) -> tuple[float, int]:
    """Read a 32-bit little-endian float."""
    _require(buffer, offset, _F32.size)
    (value,) = _F32.unpack_from(buffer, offset)
    return value, offset + _F32.size


def read_bytes(buffer: bytes, offset: int = 0) -> tuple[bytes, int]:
    """Read a length-prefixed byte blob, returned uninterpreted."""
    length, start = read_u32_le(buffer, offset)
    _require(buffer, start, length)
    end = start + length
    return bytes(buffer[start:end]), end


def read_text(buffer: bytes, offset: int = 0) -> tuple[str, int]:
    """Read a length-prefixed UTF-8 string. A zero length yields ``""``."""
    raw, end = read_bytes(buffer, offset)
    try:
        return raw.decode("utf-8"), end
    except UnicodeDecodeError as e:
        raise InvalidTextError(f"Invalid UTF-8 in text field at offset {offset}: {e}", offset=offset) from e


# -----------------------------------------------------------------------------
# Writers
# -----------------------------------------------------------------------------


def write_u32_le(value: int) -> bytes:
    if not 0 <= value <= U32_MAX:
        raise ValueError(f"u32 out of range: {value}")
    return _U32.pack(value)


def write_u64_le(value: int) -> bytes:
    if not 0 <= value <= U64_MAX:
        raise ValueError(f"u64 out of range: {value}")
    return _U64.pack(value)


def write_f32_le(value: float) -> bytes:
    return _F32.pack(value)


def write_bytes(value: bytes) -> bytes:
    return write_u32_le(len(value)) + bytes(value)


def write_text(value: str) -> bytes:
    return write_bytes(value.encode("utf-8"))
