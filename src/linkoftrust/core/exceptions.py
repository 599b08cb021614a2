"""Exception hierarchy for linkoftrust.

Decoding failures and fetch failures are kept apart: a DecodeError is
local to one storage entry and is normally caught and logged by the
batch decoders, while a FetchError comes from the remote ledger and
aborts the traversal branch that triggered it.
"""

from __future__ import annotations

from typing import Any


class LinkOfTrustError(Exception):
    """Base exception for linkoftrust errors."""
    pass


# =============================================================================
# DECODING
# =============================================================================


class DecodeError(LinkOfTrustError):
    """Base exception for wire-format decoding errors."""

    def __init__(self, message: str, offset: int | None = None) -> None:
        super().__init__(message)
        self.offset = offset


class TruncatedError(DecodeError):
    """Raised when a buffer is shorter than the field being read."""

    def __init__(self, needed: int, available: int, offset: int) -> None:
        super().__init__(
            f"Truncated buffer at offset {offset}: need {needed} bytes, {available} available",
            offset=offset,
        )
        self.needed = needed
        self.available = available


class InvalidTextError(DecodeError):
    """Raised when a text field is not valid UTF-8."""
    pass


class TrailingBytesError(DecodeError):
    """Raised by strict decoding when bytes remain after the last field."""

    def __init__(self, remaining: int, offset: int) -> None:
        super().__init__(f"{remaining} unexpected bytes after offset {offset}", offset=offset)
        self.remaining = remaining


# =============================================================================
# FETCHING
# =============================================================================


class FetchError(LinkOfTrustError):
    """Raised when the remote ledger could not be queried."""
    pass


class RpcError(FetchError):
    """Raised when a JSON-RPC call fails (transport, HTTP or RPC-level error)."""

    def __init__(self, message: str, payload: Any = None) -> None:
        super().__init__(message)
        self.payload = payload
