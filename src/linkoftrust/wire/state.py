"""Decoding of a raw contract storage dump into typed records.

A dump is an unordered collection of ``(key, value)`` byte pairs. Two kinds
of entries matter here:

1. Fixed-layout user records. The value holds, in order: identity (text),
   requested trust cost (text), public profile (text), then one
   length-prefixed header blob per sub-collection. The headers are kept
   raw; the collection contents live under their own keys.

2. Sub-map entries. The key is ``prefix || text(identity)`` and the value
   is encoded according to the sub-map (profile text, f32 trust weight,
   token amount text, or pending request).

Entries that do not match a prefix are skipped. An entry that matches but
fails to decode is logged and dropped; the rest of the dump is still
decoded.
"""

from __future__ import annotations

import base64
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any, TypeVar

from ..core.config import StateLayout
from ..core.exceptions import DecodeError, TrailingBytesError
from ..models import Identity, PendingRequest, TokenAmount, UserRecord
from .codec import (
    read_bytes,
    read_f32_le,
    read_text,
    read_u64_le,
    write_bytes,
    write_text,
)

logger = logging.getLogger(__name__)

V = TypeVar("V")

Entry = tuple[bytes, bytes]

# Sub-collection headers stored in a fixed user record, in layout order.
USER_COLLECTIONS: tuple[str, ...] = (
    "private_profile",
    "trust_network",
    "trust_requests",
    "accepted_deposits",
)


# =============================================================================
# VIEW STATE
# =============================================================================


@dataclass
class ContractViewState:
    """A storage dump as returned by the ``view_state`` RPC query."""

    entries: list[Entry] = field(default_factory=list)
    block_hash: str = ""
    block_height: int = 0

    @classmethod
    def from_rpc(cls, result: dict[str, Any]) -> ContractViewState:
        """Decode the base64 keys and values of a ``view_state`` result.

        Items that are not valid base64 key/value pairs are logged and skipped.
        """
        entries: list[Entry] = []
        for item in result.get("values", []):
            try:
                entries.append((
                    base64.b64decode(item["key"], validate=True),
                    base64.b64decode(item["value"], validate=True),
                ))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed view_state item {item!r}: {e}")
        return cls(
            entries=entries,
            block_hash=result.get("block_hash", ""),
            block_height=result.get("block_height", 0),
        )

    def to_rpc(self) -> dict[str, Any]:
        """Inverse of :meth:`from_rpc`."""
        return {
            "values": [
                {"key": base64.b64encode(k).decode("ascii"), "value": base64.b64encode(v).decode("ascii")}
                for k, v in self.entries
            ],
            "block_hash": self.block_hash,
            "block_height": self.block_height,
        }


# =============================================================================
# FIXED RECORDS
# =============================================================================


def decode_fixed_record(
    value: bytes,
    strict: bool = False,
    collections: tuple[str, ...] = USER_COLLECTIONS,
) -> UserRecord:
    """Decode one fixed-layout user record.

    Args:
        value: Raw value bytes
        strict: Reject bytes left over after the last header
        collections: Names of the sub-collection headers, in layout order

    Returns:
        UserRecord with ``trust_relations`` empty and the raw headers in
        ``collection_headers``

    Raises:
        TruncatedError: If a field runs past the end of the buffer
        InvalidTextError: If a text field is not valid UTF-8
        TrailingBytesError: If ``strict`` and bytes remain
    """
    identity, off = read_text(value, 0)
    cost, off = read_text(value, off)
    profile, off = read_text(value, off)

    headers: dict[str, bytes] = {}
    for name in collections:
        headers[name], off = read_bytes(value, off)

    remaining = len(value) - off
    if remaining:
        if strict:
            raise TrailingBytesError(remaining=remaining, offset=off)
        logger.debug(f"Ignoring {remaining} trailing bytes in record for {identity}")

    return UserRecord(
        id=identity,
        requested_trust_cost=cost,
        profile=profile,
        collection_headers=headers,
    )


def encode_fixed_record(record: UserRecord, collections: tuple[str, ...] = USER_COLLECTIONS) -> bytes:
    """Encode a user record in the fixed layout read by :func:`decode_fixed_record`."""
    parts = [
        write_text(record.id),
        write_text(record.requested_trust_cost),
        write_text(record.profile),
    ]
    for name in collections:
        parts.append(write_bytes(record.collection_headers.get(name, b"")))
    return b"".join(parts)


def decode_user_records(entries: Iterable[Entry], prefix: bytes = b"u") -> dict[Identity, UserRecord]:
    """Decode every fixed user record whose key starts with ``prefix``.

    Records that fail to decode are logged and skipped.
    """
    users: dict[Identity, UserRecord] = {}
    for key, value in entries:
        if not key.startswith(prefix):
            continue
        try:
            record = decode_fixed_record(value)
        except DecodeError as e:
            logger.warning(f"Failed to decode user record for key {key!r}: {e}")
            continue
        users[record.id] = record
    return users


# =============================================================================
# SUB-MAPS
# =============================================================================


def decode_text_value(value: bytes) -> str:
    text, _ = read_text(value, 0)
    return text


def decode_weight_value(value: bytes) -> float:
    weight, _ = read_f32_le(value, 0)
    return weight


def decode_token_value(value: bytes) -> TokenAmount:
    amount, _ = read_text(value, 0)
    return amount


def decode_pending_request_value(value: bytes) -> PendingRequest:
    deposit, off = read_text(value, 0)
    expiry, _ = read_u64_le(value, off)
    return PendingRequest(deposit=deposit, expiry=expiry)


def sub_map_key(prefix: bytes, identity: Identity) -> bytes:
    """Build the storage key of a sub-map entry."""
    return prefix + write_text(identity)


def decode_sub_map(
    prefix: bytes,
    value_decoder: Callable[[bytes], V],
    entries: Iterable[Entry],
) -> dict[Identity, V]:
    """Decode all entries of one sub-map.

    Keys that do not start with exactly ``prefix`` belong to other maps and
    are skipped. For matching keys the remainder of the key is read as the
    identity and the value is passed to ``value_decoder``. A matching entry
    that fails either step is dropped with a warning.
    """
    result: dict[Identity, V] = {}
    for key, value in entries:
        if not key.startswith(prefix):
            continue
        try:
            identity, _ = read_text(key, len(prefix))
            result[identity] = value_decoder(value)
        except Exception as e:
            logger.warning(f"Dropping sub-map entry {key!r} under prefix {prefix!r}: {e}")
            continue
    return result


def decode_private_profiles(prefix: bytes, entries: Iterable[Entry]) -> dict[Identity, str]:
    return decode_sub_map(prefix, decode_text_value, entries)


def decode_trust_network(prefix: bytes, entries: Iterable[Entry]) -> dict[Identity, float]:
    return decode_sub_map(prefix, decode_weight_value, entries)


def decode_trust_requests(prefix: bytes, entries: Iterable[Entry]) -> dict[Identity, PendingRequest]:
    return decode_sub_map(prefix, decode_pending_request_value, entries)


def decode_blocked_requests(prefix: bytes, entries: Iterable[Entry]) -> dict[Identity, TokenAmount]:
    return decode_sub_map(prefix, decode_token_value, entries)


def decode_accepted_deposits(prefix: bytes, entries: Iterable[Entry]) -> dict[Identity, TokenAmount]:
    return decode_sub_map(prefix, decode_token_value, entries)


# =============================================================================
# WHOLE DUMP
# =============================================================================


@dataclass
class ContractState:
    """Everything recovered from one storage dump."""

    users: dict[Identity, UserRecord] = field(default_factory=dict)
    private_profiles: dict[Identity, str] = field(default_factory=dict)
    trust_network: dict[Identity, float] = field(default_factory=dict)
    trust_requests: dict[Identity, PendingRequest] = field(default_factory=dict)
    blocked_requests: dict[Identity, TokenAmount] = field(default_factory=dict)
    accepted_deposits: dict[Identity, TokenAmount] = field(default_factory=dict)
    block_hash: str = ""
    block_height: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "block_hash": self.block_hash,
            "block_height": self.block_height,
            "users": {
                uid: {
                    "requested_trust_cost": u.requested_trust_cost,
                    "public_profile": u.profile,
                }
                for uid, u in self.users.items()
            },
            "private_profiles": dict(self.private_profiles),
            "trust_network": dict(self.trust_network),
            "trust_requests": {k: r.to_dict() for k, r in self.trust_requests.items()},
            "blocked_requests": dict(self.blocked_requests),
            "accepted_deposits": dict(self.accepted_deposits),
        }


def decode_contract_state(view_state: ContractViewState, layout: StateLayout | None = None) -> ContractState:
    """Decode users and every sub-map of a storage dump."""
    layout = layout or StateLayout()
    entries = view_state.entries

    state = ContractState(
        users=decode_user_records(entries, layout.users),
        private_profiles=decode_private_profiles(layout.private_profile, entries),
        trust_network=decode_trust_network(layout.trust_network, entries),
        trust_requests=decode_trust_requests(layout.trust_requests, entries),
        blocked_requests=decode_blocked_requests(layout.blocked_requests, entries),
        accepted_deposits=decode_accepted_deposits(layout.accepted_deposits, entries),
        block_hash=view_state.block_hash,
        block_height=view_state.block_height,
    )
    logger.debug(
        f"Decoded {len(state.users)} users from {len(entries)} entries at block {state.block_height}"
    )
    return state
