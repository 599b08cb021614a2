"""Account id hashing.

The contract never stores account ids. Each participant is keyed by the
base58 text of the SHA-256 digest of the account id, and every lookup goes
through the same hash.
"""

from __future__ import annotations

import hashlib

import base58

from ..models import Identity

_STRIP_CHARS = "@# "


def hash_account_id(account_id: str) -> Identity:
    """Return the identity for an account id (e.g. ``"alice.testnet"``)."""
    digest = hashlib.sha256(account_id.encode("utf-8")).digest()
    return base58.b58encode(digest).decode("ascii")


def normalize_account_input(text: str) -> str:
    """Strip the ``@``/``#`` decorations users type around account ids."""
    return text.strip(_STRIP_CHARS)


def is_identity(text: str) -> bool:
    """Whether ``text`` looks like an identity (base58 of a 32-byte digest)."""
    try:
        return len(base58.b58decode(text)) == 32
    except ValueError:
        return False
