"""Linkoftrust - client-side engine for the link-of-trust contract.

Linkoftrust provides:
- Decoding of raw contract storage dumps (wire)
- Bounded trust graph exploration and merging (graph)
- Read-only JSON-RPC access to the contract (network)
- Presentation preference stores (storage)
"""

__version__ = "0.1.0"

from .models import Identity, PendingRequest, TokenAmount, UserRecord
from .repository import CachedUser, UserRepository

__all__ = [
    "Identity",
    "TokenAmount",
    "PendingRequest",
    "UserRecord",
    "CachedUser",
    "UserRepository",
]
