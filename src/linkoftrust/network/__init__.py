"""
Linkoftrust Network - read-only access to the link-of-trust contract.

This module provides identity hashing and the JSON-RPC client that serves
as the fetch capability for trust graph traversals.
"""

from linkoftrust.network.identity import (
    hash_account_id,
    is_identity,
    normalize_account_input,
)
from linkoftrust.network.rpc import (
    NearRpcClient,
    create_rpc_client,
    get_user_data,
)

__all__ = [
    # Identity
    "hash_account_id",
    "is_identity",
    "normalize_account_input",
    # RPC
    "NearRpcClient",
    "create_rpc_client",
    "get_user_data",
]
