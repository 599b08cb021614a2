"""
Read-only JSON-RPC client for the link-of-trust contract.

Provides everything the trust graph engine reads from the ledger:

1. Per-identity records (``get_user_data`` view call) - the fetch
   capability used by graph traversals
2. The list of registered identities (``view_users`` view call)
3. Full storage dumps (``view_state`` query) for the state decoder

Protocol:
- POST JSON-RPC 2.0 ``query`` requests to the configured RPC endpoint
- View calls carry their arguments as base64 JSON and return a byte array
  holding the JSON result

No method here signs or sends transactions.
"""

from __future__ import annotations

import asyncio
import base64
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import aiohttp

from ..core.config import NetworkConfig
from ..core.exceptions import RpcError
from ..models import Identity, UserRecord
from ..wire.state import ContractViewState

logger = logging.getLogger(__name__)


@dataclass
class NearRpcClient:
    """
    Client for the contract's read-only RPC surface.

    Each call opens its own ``aiohttp.ClientSession`` with the configured
    timeout. Retries are left to the caller.

    The instance is awaitable as a fetch capability:

        client = NearRpcClient(config=NetworkConfig(network_id="testnet"))
        graph = await traverse(identity, 2, True, client)
    """

    config: NetworkConfig = field(default_factory=NetworkConfig)

    # Statistics
    _stats: Dict[str, int] = field(default_factory=lambda: {
        "calls": 0,
        "failures": 0,
        "records_fetched": 0,
        "records_absent": 0,
    })

    # -------------------------------------------------------------------------
    # PUBLIC API
    # -------------------------------------------------------------------------

    async def get_user_data(self, identity: Identity) -> Optional[UserRecord]:
        """
        Fetch one identity's record.

        Args:
            identity: Hashed user id

        Returns:
            UserRecord, or None if the contract has no record for it

        Raises:
            RpcError: If the call fails
        """
        data = await self.view_call("get_user_data", {"user_id": identity})
        if data is None:
            self._stats["records_absent"] += 1
            return None

        if not isinstance(data, dict):
            raise RpcError(f"Malformed user data for {identity}: expected an object", payload=data)

        try:
            record = UserRecord.from_view(data)
        except (KeyError, TypeError, ValueError) as e:
            raise RpcError(f"Malformed user data for {identity}: {e}", payload=data) from e

        self._stats["records_fetched"] += 1
        return record

    async def __call__(self, identity: Identity) -> Optional[UserRecord]:
        return await self.get_user_data(identity)

    async def view_users(self) -> List[Identity]:
        """Return the identities of every registered user."""
        users = await self.view_call("view_users", {})
        return list(users or [])

    async def poll_users(self, identities: List[Identity]) -> Dict[Identity, UserRecord]:
        """
        Fetch several identities one after another.

        Identities without a record are left out of the result.
        """
        result: Dict[Identity, UserRecord] = {}
        for identity in identities:
            record = await self.get_user_data(identity)
            if record is not None:
                result[identity] = record
        return result

    async def fetch_view_state(self, prefix: bytes = b"") -> ContractViewState:
        """Dump the contract storage (optionally only keys under ``prefix``)."""
        result = await self.query({
            "request_type": "view_state",
            "finality": self.config.finality,
            "account_id": self.config.contract_id,
            "prefix_base64": base64.b64encode(prefix).decode("ascii"),
        })
        view_state = ContractViewState.from_rpc(result)
        logger.info(
            f"Fetched {len(view_state.entries)} storage entries from "
            f"{self.config.contract_id} at block {view_state.block_height}"
        )
        return view_state

    def get_stats(self) -> Dict[str, int]:
        """Get call statistics."""
        return dict(self._stats)

    # -------------------------------------------------------------------------
    # RPC PLUMBING
    # -------------------------------------------------------------------------

    async def view_call(self, method_name: str, args: Dict[str, Any]) -> Any:
        """
        Call a contract view method and decode its JSON result.

        Args:
            method_name: Contract method to call
            args: JSON arguments

        Returns:
            Decoded JSON result (None when the method returns null)

        Raises:
            RpcError: If the call fails or the result is not JSON
        """
        result = await self.query({
            "request_type": "call_function",
            "finality": self.config.finality,
            "account_id": self.config.contract_id,
            "method_name": method_name,
            "args_base64": base64.b64encode(json.dumps(args).encode()).decode("ascii"),
        })

        raw = result.get("result")
        if raw is None:
            raise RpcError(f"{method_name}: response has no result", payload=result)
        if not raw:
            return None

        try:
            return json.loads(bytes(raw).decode("utf-8"))
        except (ValueError, TypeError) as e:
            raise RpcError(f"{method_name}: result is not valid JSON: {e}", payload=raw) from e

    async def query(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        Send one JSON-RPC ``query`` request.

        Raises:
            RpcError: On connection errors, timeouts, non-200 responses,
                JSON-RPC errors and query-level errors
        """
        self._stats["calls"] += 1
        request_body = {
            "jsonrpc": "2.0",
            "id": "linkoftrust",
            "method": "query",
            "params": params,
        }
        logger.debug(f"RPC query {params.get('request_type')} {params.get('method_name', '')}".rstrip())

        try:
            timeout = aiohttp.ClientTimeout(total=self.config.request_timeout)
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(
                    self.config.rpc_url,
                    json=request_body,
                    headers={"Content-Type": "application/json"},
                ) as resp:
                    if resp.status != 200:
                        self._stats["failures"] += 1
                        raise RpcError(
                            f"RPC returned HTTP {resp.status}: {await resp.text()}"
                        )

                    data = await resp.json()

        except aiohttp.ClientError as e:
            self._stats["failures"] += 1
            raise RpcError(f"Connection error: {e}") from e
        except asyncio.TimeoutError:
            self._stats["failures"] += 1
            raise RpcError("Request timeout")
        except ValueError as e:
            self._stats["failures"] += 1
            raise RpcError(f"Response is not valid JSON: {e}") from e

        if not isinstance(data, dict):
            self._stats["failures"] += 1
            raise RpcError("Response is not a JSON-RPC object", payload=data)

        if data.get("error"):
            self._stats["failures"] += 1
            raise RpcError(f"RPC error: {data['error']}", payload=data["error"])

        result = data.get("result") or {}
        if not isinstance(result, dict):
            self._stats["failures"] += 1
            raise RpcError("Query result is not an object", payload=result)
        if result.get("error"):
            self._stats["failures"] += 1
            raise RpcError(f"Query failed: {result['error']}", payload=result)

        return result


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def create_rpc_client(
    network_id: Optional[str] = None,
    contract_id: Optional[str] = None,
    rpc_url: Optional[str] = None,
) -> NearRpcClient:
    """
    Create a client from the environment configuration with optional overrides.

    Args:
        network_id: "testnet" or "mainnet"
        contract_id: Contract account id
        rpc_url: Explicit RPC endpoint

    Returns:
        Configured NearRpcClient
    """
    from ..core.config import get_config

    base = get_config().network
    network = network_id or base.network_id
    config = NetworkConfig(
        network_id=network,
        # An explicit network switch falls back to that network's default endpoint
        rpc_url=rpc_url or (base.rpc_url if network == base.network_id else ""),
        contract_id=contract_id or base.contract_id,
        request_timeout=base.request_timeout,
        finality=base.finality,
    )
    return NearRpcClient(config=config)


async def get_user_data(identity: Identity, network_id: Optional[str] = None) -> Optional[UserRecord]:
    """
    Convenience function to fetch one record.

    Creates a temporary client from the environment configuration.
    """
    client = create_rpc_client(network_id=network_id)
    return await client.get_user_data(identity)
