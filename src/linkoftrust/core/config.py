"""Configuration for linkoftrust.

All tunables are read from the environment. ``.env`` files in the working
directory and in ``~/.linkoftrust/`` are loaded once, without overriding
variables that are already set.

Environment:
    LINKOFTRUST_NETWORK       testnet | mainnet (default: testnet)
    LINKOFTRUST_RPC_URL       JSON-RPC endpoint (default: per network)
    LINKOFTRUST_CONTRACT_ID   Contract account id (default: linkoftrust.testnet)
    LINKOFTRUST_RPC_TIMEOUT   Request timeout in seconds (default: 10)
    LINKOFTRUST_DEPTH         Default exploration depth (default: 1)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

NETWORKS = ("testnet", "mainnet")

DEFAULT_RPC_URLS = {
    "testnet": "https://rpc.testnet.near.org",
    "mainnet": "https://rpc.mainnet.near.org",
}

DEFAULT_CONTRACT_ID = "linkoftrust.testnet"
DEFAULT_REQUEST_TIMEOUT = 10.0
DEFAULT_DEPTH = 1

_env_loaded = False


def load_env_files(paths: list[Path] | None = None) -> None:
    """Load KEY=VALUE lines from the first existing ``.env`` file."""
    global _env_loaded
    if paths is None:
        if _env_loaded:
            return
        _env_loaded = True
        paths = [Path.cwd() / ".env", Path.home() / ".linkoftrust" / ".env"]

    for env_path in paths:
        if env_path.exists():
            with open(env_path) as f:
                for line in f:
                    line = line.strip()
                    if line and not line.startswith("#") and "=" in line:
                        key, value = line.split("=", 1)
                        os.environ.setdefault(key.strip(), value.strip())
            logger.debug(f"Loaded environment from {env_path}")
            break


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass
class NetworkConfig:
    """Where and how to reach the remote ledger."""

    network_id: str = "testnet"
    rpc_url: str = ""
    contract_id: str = DEFAULT_CONTRACT_ID
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    finality: str = "final"

    def __post_init__(self) -> None:
        if self.network_id not in NETWORKS:
            raise ValueError(f"Unknown network {self.network_id!r}. Available: {', '.join(NETWORKS)}")
        if not self.rpc_url:
            self.rpc_url = DEFAULT_RPC_URLS[self.network_id]
        if self.request_timeout <= 0:
            raise ValueError("request_timeout must be positive")

    @classmethod
    def from_env(cls) -> NetworkConfig:
        return cls(
            network_id=os.environ.get("LINKOFTRUST_NETWORK", "testnet"),
            rpc_url=os.environ.get("LINKOFTRUST_RPC_URL", ""),
            contract_id=os.environ.get("LINKOFTRUST_CONTRACT_ID", DEFAULT_CONTRACT_ID),
            request_timeout=_env_float("LINKOFTRUST_RPC_TIMEOUT", DEFAULT_REQUEST_TIMEOUT),
        )


@dataclass
class ExploreConfig:
    """Defaults for trust graph exploration."""

    default_depth: int = DEFAULT_DEPTH
    # Drop snapshots whose traversal was overtaken by a newer one
    discard_stale: bool = True

    def __post_init__(self) -> None:
        if self.default_depth < 0:
            raise ValueError("default_depth must be >= 0")

    @classmethod
    def from_env(cls) -> ExploreConfig:
        return cls(default_depth=_env_int("LINKOFTRUST_DEPTH", DEFAULT_DEPTH))


@dataclass
class StateLayout:
    """Key prefixes of the contract storage dump."""

    users: bytes = b"u"
    private_profile: bytes = b"pp_"
    trust_network: bytes = b"tn_"
    trust_requests: bytes = b"rq_"
    blocked_requests: bytes = b"bl_"
    accepted_deposits: bytes = b"ad_"


@dataclass
class LinkOfTrustConfig:
    """Bundle of every configuration section."""

    network: NetworkConfig = field(default_factory=NetworkConfig)
    explore: ExploreConfig = field(default_factory=ExploreConfig)
    layout: StateLayout = field(default_factory=StateLayout)


_config: LinkOfTrustConfig | None = None


def get_config() -> LinkOfTrustConfig:
    """Return the process-wide configuration, loading it on first use."""
    global _config
    if _config is None:
        load_env_files()
        _config = LinkOfTrustConfig(
            network=NetworkConfig.from_env(),
            explore=ExploreConfig.from_env(),
        )
    return _config


def reset_config() -> None:
    """Forget the cached configuration (used by tests)."""
    global _config
    _config = None
