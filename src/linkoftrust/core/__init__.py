"""Core building blocks shared by every linkoftrust subsystem."""

from .config import (
    ExploreConfig,
    LinkOfTrustConfig,
    NetworkConfig,
    StateLayout,
    get_config,
    reset_config,
)
from .exceptions import (
    DecodeError,
    FetchError,
    InvalidTextError,
    LinkOfTrustError,
    RpcError,
    TrailingBytesError,
    TruncatedError,
)

__all__ = [
    # Config
    "ExploreConfig",
    "LinkOfTrustConfig",
    "NetworkConfig",
    "StateLayout",
    "get_config",
    "reset_config",
    # Exceptions
    "LinkOfTrustError",
    "DecodeError",
    "TruncatedError",
    "InvalidTextError",
    "TrailingBytesError",
    "FetchError",
    "RpcError",
]
