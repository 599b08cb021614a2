"""Trust graph construction and reconciliation.

- ``builder``: bounded, cycle-safe exploration through a fetch capability
- ``merge``: folding a new snapshot into the accumulated graph
- ``sync``: single-writer accumulator with stale-snapshot detection

Example usage:
    from linkoftrust.graph import merge, traverse

    snapshot = await traverse(identity, 1, True, client.get_user_data)
    accumulated = merge(accumulated, snapshot, selected_id=identity)
"""

from .builder import FetchFn, NodeObserver, TrustGraphBuilder, traverse
from .merge import merge
from .models import TrustEdge, TrustGraph, TrustNode
from .sync import TrustGraphSync

__all__ = [
    # Models
    "TrustEdge",
    "TrustGraph",
    "TrustNode",
    # Builder
    "FetchFn",
    "NodeObserver",
    "TrustGraphBuilder",
    "traverse",
    # Merge
    "merge",
    # Sync
    "TrustGraphSync",
]
