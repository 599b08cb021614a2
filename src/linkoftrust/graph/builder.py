"""Bounded exploration of the trust relation.

Starting from one identity, outgoing trust relations are followed depth
first up to a depth budget. Each newly visited identity costs exactly one
call to the fetch capability, and calls are made one at a time.

Rules:
- An identity is visited at most once per traversal (``visited`` guard).
  The relation may contain cycles, so this guard is what makes the
  traversal terminate together with the decreasing budget.
- A node fetched with budget 0 is still added, flagged ``partial``, so the
  frontier is visible to the caller. Its relations are not followed.
- Only relations with weight > 0 become edges.
- An identity the fetch reports as absent produces no node.
- A FetchError aborts only the branch being expanded; anything collected
  before it is kept. A failure on the start identity is raised.

The traversal runs on an explicit stack rather than recursion, visiting
nodes in the same order a recursive depth-first walk would.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from ..core.exceptions import FetchError
from ..models import Identity, UserRecord
from .models import TrustEdge, TrustGraph, TrustNode

logger = logging.getLogger(__name__)

FetchFn = Callable[[Identity], Awaitable[UserRecord | None]]
NodeObserver = Callable[[Identity, UserRecord, bool], None]


async def traverse(
    start_id: Identity,
    depth: int,
    is_main_node: bool,
    fetch: FetchFn,
    visited: set[Identity] | None = None,
    on_node_fetched: NodeObserver | None = None,
) -> TrustGraph:
    """Explore the trust relation from ``start_id`` and return one snapshot.

    Args:
        start_id: Identity to start from
        depth: Depth budget; 0 fetches only the start node
        is_main_node: Flag the start node as the main (own) node
        fetch: Coroutine returning a UserRecord, or None if absent
        visited: Identities to treat as already explored. Updated in place.
        on_node_fetched: Called once per fetched identity with the record
            and whether its relations were expanded

    Returns:
        TrustGraph snapshot (possibly empty)

    Raises:
        FetchError: If fetching the start identity itself fails
    """
    if visited is None:
        visited = set()

    nodes: dict[Identity, TrustNode] = {}
    edges: list[TrustEdge] = []

    # (identity, remaining budget, main flag)
    stack: list[tuple[Identity, int, bool]] = [(start_id, depth, is_main_node)]
    fetches = 0

    while stack:
        node_id, budget, main = stack.pop()
        if budget < 0 or node_id in visited:
            continue
        visited.add(node_id)

        is_start = fetches == 0
        fetches += 1
        try:
            record = await fetch(node_id)
        except FetchError as e:
            if is_start:
                raise
            logger.warning(f"Fetch failed for {node_id}, skipping branch: {e}")
            continue

        if record is None:
            logger.debug(f"No record for {node_id}")
            continue

        expanded = budget > 0
        nodes[node_id] = TrustNode(
            id=node_id,
            profile=record.profile,
            is_main_node=main,
            partial=not expanded,
        )

        if on_node_fetched is not None:
            on_node_fetched(node_id, record, expanded)

        if not expanded:
            continue

        targets = record.trusted()
        for target in targets:
            edges.append(TrustEdge(node_id, target))
        # Reversed so the first relation is explored first
        for target in reversed(targets):
            stack.append((target, budget - 1, False))

    graph = TrustGraph.assemble(nodes, edges)
    logger.debug(
        f"Traversal from {start_id} (depth {depth}): {fetches} fetches, "
        f"{len(graph.nodes)} nodes, {len(graph.edges)} edges"
    )
    return graph


@dataclass
class TrustGraphBuilder:
    """Traversal bound to one fetch capability and an optional observer.

    Example:
        builder = TrustGraphBuilder(fetch=client.get_user_data, on_node_fetched=repository)
        snapshot = await builder.build(my_identity, depth=2, is_main_node=True)
    """

    fetch: FetchFn
    on_node_fetched: NodeObserver | None = None

    _stats: dict[str, int] = field(default_factory=lambda: {
        "traversals": 0,
        "nodes": 0,
        "edges": 0,
    })

    async def build(self, start_id: Identity, depth: int, is_main_node: bool = False) -> TrustGraph:
        self._stats["traversals"] += 1
        graph = await traverse(
            start_id,
            depth,
            is_main_node,
            self.fetch,
            on_node_fetched=self.on_node_fetched,
        )
        self._stats["nodes"] += len(graph.nodes)
        self._stats["edges"] += len(graph.edges)
        return graph

    def get_stats(self) -> dict[str, int]:
        return dict(self._stats)
