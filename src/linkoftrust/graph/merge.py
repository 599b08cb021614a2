"""Folding a fresh traversal snapshot into an accumulated trust graph.

Node rules (for an identity present in both graphs, base ``n1`` and
incoming ``n2``):
- profile and main-node flag come from ``n2``
- ``partial`` is ``n1.partial and n2.partial``: once any fetch has fully
  expanded a node it stays fully known
- selected if ``n2`` is selected or it is the requested selection
Identities present in only one graph are kept as they are.

Edge rules: every incoming edge is kept. A base edge missing from the
incoming snapshot is kept unless its source was fully expanded by the
incoming snapshot; a full expansion is authoritative, so the relation has
been revoked since the base was built. A partial re-fetch says nothing
about relations and cannot retract edges.

Children are derived from the merged edges, which gives the expected
behaviour: a full re-expansion replaces a node's children, a partial
re-fetch leaves them untouched.

The result assumes snapshots are merged in the order they were fetched.
``graph.sync.TrustGraphSync`` enforces that for concurrent callers.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from ..models import Identity
from .models import TrustEdge, TrustGraph, TrustNode

logger = logging.getLogger(__name__)


def _mark_selected(nodes: dict[Identity, TrustNode], selected_id: Identity | None) -> None:
    if selected_id is None:
        return
    node = nodes.get(selected_id)
    if node is not None and not node.is_selected:
        nodes[selected_id] = replace(node, is_selected=True)


def merge(
    base: TrustGraph | None,
    incoming: TrustGraph,
    selected_id: Identity | None = None,
) -> TrustGraph:
    """Merge ``incoming`` into ``base`` and return a new graph.

    Neither input is modified.

    Args:
        base: Accumulated graph, or None if nothing has been fetched yet
        incoming: Snapshot from the latest traversal
        selected_id: Identity to flag as selected, if present

    Returns:
        Merged TrustGraph
    """
    if base is None:
        nodes = dict(incoming.nodes)
        _mark_selected(nodes, selected_id)
        return TrustGraph.assemble(nodes, incoming.edges)

    nodes: dict[Identity, TrustNode] = dict(base.nodes)
    for node_id, fresh in incoming.nodes.items():
        known = nodes.get(node_id)
        if known is None:
            nodes[node_id] = fresh
            continue
        nodes[node_id] = TrustNode(
            id=node_id,
            profile=fresh.profile,
            is_main_node=fresh.is_main_node,
            is_selected=fresh.is_selected or node_id == selected_id,
            partial=known.partial and fresh.partial,
        )
    _mark_selected(nodes, selected_id)

    expanded = {node_id for node_id, node in incoming.nodes.items() if not node.partial}
    incoming_edges = incoming.edge_set

    edges: list[TrustEdge] = list(incoming.edges)
    retracted = 0
    for edge in base.edges:
        if edge in incoming_edges:
            continue
        if edge.source in expanded:
            retracted += 1
            continue
        edges.append(edge)

    merged = TrustGraph.assemble(nodes, edges)
    logger.debug(
        f"Merged graph: {len(merged.nodes)} nodes, {len(merged.edges)} edges, {retracted} retracted"
    )
    return merged
