"""Trust graph value types.

A TrustGraph is a snapshot: a map of nodes keyed by identity plus a
duplicate-free, ordered collection of directed edges. Edges are unweighted;
the trust weight only decides whether an edge exists at all.

``TrustNode.children`` is derived from the edges. Graphs are always built
through :meth:`TrustGraph.assemble`, which recomputes every node's children
from the edge list, so the two can never disagree. The node map of an
assembled graph is a read-only view.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any

from ..models import Identity


@dataclass(frozen=True)
class TrustEdge:
    """Directed trust edge ``source -> target``."""

    source: Identity
    target: Identity

    def to_list(self) -> list[str]:
        return [self.source, self.target]


@dataclass(frozen=True)
class TrustNode:
    """A participant as seen by one traversal.

    Attributes:
        id: Identity of the participant
        profile: Public profile text
        is_main_node: True for the signed-in user's own node
        is_selected: True for the node the user focused
        partial: True when the node sat on the traversal frontier and its
            outgoing relations were not explored
        children: Identities of fetched nodes this node trusts, in edge order
    """

    id: Identity
    profile: str = ""
    is_main_node: bool = False
    is_selected: bool = False
    partial: bool = False
    children: tuple[Identity, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "profile": self.profile,
            "is_main_node": self.is_main_node,
            "is_selected": self.is_selected,
            "partial": self.partial,
            "children": list(self.children),
        }


@dataclass(frozen=True)
class TrustGraph:
    """Nodes keyed by identity and a duplicate-free edge sequence."""

    nodes: Mapping[Identity, TrustNode] = field(default_factory=lambda: MappingProxyType({}))
    edges: tuple[TrustEdge, ...] = ()

    @classmethod
    def assemble(
        cls,
        nodes: Mapping[Identity, TrustNode],
        edges: Iterable[TrustEdge],
    ) -> TrustGraph:
        """Build a graph, dropping duplicate edges and deriving children."""
        unique = tuple(dict.fromkeys(edges))

        by_source: dict[Identity, list[Identity]] = {}
        for edge in unique:
            if edge.target in nodes:
                by_source.setdefault(edge.source, []).append(edge.target)

        rebuilt: dict[Identity, TrustNode] = {}
        for node_id, node in nodes.items():
            children = tuple(by_source.get(node_id, ()))
            rebuilt[node_id] = node if node.children == children else replace(node, children=children)

        return cls(nodes=MappingProxyType(rebuilt), edges=unique)

    @classmethod
    def empty(cls) -> TrustGraph:
        return cls()

    @property
    def edge_set(self) -> frozenset[TrustEdge]:
        return frozenset(self.edges)

    def has_edge(self, source: Identity, target: Identity) -> bool:
        return TrustEdge(source, target) in self.edge_set

    def children_of(self, node_id: Identity) -> list[TrustNode]:
        """Child nodes of ``node_id``; empty if the node is unknown."""
        node = self.nodes.get(node_id)
        if node is None:
            return []
        return [self.nodes[child] for child in node.children]

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.nodes

    def __len__(self) -> int:
        return len(self.nodes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": {node_id: node.to_dict() for node_id, node in self.nodes.items()},
            "edges": [edge.to_list() for edge in self.edges],
        }
