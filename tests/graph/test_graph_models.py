"""Tests for TrustGraph, TrustNode and TrustEdge."""

from __future__ import annotations

import pytest

from linkoftrust.graph.models import TrustEdge, TrustGraph, TrustNode


class TestAssemble:
    """Tests for TrustGraph.assemble."""

    def test_duplicate_edges_dropped(self):
        graph = TrustGraph.assemble(
            {"A": TrustNode("A"), "B": TrustNode("B")},
            [TrustEdge("A", "B"), TrustEdge("A", "B")],
        )
        assert graph.edges == (TrustEdge("A", "B"),)

    def test_children_follow_edge_order(self):
        nodes = {name: TrustNode(name) for name in ("A", "B", "C")}
        graph = TrustGraph.assemble(nodes, [TrustEdge("A", "C"), TrustEdge("A", "B")])
        assert graph.nodes["A"].children == ("C", "B")

    def test_stale_children_replaced(self):
        nodes = {"A": TrustNode("A", children=("gone",)), "B": TrustNode("B")}
        graph = TrustGraph.assemble(nodes, [TrustEdge("A", "B")])
        assert graph.nodes["A"].children == ("B",)

    def test_children_only_known_nodes(self):
        graph = TrustGraph.assemble({"A": TrustNode("A")}, [TrustEdge("A", "B")])
        assert graph.nodes["A"].children == ()
        assert graph.has_edge("A", "B")


class TestTrustGraph:
    """Tests for graph accessors and serialization."""

    def test_empty(self):
        graph = TrustGraph.empty()
        assert len(graph) == 0
        assert graph.edges == ()
        assert graph.edge_set == frozenset()

    def test_contains(self):
        graph = TrustGraph.assemble({"A": TrustNode("A")}, [])
        assert "A" in graph
        assert "B" not in graph

    def test_children_of(self):
        graph = TrustGraph.assemble(
            {"A": TrustNode("A"), "B": TrustNode("B", profile="b")},
            [TrustEdge("A", "B")],
        )
        assert [node.profile for node in graph.children_of("A")] == ["b"]
        assert graph.children_of("B") == []
        assert graph.children_of("missing") == []

    def test_to_dict(self):
        graph = TrustGraph.assemble(
            {"A": TrustNode("A", profile="a", is_main_node=True), "B": TrustNode("B", partial=True)},
            [TrustEdge("A", "B")],
        )

        data = graph.to_dict()

        assert data["edges"] == [["A", "B"]]
        assert data["nodes"]["A"] == {
            "id": "A",
            "profile": "a",
            "is_main_node": True,
            "is_selected": False,
            "partial": False,
            "children": ["B"],
        }
        assert data["nodes"]["B"]["partial"] is True

    def test_equality_by_value(self):
        first = TrustGraph.assemble({"A": TrustNode("A")}, [TrustEdge("A", "A")])
        second = TrustGraph.assemble({"A": TrustNode("A")}, [TrustEdge("A", "A")])
        assert first == second

    def test_nodes_read_only(self):
        graph = TrustGraph.assemble({"A": TrustNode("A")}, [])

        with pytest.raises(TypeError):
            graph.nodes["B"] = TrustNode("B")
        with pytest.raises(TypeError):
            TrustGraph.empty().nodes["A"] = TrustNode("A")

        assert list(graph.nodes) == ["A"]

    def test_assemble_copies_input(self):
        nodes = {"A": TrustNode("A")}
        graph = TrustGraph.assemble(nodes, [])

        nodes["B"] = TrustNode("B")

        assert "B" not in graph
