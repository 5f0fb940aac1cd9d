"""Tests for AdjacencyIndex."""

from __future__ import annotations

import pytest

from digraphctl.domain.adjacency import AdjacencyIndex
from digraphctl.domain.types import Direction, Edge, Graph, Node

EDGES = [("A", "B"), ("A", "C"), ("B", "C"), ("A", "B")]


class TestAdjacencyIndex:
    def test_downstream_keeps_edge_order_and_duplicates(self) -> None:
        index = AdjacencyIndex(["A", "B", "C"], EDGES)
        assert index.neighbors("A") == ["B", "C", "B"]
        assert index.neighbors("B") == ["C"]
        assert index.neighbors("C") == []

    def test_upstream_reverses_edges(self) -> None:
        index = AdjacencyIndex(["A", "B", "C"], EDGES, Direction.UPSTREAM)
        assert index.neighbors("C") == ["A", "B"]
        assert index.neighbors("B") == ["A", "A"]
        assert index.neighbors("A") == []

    def test_accepts_direction_strings(self) -> None:
        index = AdjacencyIndex(["A", "B"], [("A", "B")], "upstream")
        assert index.direction is Direction.UPSTREAM

    def test_both_is_rejected(self) -> None:
        with pytest.raises(ValueError, match="single direction"):
            AdjacencyIndex(["A"], [], Direction.BOTH)

    def test_unknown_direction_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            AdjacencyIndex(["A"], [], "sideways")

    def test_indices_follow_declaration_order(self) -> None:
        index = AdjacencyIndex(["B", "A"], [("A", "B")])
        assert index.index_of("B") == 0
        assert index.index_of("A") == 1
        assert index.id_of(1) == "A"
        assert index.neighbor_indices(1) == [0]
        assert index.ids == ["B", "A"]

    def test_unknown_endpoints_are_interned_last(self) -> None:
        index = AdjacencyIndex(["A"], [("A", "Ghost")])
        assert len(index) == 2
        assert "Ghost" in index
        assert index.index_of("Ghost") == 1
        assert index.neighbors("A") == ["Ghost"]

    def test_lookup_of_missing_id(self) -> None:
        index = AdjacencyIndex(["A"], [])
        assert "Z" not in index
        assert index.index_of("Z") is None
        assert index.neighbors("Z") == []

    def test_from_graph(self) -> None:
        graph = Graph(
            nodes=[Node(id="A", kind="service"), Node(id="B", kind="service")],
            edges=[Edge(from_="A", to="B")],
        )
        assert AdjacencyIndex.from_graph(graph).neighbors("A") == ["B"]
        assert AdjacencyIndex.from_graph(graph, "upstream").neighbors("B") == ["A"]
