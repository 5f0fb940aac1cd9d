"""Tests for graph value types and their document serialization."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from digraphctl.domain.types import Direction, Edge, EdgeFlags, Graph, Node, NodeKind


class TestEnums:
    def test_node_kind_values(self) -> None:
        assert [k.value for k in NodeKind] == ["service", "component", "directive", "unknown"]

    def test_direction_values(self) -> None:
        assert Direction("upstream") is Direction.UPSTREAM
        assert Direction.BOTH == "both"


class TestEdge:
    def test_from_alias_and_attribute(self) -> None:
        edge = Edge.model_validate({"from": "A", "to": "B"})
        assert edge.from_ == "A"
        assert edge.pair == ("A", "B")

    def test_absent_flags_are_omitted(self) -> None:
        edge = Edge(from_="A", to="B")
        assert edge.model_dump(by_alias=True, exclude_none=True) == {"from": "A", "to": "B"}

    def test_empty_flags_are_kept(self) -> None:
        edge = Edge(from_="A", to="B", flags=EdgeFlags())
        assert edge.model_dump(by_alias=True, exclude_none=True) == {
            "from": "A",
            "to": "B",
            "flags": {},
        }

    def test_flag_aliases(self) -> None:
        flags = EdgeFlags.model_validate({"self": True, "skipSelf": False, "host": True})
        assert flags.self_ is True
        assert flags.skip_self is False
        assert flags.optional is None
        assert flags.model_dump(by_alias=True, exclude_none=True) == {
            "self": True,
            "skipSelf": False,
            "host": True,
        }

    @pytest.mark.parametrize(
        "raw",
        [{"optional": 1}, {"host": "yes"}, {"skipSelf": "true"}, {"inject": True}],
    )
    def test_flags_are_not_coerced(self, raw: dict[str, object]) -> None:
        with pytest.raises(ValidationError):
            EdgeFlags.model_validate(raw)

    def test_frozen(self) -> None:
        edge = Edge(from_="A", to="B")
        with pytest.raises(ValidationError):
            edge.to = "C"  # type: ignore[misc]


class TestGraph:
    def test_to_document_uses_camel_case(self) -> None:
        graph = Graph(
            nodes=[Node(id="A", kind="service")],
            edges=[Edge(from_="A", to="A", is_circular=True)],
            circular_dependencies=[["A", "A"]],
        )
        assert graph.to_document() == {
            "nodes": [{"id": "A", "kind": "service"}],
            "edges": [{"from": "A", "to": "A", "isCircular": True}],
            "circularDependencies": [["A", "A"]],
        }

    def test_document_validates_back(self) -> None:
        doc = {
            "nodes": [{"id": "A", "kind": "service"}, {"id": "B", "kind": "pipe"}],
            "edges": [{"from": "A", "to": "B", "flags": {}}],
            "circularDependencies": [],
        }
        graph = Graph.model_validate(doc)
        assert graph.nodes[1].kind == "pipe"
        assert graph.edges[0].flags == EdgeFlags()
        assert graph.to_document() == doc

    def test_empty_graph(self) -> None:
        assert Graph().to_document() == {"nodes": [], "edges": [], "circularDependencies": []}

    def test_lookups(self) -> None:
        graph = Graph(
            nodes=[Node(id="A", kind="service"), Node(id="B", kind="service")],
            edges=[Edge(from_="A", to="B")],
        )
        assert graph.node_ids() == {"A", "B"}
        assert graph.edge_pairs() == {("A", "B")}
