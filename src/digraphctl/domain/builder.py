"""Graph construction from extracted class declarations.

Pure function over already-extracted records: validates the whole input
up front, materializes nodes and edges (placeholder ``unknown`` nodes for
undeclared dependency targets), sorts them, and stamps cycle membership.
Either a complete Graph is returned or :class:`DeclarationError` is raised.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

import structlog
from pydantic import ValidationError

from digraphctl.domain.cycles import detect_cycles
from digraphctl.domain.types import DeclarationRecord, Edge, EdgeFlags, Graph, Node, NodeKind

log = structlog.get_logger(__name__)

_FLAGS_CONTRACT = "Dependency flags may only map optional, self, skipSelf or host to a boolean"


class DeclarationError(ValueError):
    """A declaration record violates the extractor contract."""

    def __init__(self, message: str, *, index: int | None = None) -> None:
        super().__init__(message)
        self.index = index


def _field(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def validate_declarations(declarations: Sequence[DeclarationRecord | Any] | None) -> None:
    """Check every record before anything is built.

    Raises:
        DeclarationError: On the first violated constraint.
    """
    if declarations is None:
        raise DeclarationError("declarations cannot be None")

    for i, record in enumerate(declarations):
        name = _field(record, "name")
        if not isinstance(name, str):
            raise DeclarationError("Declaration must have a valid name property", index=i)
        if not name.strip():
            raise DeclarationError("Declaration name cannot be empty", index=i)

        if not isinstance(_field(record, "kind"), str):
            raise DeclarationError("Declaration must have a valid kind property", index=i)

        dependencies = _field(record, "dependencies")
        if dependencies is None:
            raise DeclarationError("Declaration must have a dependencies array", index=i)
        if not isinstance(dependencies, (list, tuple)):
            raise DeclarationError("Declaration dependencies must be an array", index=i)

        for dependency in dependencies:
            if not isinstance(_field(dependency, "token"), str):
                raise DeclarationError("Dependency must have a valid token property", index=i)
            flags = _field(dependency, "flags")
            if flags is None or isinstance(flags, EdgeFlags):
                continue
            if not isinstance(flags, Mapping):
                raise DeclarationError("Dependency flags must be an object", index=i)
            try:
                EdgeFlags.model_validate(flags)
            except ValidationError as exc:
                raise DeclarationError(_FLAGS_CONTRACT, index=i) from exc


def _as_flags(raw: Any) -> EdgeFlags | None:
    if raw is None:
        return None
    if isinstance(raw, EdgeFlags):
        return raw
    return EdgeFlags.model_validate(raw)


def build_graph(declarations: Sequence[DeclarationRecord | Any] | None) -> Graph:
    """Build a validated, deterministically ordered dependency graph.

    The first declaration of a name decides the node's kind; later
    duplicates only contribute edges.  Edges keep the dependency's flags
    exactly as given and carry no ``flags`` at all when the dependency had
    none.
    """
    validate_declarations(declarations)
    assert declarations is not None
    log.debug("graph.build.start", declarations=len(declarations))

    node_map: dict[str, Node] = {}
    for record in declarations:
        name = _field(record, "name")
        if name not in node_map:
            node_map[name] = Node(id=name, kind=_field(record, "kind"))
    declared = len(node_map)

    pending: list[tuple[str, str, EdgeFlags | None]] = []
    for record in declarations:
        name = _field(record, "name")
        for dependency in _field(record, "dependencies"):
            token = _field(dependency, "token")
            if token not in node_map:
                node_map[token] = Node(id=token, kind=NodeKind.UNKNOWN)
                log.debug("graph.build.unknown_node", node_id=token, referenced_by=name)
            pending.append((name, token, _as_flags(_field(dependency, "flags"))))

    nodes = sorted(node_map.values(), key=lambda n: n.id)
    # Stable: duplicate (from, to) pairs keep declaration order.
    pending.sort(key=lambda e: (e[0], e[1]))

    report = detect_cycles((n.id for n in nodes), ((src, tgt) for src, tgt, _ in pending))
    if report.cycles:
        log.debug(
            "graph.build.cycles",
            count=len(report.cycles),
            circular_edges=len(report.circular_edges),
        )

    edges: list[Edge] = []
    for src, tgt, flags in pending:
        is_circular = True if (src, tgt) in report.circular_edges else None
        edges.append(Edge(from_=src, to=tgt, flags=flags, is_circular=is_circular))

    log.debug(
        "graph.build.complete",
        nodes=len(nodes),
        declared=declared,
        unknown=len(nodes) - declared,
        edges=len(edges),
    )
    return Graph(nodes=nodes, edges=edges, circular_dependencies=report.cycles)
