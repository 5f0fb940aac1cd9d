"""GraphService — build, filter, render, and inspect dependency graphs.

Wraps the pure domain functions with document decoding, telemetry spans and
the ServiceResult contract.  Domain failures never escape as exceptions:
they come back as ``ok=False`` results with one of these codes:

- ``INVALID_DOCUMENT``: input is not a usable declaration/graph document
- ``INVALID_INPUT``: a declaration record violates the extractor contract
- ``INVALID_DIRECTION``: unknown traversal direction
- ``INVALID_FORMAT``: unknown output format
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from typing import Any

import structlog

from digraphctl.domain.builder import DeclarationError, build_graph
from digraphctl.domain.cycles import unique_cycles
from digraphctl.domain.filtering import InvalidDirectionError, filter_graph, missing_entries
from digraphctl.domain.types import Direction, Graph
from digraphctl.infrastructure.filesystem import (
    DocumentError,
    declarations_from_document,
    graph_from_document,
)
from digraphctl.services.formats import GRAPH_FORMATS, format_graph
from digraphctl.services.result import ServiceResult
from digraphctl.services.telemetry import annotate_graph, trace_span, traced

log = structlog.get_logger(__name__)


class _Failure(Exception):
    """Internal short-circuit carrying the failed ServiceResult."""

    def __init__(self, result: ServiceResult) -> None:
        super().__init__(result.error.message if result.error else result.op)
        self.result = result


def _failed(failure: _Failure) -> ServiceResult:
    result = failure.result
    log.debug(
        "graph.service.failed",
        op=result.op,
        code=result.error.code if result.error else None,
        cause=type(failure.__cause__).__name__ if failure.__cause__ else None,
    )
    return result


def _strip_flags(records: list[Any]) -> list[Any]:
    """Copy *records* without dependency flags.

    Malformed records are passed through untouched so that the builder
    reports them.
    """
    stripped: list[Any] = []
    for record in records:
        deps = record.get("dependencies") if isinstance(record, dict) else None
        if not isinstance(deps, list):
            stripped.append(record)
            continue
        clean = [
            {k: v for k, v in dep.items() if k != "flags"} if isinstance(dep, dict) else dep
            for dep in deps
        ]
        stripped.append({**record, "dependencies": clean})
    return stripped


class GraphService:
    """Graph operations over decoded JSON documents.

    Args:
        include_decorators: Keep dependency flags (``optional``, ``self``,
            ``skipSelf``, ``host``) on edges.  When False they are removed
            before the graph is built.
    """

    def __init__(self, *, include_decorators: bool = True) -> None:
        self._include_decorators = include_decorators

    # ------------------------------------------------------------------
    # Shared helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _check_format(op: str, fmt: str) -> None:
        if fmt not in GRAPH_FORMATS:
            raise _Failure(
                ServiceResult.failure(
                    op,
                    "INVALID_FORMAT",
                    f"Unknown graph format: {fmt}",
                    format=fmt,
                    valid=list(GRAPH_FORMATS),
                )
            )

    def _build(self, op: str, document: Any) -> Graph:
        try:
            records = declarations_from_document(document)
        except DocumentError as exc:
            raise _Failure(ServiceResult.failure(op, "INVALID_DOCUMENT", str(exc))) from exc
        if not self._include_decorators:
            records = _strip_flags(records)

        with trace_span("build_graph") as span:
            try:
                graph = build_graph(records)
            except DeclarationError as exc:
                detail = {} if exc.index is None else {"index": exc.index}
                raise _Failure(
                    ServiceResult.failure(op, "INVALID_INPUT", str(exc), **detail)
                ) from exc
            if span:
                span.annotate("declarations", len(records))
            annotate_graph(span, graph)
        return graph

    @staticmethod
    def _filter(
        op: str, graph: Graph, entries: Sequence[str] | None, direction: str
    ) -> tuple[Graph, list[str]]:
        warnings = [
            f"Entry point '{entry}' not found in graph"
            for entry in missing_entries(graph, entries)
        ]
        with trace_span("filter_graph") as span:
            try:
                filtered = filter_graph(graph, entries, direction)
            except InvalidDirectionError as exc:
                raise _Failure(
                    ServiceResult.failure(
                        op,
                        "INVALID_DIRECTION",
                        str(exc),
                        direction=str(direction),
                        valid=[d.value for d in Direction],
                    )
                ) from exc
            annotate_graph(span, filtered)
        return filtered, warnings

    @staticmethod
    def _render(op: str, graph: Graph, fmt: str, warnings: list[str]) -> ServiceResult:
        with trace_span("format_graph") as span:
            content = format_graph(graph, fmt)
            if span:
                span.annotate("bytes", len(content))
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "format": fmt,
                "content": content,
                "node_count": len(graph.nodes),
                "edge_count": len(graph.edges),
                "cycle_count": len(graph.circular_dependencies),
                "kinds": dict(sorted(Counter(node.kind for node in graph.nodes).items())),
            },
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # render: declarations -> (filtered) graph -> text
    # ------------------------------------------------------------------

    @traced
    def render(
        self,
        document: Any,
        *,
        fmt: str = "json",
        entries: Sequence[str] | None = None,
        direction: str = Direction.DOWNSTREAM,
        unique: bool = False,
    ) -> ServiceResult:
        """Build a graph from a declaration document and render it.

        Args:
            document: Decoded declaration document.
            fmt: ``json`` or ``mermaid``.
            entries: Entry points; empty keeps the whole graph.
            direction: ``downstream``, ``upstream`` or ``both``.
            unique: Collapse repeated cycle reports before rendering.
        """
        op = "render_graph"
        try:
            self._check_format(op, fmt)
            graph = self._build(op, document)
            if unique:
                graph = graph.model_copy(
                    update={"circular_dependencies": unique_cycles(graph.circular_dependencies)}
                )
            graph, warnings = self._filter(op, graph, entries, direction)
        except _Failure as failure:
            return _failed(failure)

        return self._render(op, graph, fmt, warnings)

    # ------------------------------------------------------------------
    # filter: existing graph document -> sub-graph -> text
    # ------------------------------------------------------------------

    @traced
    def filter_document(
        self,
        document: Any,
        *,
        fmt: str = "json",
        entries: Sequence[str] | None = None,
        direction: str = Direction.DOWNSTREAM,
    ) -> ServiceResult:
        """Filter a previously built graph document and render the result."""
        op = "filter_graph"
        try:
            self._check_format(op, fmt)
            try:
                graph = graph_from_document(document)
            except DocumentError as exc:
                raise _Failure(ServiceResult.failure(op, "INVALID_DOCUMENT", str(exc))) from exc
            graph, warnings = self._filter(op, graph, entries, direction)
        except _Failure as failure:
            return _failed(failure)

        return self._render(op, graph, fmt, warnings)

    # ------------------------------------------------------------------
    # cycles: list detected circular dependencies
    # ------------------------------------------------------------------

    @traced
    def cycles(self, document: Any, *, unique: bool = False) -> ServiceResult:
        """List the cycles of the graph built from a declaration document.

        Args:
            document: Decoded declaration document.
            unique: Collapse repeated reports of the same cycle.
        """
        op = "cycles"
        try:
            graph = self._build(op, document)
        except _Failure as failure:
            return _failed(failure)

        found = graph.circular_dependencies
        if unique:
            found = unique_cycles(found)

        items = [
            {"index": i, "path": cycle, "length": max(len(cycle) - 1, 1)}
            for i, cycle in enumerate(found)
        ]
        circular_edges = [
            {"from": edge.from_, "to": edge.to} for edge in graph.edges if edge.is_circular
        ]
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "count": len(items),
                "items": items,
                "circular_edges": circular_edges,
            },
        )
