"""Reachability filtering of a built graph from a set of entry points.

``downstream`` keeps what the entries (transitively) depend on,
``upstream`` keeps what (transitively) depends on the entries, and ``both``
unions two independent one-directional traversals.  The input graph is
never mutated; element order is preserved and nothing is re-sorted.

Cycles survive filtering only when all of their ids were reached, their
shape is recognised, and each implied step is an edge of the unfiltered
graph.  Unknown entries and stale cycles are dropped, never raised.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from enum import StrEnum

import structlog

from digraphctl.domain.adjacency import AdjacencyIndex
from digraphctl.domain.types import Direction, Graph

log = structlog.get_logger(__name__)


class InvalidDirectionError(ValueError):
    """Direction is not one of ``downstream``, ``upstream``, ``both``."""

    def __init__(self, direction: object) -> None:
        valid = ", ".join(d.value for d in Direction)
        super().__init__(f"Invalid direction: {direction!r}. Must be one of: {valid}")
        self.direction = direction


class CycleShape(StrEnum):
    """Accepted textual shapes of a cycle sequence."""

    SELF_LOOP = "self_loop"  # [A, A]
    CLOSED = "closed"  # [A, B, C, A]
    OPEN = "open"  # [A, B, C], wraps C -> A


def parse_direction(direction: Direction | str | None) -> Direction:
    """Coerce *direction*, defaulting ``None`` to downstream.

    Raises:
        InvalidDirectionError: For any other value.
    """
    if direction is None:
        return Direction.DOWNSTREAM
    try:
        return Direction(direction)
    except ValueError:
        raise InvalidDirectionError(direction) from None


def classify_cycle(cycle: Sequence[str]) -> CycleShape | None:
    """Return the shape of *cycle*, or None if it is not a usable cycle."""
    if len(cycle) == 2 and cycle[0] == cycle[1]:
        return CycleShape.SELF_LOOP
    if len(cycle) >= 3:
        return CycleShape.CLOSED if cycle[0] == cycle[-1] else CycleShape.OPEN
    return None


def cycle_steps(cycle: Sequence[str], shape: CycleShape) -> list[tuple[str, str]]:
    """Return the ``(from, to)`` steps implied by *cycle* of the given *shape*."""
    steps = list(zip(cycle, cycle[1:], strict=False))
    if shape is CycleShape.OPEN:
        steps.append((cycle[-1], cycle[0]))
    return steps


def missing_entries(graph: Graph, entries: Iterable[str] | None) -> list[str]:
    """Return the entries that are not node ids of *graph*, in input order."""
    if not entries:
        return []
    node_ids = graph.node_ids()
    return [entry for entry in entries if entry not in node_ids]


def _flood(index: AdjacencyIndex, start: str, visited: set[str]) -> None:
    """Add everything reachable from *start* to *visited* (explicit stack)."""
    stack = [start]
    while stack:
        current = stack.pop()
        if current in visited:
            continue
        visited.add(current)
        stack.extend(n for n in index.neighbors(current) if n not in visited)


def reachable(
    graph: Graph, entries: Iterable[str], direction: Direction | str = Direction.DOWNSTREAM
) -> set[str]:
    """Return ids reachable from *entries* following *direction*.

    Entries that are not node ids of *graph* contribute nothing.
    """
    direction = parse_direction(direction)
    entries = list(entries)
    node_ids = graph.node_ids()

    if direction is Direction.BOTH:
        passes = [Direction.DOWNSTREAM, Direction.UPSTREAM]
    else:
        passes = [direction]

    result: set[str] = set()
    for one_way in passes:
        index = AdjacencyIndex.from_graph(graph, one_way)
        visited: set[str] = set()
        for entry in entries:
            if entry in node_ids:
                _flood(index, entry, visited)
        result |= visited
    return result


def _valid_cycle(
    cycle: Sequence[str], included: set[str], original_edges: set[tuple[str, str]]
) -> bool:
    shape = classify_cycle(cycle)
    if shape is None:
        return False
    if not all(node_id in included for node_id in cycle):
        return False
    return all(step in original_edges for step in cycle_steps(cycle, shape))


def filter_graph(
    graph: Graph,
    entries: Sequence[str] | None = None,
    direction: Direction | str | None = Direction.DOWNSTREAM,
) -> Graph:
    """Return the sub-graph reachable from *entries* in *direction*.

    With no entries the input graph itself is returned.

    Raises:
        InvalidDirectionError: If *direction* is not a known direction.
    """
    if not entries:
        return graph
    resolved = parse_direction(direction)

    for entry in missing_entries(graph, entries):
        log.info("graph.filter.entry_missing", entry=entry)

    # Edge endpoints missing from ``nodes`` can be traversed but never kept.
    included = reachable(graph, entries, resolved) & graph.node_ids()
    original_edges = graph.edge_pairs()

    nodes = [node for node in graph.nodes if node.id in included]
    edges = [edge for edge in graph.edges if edge.from_ in included and edge.to in included]
    cycles = [
        list(cycle)
        for cycle in graph.circular_dependencies
        if _valid_cycle(cycle, included, original_edges)
    ]

    log.debug(
        "graph.filter.complete",
        direction=resolved.value,
        entries=list(entries),
        nodes=len(nodes),
        edges=len(edges),
        cycles=len(cycles),
    )
    return Graph(nodes=nodes, edges=edges, circular_dependencies=cycles)
