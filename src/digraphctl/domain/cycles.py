"""Cycle detection — three-colour DFS over an AdjacencyIndex.

The traversal keeps its own frame stack instead of recursing, so long
dependency chains never hit the interpreter's recursion limit.  Gray
("on the current path") and black ("fully processed") states live in two
index-keyed sets; the current path is a list plus a position map.

Every re-entry into the current path reports one cycle.  A cycle reachable
along several distinct paths is therefore reported more than once; that is
the detector's contract.  Use :func:`unique_cycles` to collapse repeats.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field

from digraphctl.domain.adjacency import AdjacencyIndex
from digraphctl.domain.types import Direction

_DONE = -1


@dataclass(frozen=True)
class CycleReport:
    """Cycles in discovery order and every edge that lies on one of them."""

    cycles: list[list[str]] = field(default_factory=list)
    circular_edges: set[tuple[str, str]] = field(default_factory=set)


def detect_cycles(node_ids: Iterable[str], edges: Iterable[tuple[str, str]]) -> CycleReport:
    """Find cycles in the graph given by *node_ids* and ``(from, to)`` *edges*.

    DFS roots are taken in *node_ids* order and neighbours are expanded in
    edge order.  A found cycle is the path slice starting at the revisited
    node, closed by appending that node again (``[A, B, A]``; a self-loop is
    ``[A, A]``).
    """
    node_ids = list(node_ids)
    index = AdjacencyIndex(node_ids, edges, Direction.DOWNSTREAM)

    cycles: list[list[str]] = []
    circular_edges: set[tuple[str, str]] = set()

    on_path: dict[int, int] = {}  # gray: node index -> position in path
    processed: set[int] = set()  # black
    path: list[int] = []
    frames: list[tuple[int, Iterator[int]]] = []

    def enter(node: int) -> None:
        on_path[node] = len(path)
        path.append(node)
        frames.append((node, iter(index.neighbor_indices(node))))

    def record(node: int) -> None:
        members = [index.id_of(i) for i in path[on_path[node] :]]
        members.append(index.id_of(node))
        cycles.append(members)
        for step in zip(members, members[1:], strict=False):
            circular_edges.add(step)

    for root_id in node_ids:
        root = index.index_of(root_id)
        if root is None or root in processed:
            continue
        enter(root)
        while frames:
            node, neighbors = frames[-1]
            nxt = next(neighbors, _DONE)
            if nxt == _DONE:
                frames.pop()
                path.pop()
                del on_path[node]
                processed.add(node)
            elif nxt in processed:
                continue
            elif nxt in on_path:
                record(nxt)
            else:
                enter(nxt)

    return CycleReport(cycles=cycles, circular_edges=circular_edges)


def _canonical(cycle: Sequence[str]) -> tuple[str, ...]:
    """Rotation-independent key for the body of *cycle* (closing id dropped)."""
    body = list(cycle)
    if len(body) >= 2 and body[0] == body[-1]:
        body = body[:-1]
    if not body:
        return ()
    return min(tuple(body[i:] + body[:i]) for i in range(len(body)))


def unique_cycles(cycles: Iterable[Sequence[str]]) -> list[list[str]]:
    """Drop repeated cycles, keeping each first occurrence in its original shape.

    ``[A, B, A]`` and ``[B, A, B]`` describe the same cycle; so do the closed
    ``[A, B, C, A]`` and the open ``[B, C, A]``.
    """
    seen: set[tuple[str, ...]] = set()
    result: list[list[str]] = []
    for cycle in cycles:
        key = _canonical(cycle)
        if key in seen:
            continue
        seen.add(key)
        result.append(list(cycle))
    return result
