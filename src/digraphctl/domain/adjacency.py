"""AdjacencyIndex — id-keyed neighbour lookup shared by cycle detection and filtering.

Ids are mapped to dense integer indices once per call; neighbour lists are
stored per index in edge order, duplicates included.  Pure, no I/O.
"""

from __future__ import annotations

from collections.abc import Iterable

from digraphctl.domain.types import Direction, Graph


class AdjacencyIndex:
    """Neighbour lists for one traversal direction.

    ``DOWNSTREAM`` follows ``from -> to``, ``UPSTREAM`` follows ``to -> from``.
    Edge endpoints that are not in *node_ids* are interned after the declared
    nodes so that traversal over a malformed graph still terminates.
    """

    def __init__(
        self,
        node_ids: Iterable[str],
        edges: Iterable[tuple[str, str]],
        direction: Direction | str = Direction.DOWNSTREAM,
    ) -> None:
        direction = Direction(direction)
        if direction is Direction.BOTH:
            msg = "AdjacencyIndex needs a single direction, not 'both'"
            raise ValueError(msg)
        self.direction = direction
        self._ids: list[str] = []
        self._index: dict[str, int] = {}
        self._neighbors: list[list[int]] = []

        for node_id in node_ids:
            self._intern(node_id)

        reverse = direction is Direction.UPSTREAM
        for source, target in edges:
            src = self._intern(source)
            tgt = self._intern(target)
            if reverse:
                self._neighbors[tgt].append(src)
            else:
                self._neighbors[src].append(tgt)

    @classmethod
    def from_graph(
        cls, graph: Graph, direction: Direction | str = Direction.DOWNSTREAM
    ) -> AdjacencyIndex:
        return cls(
            (node.id for node in graph.nodes),
            (edge.pair for edge in graph.edges),
            direction,
        )

    def _intern(self, node_id: str) -> int:
        idx = self._index.get(node_id)
        if idx is None:
            idx = len(self._ids)
            self._index[node_id] = idx
            self._ids.append(node_id)
            self._neighbors.append([])
        return idx

    def __len__(self) -> int:
        return len(self._ids)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._index

    @property
    def ids(self) -> list[str]:
        return list(self._ids)

    def index_of(self, node_id: str) -> int | None:
        return self._index.get(node_id)

    def id_of(self, index: int) -> str:
        return self._ids[index]

    def neighbor_indices(self, index: int) -> list[int]:
        return self._neighbors[index]

    def neighbors(self, node_id: str) -> list[str]:
        """Return neighbour ids of *node_id* in edge order (empty if unknown)."""
        idx = self._index.get(node_id)
        if idx is None:
            return []
        return [self._ids[n] for n in self._neighbors[idx]]
