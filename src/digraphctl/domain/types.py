"""Graph value types and classification enums.

Nodes, edges and graphs are frozen Pydantic models serialized with the
camelCase keys of the graph document (``from``, ``isCircular``,
``circularDependencies``).  Optional fields default to ``None`` and are
dropped on dump, so an absent ``flags`` and an empty ``flags: {}`` survive a
round trip as two different things.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, NotRequired, TypedDict

from pydantic import BaseModel, Field, StrictBool


class NodeKind(StrEnum):
    """Kinds of injectable declarations."""

    SERVICE = "service"
    COMPONENT = "component"
    DIRECTIVE = "directive"
    UNKNOWN = "unknown"


class Direction(StrEnum):
    """Traversal direction relative to declared edge direction."""

    DOWNSTREAM = "downstream"
    UPSTREAM = "upstream"
    BOTH = "both"


# --- Extractor contract (raw input records) ---


class DependencyRecord(TypedDict):
    """One constructor dependency as produced by the declaration extractor."""

    token: str
    flags: NotRequired[dict[str, bool] | None]


class DeclarationRecord(TypedDict):
    """One decorated class as produced by the declaration extractor."""

    name: str
    kind: str
    dependencies: list[DependencyRecord]


# --- Graph document ---


class Node(BaseModel):
    """A declared class, or a dependency target that was never declared."""

    model_config = {"frozen": True, "populate_by_name": True}

    id: str
    kind: str


class EdgeFlags(BaseModel):
    """Injection modifiers attached to a dependency.  Passed through untouched.

    Values must already be booleans and unknown keys are rejected, so a
    flag is never coerced or dropped on its way through.
    """

    model_config = {"frozen": True, "populate_by_name": True, "extra": "forbid"}

    optional: StrictBool | None = None
    self_: StrictBool | None = Field(default=None, alias="self")
    skip_self: StrictBool | None = Field(default=None, alias="skipSelf")
    host: StrictBool | None = None


class Edge(BaseModel):
    """``from_`` depends on ``to``."""

    model_config = {"frozen": True, "populate_by_name": True}

    from_: str = Field(alias="from")
    to: str
    flags: EdgeFlags | None = None
    is_circular: bool | None = Field(default=None, alias="isCircular")

    @property
    def pair(self) -> tuple[str, str]:
        return (self.from_, self.to)


class Graph(BaseModel):
    """Nodes sorted by id, edges sorted by ``(from, to)``, plus detected cycles."""

    model_config = {"frozen": True, "populate_by_name": True}

    nodes: list[Node] = Field(default_factory=list)
    edges: list[Edge] = Field(default_factory=list)
    circular_dependencies: list[list[str]] = Field(
        default_factory=list, alias="circularDependencies"
    )

    def node_ids(self) -> set[str]:
        return {node.id for node in self.nodes}

    def edge_pairs(self) -> set[tuple[str, str]]:
        return {edge.pair for edge in self.edges}

    def to_document(self) -> dict[str, Any]:
        """Return the JSON-ready graph document."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
