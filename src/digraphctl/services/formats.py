"""Graph renderers — JSON document and Mermaid flowchart.

Both take a built (or filtered) :class:`Graph` and return text; neither
reorders anything.
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable

from digraphctl.domain.types import Graph

_DOT_DASH = re.compile(r"[.-]")
_NON_WORD = re.compile(r"[^a-zA-Z0-9_]")


def to_json(graph: Graph) -> str:
    """Pretty-print the graph document with two-space indentation."""
    return json.dumps(graph.to_document(), indent=2, ensure_ascii=False)


def sanitize_mermaid_id(node_id: str) -> str:
    """Make *node_id* safe as a Mermaid node identifier."""
    return _NON_WORD.sub("", _DOT_DASH.sub("_", node_id))


def _closed_walk(cycle: list[str]) -> list[str]:
    if len(cycle) >= 2 and cycle[0] == cycle[-1]:
        return cycle
    return [*cycle, cycle[0]] if cycle else cycle


def to_mermaid(graph: Graph) -> str:
    """Render a ``flowchart LR``; circular edges are dotted and labelled."""
    if not graph.nodes:
        return "flowchart LR\n  %% Empty graph - no nodes to display"

    lines = ["flowchart LR"]
    for edge in graph.edges:
        src = sanitize_mermaid_id(edge.from_)
        tgt = sanitize_mermaid_id(edge.to)
        if edge.is_circular:
            lines.append(f"  {src} -.->|circular| {tgt}")
        else:
            lines.append(f"  {src} --> {tgt}")

    if graph.circular_dependencies:
        lines.append("")
        lines.append("  %% Circular Dependencies Detected:")
        for cycle in graph.circular_dependencies:
            lines.append(f"  %% {' -> '.join(_closed_walk(cycle))}")

    return "\n".join(lines)


GRAPH_FORMATS: dict[str, Callable[[Graph], str]] = {
    "json": to_json,
    "mermaid": to_mermaid,
}


def format_graph(graph: Graph, fmt: str) -> str:
    """Render *graph* in the named format.

    Raises:
        ValueError: If *fmt* is not a known format.
    """
    renderer = GRAPH_FORMATS.get(fmt)
    if renderer is None:
        valid = ", ".join(GRAPH_FORMATS)
        msg = f"Unknown graph format: {fmt!r} (expected one of: {valid})"
        raise ValueError(msg)
    return renderer(graph)
