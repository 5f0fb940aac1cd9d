"""filter — scope a previously built graph document to its entry points."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from digraphctl.commands._base import DigraphCommand
from digraphctl.commands._options import graph_output_options
from digraphctl.services.graph import GraphService

if TYPE_CHECKING:
    from digraphctl.commands._context import AppContext

_FILTER_EXAMPLES = """\
  digraphctl filter graph.json -e AppComponent
  digraphctl filter graph.json -e UserService -d upstream --format mermaid
  digraphctl build declarations.json | digraphctl filter - -e AuthService -d both"""


@click.command("filter", cls=DigraphCommand, examples=_FILTER_EXAMPLES)
@click.argument("graph", type=click.Path(dir_okay=False, allow_dash=True))
@graph_output_options
@click.pass_obj
def filter_cmd(
    app: AppContext,
    graph: str,
    fmt: str | None,
    entries: tuple[str, ...],
    direction: str | None,
    out: str | None,
) -> None:
    """Filter a JSON graph document to the nodes reachable from entry points."""
    cfg = app.settings
    document = app.load_document(graph, op="filter_graph")
    result = GraphService().filter_document(
        document,
        fmt=(fmt or cfg.output.format).lower(),
        entries=list(entries) or cfg.filter.entries,
        direction=(direction or cfg.filter.direction).lower(),
    )
    app.emit_graph(result, out)
