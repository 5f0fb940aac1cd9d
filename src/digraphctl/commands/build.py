"""build — turn extracted declarations into a rendered dependency graph."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from digraphctl.commands._base import DigraphCommand
from digraphctl.commands._options import graph_output_options
from digraphctl.services.graph import GraphService

if TYPE_CHECKING:
    from digraphctl.commands._context import AppContext

_BUILD_EXAMPLES = """\
  digraphctl build declarations.json
  digraphctl build declarations.json --format mermaid
  digraphctl build declarations.json -e AppComponent -d downstream
  digraphctl build declarations.json -e UserService -d upstream -o graph.json
  extract-declarations src/ | digraphctl build - --include-decorators"""


@click.command(cls=DigraphCommand, examples=_BUILD_EXAMPLES)
@click.argument("declarations", type=click.Path(dir_okay=False, allow_dash=True))
@graph_output_options
@click.option(
    "--include-decorators",
    is_flag=True,
    help="Keep dependency flags (optional, self, skipSelf, host) on edges.",
)
@click.option(
    "--unique-cycles",
    is_flag=True,
    help="Report each circular dependency once.",
)
@click.pass_obj
def build(
    app: AppContext,
    declarations: str,
    fmt: str | None,
    entries: tuple[str, ...],
    direction: str | None,
    out: str | None,
    include_decorators: bool,
    unique_cycles: bool,
) -> None:
    """Build the dependency graph from a declaration document."""
    cfg = app.settings
    document = app.load_document(declarations, op="render_graph")
    service = GraphService(include_decorators=include_decorators or cfg.output.include_decorators)
    result = service.render(
        document,
        fmt=(fmt or cfg.output.format).lower(),
        entries=list(entries) or cfg.filter.entries,
        direction=(direction or cfg.filter.direction).lower(),
        unique=unique_cycles or cfg.cycles.unique,
    )
    app.emit_graph(result, out)
