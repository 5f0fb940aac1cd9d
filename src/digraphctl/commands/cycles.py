"""cycles — list the circular dependencies among extracted declarations."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from digraphctl.commands._base import DigraphCommand
from digraphctl.services.graph import GraphService

if TYPE_CHECKING:
    from digraphctl.commands._context import AppContext

_CYCLES_EXAMPLES = """\
  digraphctl cycles declarations.json
  digraphctl cycles declarations.json --unique
  digraphctl --json cycles declarations.json
  digraphctl -q cycles declarations.json"""


@click.command(cls=DigraphCommand, examples=_CYCLES_EXAMPLES)
@click.argument("declarations", type=click.Path(dir_okay=False, allow_dash=True))
@click.option("--unique", is_flag=True, help="Report each cycle once.")
@click.pass_obj
def cycles(app: AppContext, declarations: str, unique: bool) -> None:
    """Detect circular dependencies in a declaration document."""
    document = app.load_document(declarations, op="cycles")
    unique = unique or app.settings.cycles.unique
    app.emit(GraphService(include_decorators=False).cycles(document, unique=unique))
