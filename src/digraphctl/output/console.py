"""Rich Console factory and theme for digraphctl output.

Consoles render into a StringIO buffer so renderers keep a plain
``-> str`` contract.  In non-TTY environments (tests, pipes) Rich drops
color codes on its own.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

DIGRAPH_THEME = Theme(
    {
        "dg.ok": "bold green",
        "dg.error": "bold red",
        "dg.warning": "bold yellow",
        "dg.op": "bold cyan",
        "dg.key": "dim",
        "dg.node": "bold blue",
        "dg.cycle": "magenta",
        "dg.path": "dim",
        "dg.kind.service": "green",
        "dg.kind.component": "blue",
        "dg.kind.directive": "yellow",
        "dg.kind.unknown": "dim",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes.
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=DIGRAPH_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_kind(kind: str) -> str:
    """Return the Rich style name for a node kind (empty for custom kinds)."""
    if kind in ("service", "component", "directive", "unknown"):
        return f"dg.kind.{kind}"
    return ""
