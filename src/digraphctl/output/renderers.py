"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.markup import escape
from rich.table import Table
from rich.text import Text

from digraphctl.output.console import create_console, get_output, style_for_kind
from digraphctl.services.telemetry import flatten_spans

if TYPE_CHECKING:
    from rich.console import Console

    from digraphctl.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} - {msg}"

    # One cycle per line
    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(_cycle_text(item.get("path", [])) for item in items)

    return f"OK: {result.op}"


def render_telemetry(result: ServiceResult) -> str:
    """Render the span tree in ``result.meta`` as a performance table.

    Returns an empty string when the result carries no telemetry.
    """
    tree = (result.meta or {}).get("telemetry")
    if not tree:
        return ""

    table = Table(title="Performance Summary", show_header=True, pad_edge=False)
    table.add_column("Span")
    table.add_column("Duration", justify="right")
    for depth, name, duration in flatten_spans(tree):
        table.add_row(f"{'  ' * depth}{name}", f"[{_duration_style(duration)}]{duration:.2f}ms")

    console = create_console()
    console.print(table)
    return get_output(console).rstrip("\n")


# ── Helpers ───────────────────────────────────────────────────────────


def _cycle_text(path: list[str]) -> str:
    return " -> ".join(path)


def _duration_style(duration: float) -> str:
    if duration > 1000:
        return "bold red"
    if duration > 100:
        return "yellow"
    return "dim"


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK/ERROR status line."""
    console.print(Text.assemble(("OK", "dg.ok"), (f"  {result.op}", "dg.op")))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="dg.key")
    if key in ("output_file", "source"):
        v = Text(str(value), style="dg.path")
    elif key == "cycle_count" and value:
        v = Text(str(value), style="dg.cycle")
    else:
        v = Text(str(value))
    console.print(Text.assemble(k, v))


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including telemetry span tree (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))

    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_telemetry_tree(
    console: Console,
    span_data: dict[str, Any],
    indent: int = 4,
) -> None:
    """Render a hierarchical span tree with color-coded timing."""
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)
    style = _duration_style(duration)

    line = f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {name}"

    annotations = span_data.get("annotations") or {}
    if annotations:
        line += f"  ({', '.join(f'{k}={v}' for k, v in annotations.items())})"

    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(
        Text.assemble(("ERROR", "dg.error"), (f"  {result.op}", "dg.op"), " - ", msg)
    )

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Graph renderers ───────────────────────────────────────────────────


def _render_graph_summary(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    """Render build/filter summaries (the graph itself goes to a file or stdout)."""
    _status_line(console, result)
    d = result.data
    for key in ("output_file", "format", "node_count", "edge_count", "cycle_count"):
        if key in d:
            _field(console, key, d[key])

    kinds = d.get("kinds") or {}
    if kinds:
        parts: list[str] = []
        for kind, count in kinds.items():
            style = style_for_kind(kind)
            label = escape(kind)
            parts.append(f"[{style}]{label}[/{style}]={count}" if style else f"{label}={count}")
        console.print(Text("  kinds: ", style="dg.key"), end="")
        console.print(", ".join(parts))
    if verbose:
        _render_meta(console, result)


def _render_cycles(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render detected cycles as a table of paths."""
    items = result.data.get("items", [])

    if not items:
        console.print("No circular dependencies found.")
        if verbose:
            _render_meta(console, result)
        return

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Cycle", style="dg.cycle")
    table.add_column("Length", justify="right")
    for item in items:
        table.add_row(
            str(item.get("index", "")),
            Text(_cycle_text(item.get("path", []))),
            str(item.get("length", "")),
        )
    console.print(table)
    console.print(f"\nCycles: {result.data.get('count', len(items))}")

    if verbose:
        edges = result.data.get("circular_edges", [])
        if edges:
            console.print(Text("  circular edges:", style="dim"))
            for edge in edges:
                console.print(
                    Text.assemble(
                        "    ", (edge["from"], "dg.node"), " -> ", (edge["to"], "dg.node")
                    )
                )
        _render_meta(console, result)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "render_graph": _render_graph_summary,
    "filter_graph": _render_graph_summary,
    "cycles": _render_cycles,
}
