"""Shared Click options for the graph-producing commands."""

from __future__ import annotations

from collections.abc import Callable
from typing import ParamSpec, TypeVar

import click

from digraphctl.domain.types import Direction
from digraphctl.services.formats import GRAPH_FORMATS

P = ParamSpec("P")
R = TypeVar("R")


def graph_output_options(func: Callable[P, R]) -> Callable[P, R]:
    """Apply the format, entry, direction and output flags to a command."""
    func = click.option(
        "-o",
        "--out",
        type=click.Path(dir_okay=False),
        default=None,
        help="Output file (omit to print to stdout).",
    )(func)
    func = click.option(
        "-d",
        "--direction",
        type=click.Choice([d.value for d in Direction], case_sensitive=False),
        default=None,
        help="Traversal direction from the entry points [default: downstream].",
    )(func)
    func = click.option(
        "-e",
        "--entry",
        "entries",
        multiple=True,
        help="Entry point node id (repeatable). Omit to keep the whole graph.",
    )(func)
    func = click.option(
        "-f",
        "--format",
        "fmt",
        type=click.Choice(list(GRAPH_FORMATS), case_sensitive=False),
        default=None,
        help="Graph output format [default: json].",
    )(func)
    return func
