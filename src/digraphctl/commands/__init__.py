"""Subcommand modules for digraphctl.

Provides register_commands(), which uses deferred imports to keep
``digraphctl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the standalone commands on the root CLI group."""
    from digraphctl.commands.build import build
    from digraphctl.commands.cycles import cycles
    from digraphctl.commands.filter import filter_cmd

    cli.add_command(build)
    cli.add_command(filter_cmd)
    cli.add_command(cycles)
