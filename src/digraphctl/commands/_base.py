"""Click base classes with an on-demand ``--examples`` flag.

``--help`` stays short and ends with a one-line hint; the examples
themselves are printed only when ``--examples`` is passed.
"""

from __future__ import annotations

from typing import Any

import click

_EXAMPLES_HINT = "Run with --examples for usage examples."


def _show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    if not value or ctx.resilient_parsing:
        return
    examples = getattr(ctx.command, "examples", None) or ""
    click.echo(f"Examples for '{ctx.command_path}':\n")
    click.echo(examples)
    ctx.exit(0)


class _ExamplesMixin:
    """Adds ``examples`` support to a Click Command or Group."""

    examples: str | None

    def _init_examples(self, examples: str | None) -> None:
        self.examples = examples
        if not examples:
            return
        command: click.Command = self  # type: ignore[assignment]
        command.params.append(
            click.Option(
                ["--examples"],
                is_flag=True,
                expose_value=False,
                is_eager=True,
                callback=_show_examples,
                help="Show usage examples.",
            )
        )
        if not command.epilog:
            command.epilog = _EXAMPLES_HINT


class DigraphCommand(_ExamplesMixin, click.Command):
    """Click Command that accepts ``examples=``."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)


class DigraphGroup(_ExamplesMixin, click.Group):
    """Click Group that accepts ``examples=``.

    Subcommands registered through ``@group.command`` are DigraphCommands.
    """

    command_class = DigraphCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)
