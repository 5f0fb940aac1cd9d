"""Root CLI group for digraphctl with global flags and command registration."""

from __future__ import annotations

import click

from digraphctl import __version__
from digraphctl.commands import register_commands
from digraphctl.commands._base import DigraphGroup
from digraphctl.commands._context import AppContext
from digraphctl.config.logging import configure_logging
from digraphctl.config.settings import DigraphSettings

_CLI_EXAMPLES = """\
  digraphctl build declarations.json --format mermaid
  digraphctl build declarations.json -e AppComponent -o out/graph.json
  digraphctl filter out/graph.json -e UserService -d upstream
  digraphctl --json cycles declarations.json --unique"""


@click.group(cls=DigraphGroup, examples=_CLI_EXAMPLES, invoke_without_command=True)
@click.version_option(version=__version__, prog_name="digraphctl")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """digraphctl — dependency-injection graph builder and filter."""
    ctx.ensure_object(dict)
    # Settings loading may log; route it to stderr before anything is read.
    configure_logging(verbose=verbose, log_json=log_json)
    settings = DigraphSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
