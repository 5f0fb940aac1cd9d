"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides document loading and centralized result
emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from digraphctl.infrastructure.filesystem import (
    DocumentError,
    parse_document,
    read_document,
    write_output,
)
from digraphctl.output.formatters import OutputSettings, format_result
from digraphctl.output.renderers import render_telemetry
from digraphctl.services.result import ServiceResult

if TYPE_CHECKING:
    from digraphctl.config.settings import DigraphSettings


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Subcommands access it via ``@click.pass_obj``.
    """

    def __init__(self, settings: DigraphSettings) -> None:
        self.settings = settings

        from digraphctl.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from digraphctl.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def output_settings(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )

    def load_document(self, source: str, *, op: str) -> Any:
        """Read and decode the JSON document at *source* (``-`` is stdin).

        An unreadable or malformed document is emitted as an
        ``INVALID_DOCUMENT`` failure for *op*, which exits with code 1.
        """
        try:
            if source == "-":
                text = click.get_text_stream("stdin").read()
                return parse_document(text, source="<stdin>")
            return read_document(Path(source))
        except DocumentError as exc:
            self.emit(ServiceResult.failure(op, "INVALID_DOCUMENT", str(exc), source=source))
            raise SystemExit(1) from exc

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = self.output_settings
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                self._echo_warnings(result)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)

    def emit_graph(self, result: ServiceResult, out: str | None) -> None:
        """Deliver a rendered graph to *out*, or raw to stdout.

        With *out*, the file is written and a summary result (without the
        rendered content) is emitted.  Without it, the content goes to
        stdout untouched so it can be piped; warnings and the verbose
        performance summary go to stderr.
        """
        if not result.ok:
            self.emit(result)
            return

        content = result.data["content"]
        if out:
            try:
                write_output(Path(out), content)
            except DocumentError as exc:
                self.emit(ServiceResult.failure(result.op, "OUTPUT_ERROR", str(exc), path=out))
                return
            self.emit(result.without_data("content", output_file=out))
            return

        click.echo(content)
        self._echo_warnings(result)
        if self.settings.verbose:
            telemetry = render_telemetry(result)
            if telemetry:
                click.echo(telemetry, err=True)

    @staticmethod
    def _echo_warnings(result: ServiceResult) -> None:
        for warning in result.warnings:
            click.echo(f"WARNING: {warning}", err=True)
