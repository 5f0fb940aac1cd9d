"""structlog configuration for digraphctl.

Two output modes, both on stderr (stdout is reserved for rendered graphs):
- Human (default): console renderer, colored on a TTY
- JSON (--log-json): one JSON object per line

Only the ``digraphctl`` logger tree is raised to DEBUG by ``--verbose``;
third-party loggers stay at WARNING.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog

HANDLER_NAME = "digraphctl.stderr"


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _final_processors(*, log_json: bool, stream: TextIO) -> list[structlog.types.Processor]:
    if log_json:
        return [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(colors=stream.isatty())]


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    stream: TextIO | None = None,
) -> None:
    """Configure structlog processors and output routing.

    Safe to call repeatedly: the previously installed digraphctl handler is
    replaced, other root handlers are left alone.

    Args:
        verbose: Enable DEBUG-level output for digraphctl loggers.
        log_json: Use the JSON renderer instead of the console renderer.
        stream: Target stream (default: the current ``sys.stderr``).
    """
    stream = stream or sys.stderr
    shared = _shared_processors()

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            *_final_processors(log_json=log_json, stream=stream),
        ],
    )

    handler = logging.StreamHandler(stream)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    for existing in [h for h in root_logger.handlers if h.get_name() == HANDLER_NAME]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger("digraphctl").setLevel(logging.DEBUG if verbose else logging.WARNING)
