"""Tests for structlog configuration."""

from __future__ import annotations

import io
import json
import logging
from collections.abc import Generator

import pytest
import structlog

from digraphctl.config.logging import HANDLER_NAME, configure_logging


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root logger state after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    app = logging.getLogger("digraphctl")
    app_level = app.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    app.setLevel(app_level)


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True, log_json=False)
        assert logging.getLogger("digraphctl").level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_non_verbose_sets_warning(self) -> None:
        configure_logging(verbose=False, log_json=False)
        assert logging.getLogger("digraphctl").level == logging.WARNING

    def test_repeated_calls_do_not_stack_handlers(self) -> None:
        configure_logging(verbose=False)
        configure_logging(verbose=True)
        names = [h.get_name() for h in logging.getLogger().handlers]
        assert names.count(HANDLER_NAME) == 1

    def test_explicit_stream(self) -> None:
        buffer = io.StringIO()
        configure_logging(verbose=True, log_json=True, stream=buffer)
        structlog.get_logger("digraphctl.test").debug("to buffer", n=1)
        parsed = json.loads(buffer.getvalue())
        assert parsed["event"] == "to buffer"
        assert parsed["level"] == "debug"

    def test_json_mode_output(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        log = structlog.get_logger("digraphctl.test")
        log.warning("json test", answer=42)
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "json test"
        assert parsed["answer"] == 42
        assert parsed["level"] == "warning"
        assert parsed["logger"] == "digraphctl.test"
        assert "timestamp" in parsed

    def test_domain_debug_events_when_verbose(self, capfd: pytest.CaptureFixture[str]) -> None:
        from digraphctl.domain.builder import build_graph

        configure_logging(verbose=True, log_json=True)
        build_graph([{"name": "A", "kind": "service", "dependencies": [{"token": "B"}]}])
        events = [json.loads(line)["event"] for line in capfd.readouterr().err.splitlines()]
        assert events == ["graph.build.start", "graph.build.unknown_node", "graph.build.complete"]

    def test_quiet_by_default(self, capfd: pytest.CaptureFixture[str]) -> None:
        from digraphctl.domain.builder import build_graph

        configure_logging(verbose=False, log_json=True)
        build_graph([{"name": "A", "kind": "service", "dependencies": []}])
        assert capfd.readouterr().err == ""
