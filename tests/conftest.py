"""Shared pytest fixtures for digraphctl tests."""

from __future__ import annotations

import json
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from digraphctl.services.telemetry import _current_span, disable_telemetry


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _isolate_environment(
    tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch
) -> Generator[None]:
    """Keep stray digraphctl.toml files and DIGRAPHCTL_* variables out of tests."""
    monkeypatch.chdir(tmp_path_factory.mktemp("cwd"))
    for name in [
        "DIGRAPHCTL_CONFIG",
        "DIGRAPHCTL_JSON_OUTPUT",
        "DIGRAPHCTL_QUIET",
        "DIGRAPHCTL_VERBOSE",
        "DIGRAPHCTL_LOG_JSON",
    ]:
        monkeypatch.delenv(name, raising=False)
    yield
    disable_telemetry()
    _current_span.set(None)


@pytest.fixture
def declarations() -> list[dict[str, Any]]:
    """A small application: a component, two services, one undeclared token."""
    return [
        {
            "name": "AppComponent",
            "kind": "component",
            "dependencies": [{"token": "UserService"}, {"token": "Logger"}],
        },
        {
            "name": "UserService",
            "kind": "service",
            "dependencies": [
                {"token": "HttpClient", "flags": {"optional": True}},
                {"token": "AuthService"},
            ],
        },
        {
            "name": "AuthService",
            "kind": "service",
            "dependencies": [{"token": "UserService", "flags": {}}],
        },
        {"name": "Logger", "kind": "service", "dependencies": []},
    ]


@pytest.fixture
def declarations_file(tmp_path: Path, declarations: list[dict[str, Any]]) -> Path:
    path = tmp_path / "declarations.json"
    path.write_text(json.dumps(declarations), encoding="utf-8")
    return path

