"""Tests for the build command."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from digraphctl.cli import cli
from digraphctl.config.discovery import CONFIG_FILENAME


class TestBuildCommand:
    def test_json_to_stdout(self, cli_runner: CliRunner, declarations_file: Path) -> None:
        result = cli_runner.invoke(cli, ["build", str(declarations_file)])
        assert result.exit_code == 0
        doc = json.loads(result.stdout)
        assert len(doc["nodes"]) == 5
        assert doc["circularDependencies"] == [["UserService", "AuthService", "UserService"]]
        assert result.stderr == ""

    def test_flags_stripped_by_default(
        self, cli_runner: CliRunner, declarations_file: Path
    ) -> None:
        result = cli_runner.invoke(cli, ["build", str(declarations_file)])
        assert all("flags" not in e for e in json.loads(result.stdout)["edges"])

    def test_include_decorators(self, cli_runner: CliRunner, declarations_file: Path) -> None:
        result = cli_runner.invoke(cli, ["build", str(declarations_file), "--include-decorators"])
        edges = json.loads(result.stdout)["edges"]
        assert {"from": "UserService", "to": "HttpClient", "flags": {"optional": True}} in edges

    def test_mermaid(self, cli_runner: CliRunner, declarations_file: Path) -> None:
        result = cli_runner.invoke(cli, ["build", str(declarations_file), "-f", "mermaid"])
        assert result.exit_code == 0
        assert result.stdout.startswith("flowchart LR\n")
        assert "AppComponent --> Logger" in result.stdout

    def test_entry_and_direction(self, cli_runner: CliRunner, declarations_file: Path) -> None:
        result = cli_runner.invoke(
            cli, ["build", str(declarations_file), "-e", "Logger", "-d", "upstream"]
        )
        doc = json.loads(result.stdout)
        assert [n["id"] for n in doc["nodes"]] == ["AppComponent", "Logger"]

    def test_missing_entry_warns_on_stderr(
        self, cli_runner: CliRunner, declarations_file: Path
    ) -> None:
        result = cli_runner.invoke(cli, ["build", str(declarations_file), "-e", "Ghost"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["nodes"] == []
        assert "WARNING: Entry point 'Ghost' not found in graph" in result.stderr

    def test_out_writes_file_and_summary(
        self, cli_runner: CliRunner, declarations_file: Path, tmp_path: Path
    ) -> None:
        target = tmp_path / "out" / "graph.mmd"
        result = cli_runner.invoke(
            cli, ["build", str(declarations_file), "-f", "mermaid", "-o", str(target)]
        )
        assert result.exit_code == 0
        assert target.read_text(encoding="utf-8").startswith("flowchart LR")
        assert "OK  render_graph" in result.stdout
        assert "node_count: 5" in result.stdout

    def test_out_json_summary(
        self, cli_runner: CliRunner, declarations_file: Path, tmp_path: Path
    ) -> None:
        target = tmp_path / "graph.json"
        result = cli_runner.invoke(
            cli, ["--json", "build", str(declarations_file), "-o", str(target)]
        )
        payload = json.loads(result.stdout)
        assert payload["ok"] is True
        assert payload["data"]["output_file"] == str(target)
        assert "content" not in payload["data"]
        assert json.loads(target.read_text(encoding="utf-8"))["edges"]

    def test_stdin(self, cli_runner: CliRunner) -> None:
        document = json.dumps([{"name": "A", "kind": "service", "dependencies": []}])
        result = cli_runner.invoke(cli, ["build", "-"], input=document)
        assert result.exit_code == 0
        assert json.loads(result.stdout)["nodes"] == [{"id": "A", "kind": "service"}]

    def test_unique_cycles(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "d.json"
        path.write_text(
            json.dumps(
                [
                    {"name": "A", "kind": "service", "dependencies": [{"token": "B"}]},
                    {"name": "B", "kind": "service", "dependencies": [{"token": "A"}] * 2},
                ]
            )
        )
        plain = cli_runner.invoke(cli, ["build", str(path)])
        unique = cli_runner.invoke(cli, ["build", str(path), "--unique-cycles"])
        assert len(json.loads(plain.stdout)["circularDependencies"]) == 2
        assert len(json.loads(unique.stdout)["circularDependencies"]) == 1

    def test_config_defaults(self, cli_runner: CliRunner, declarations_file: Path) -> None:
        Path(CONFIG_FILENAME).write_text(
            '[output]\nformat = "mermaid"\n\n[filter]\nentries = ["AuthService"]\n',
            encoding="utf-8",
        )
        result = cli_runner.invoke(cli, ["build", str(declarations_file)])
        assert result.exit_code == 0
        assert result.stdout.startswith("flowchart LR")
        assert "AppComponent" not in result.stdout


class TestBuildFailures:
    def test_invalid_declaration(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text(json.dumps([{"name": "A", "kind": "service"}]))
        result = cli_runner.invoke(cli, ["build", str(path)])
        assert result.exit_code == 1
        assert result.stdout == ""
        assert "Declaration must have a dependencies array" in result.stderr

    def test_invalid_declaration_json(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text(json.dumps([{"name": "A", "kind": "service", "dependencies": 1}]))
        result = cli_runner.invoke(cli, ["--json", "build", str(path)])
        assert result.exit_code == 1
        payload = json.loads(result.stderr)
        assert payload["error"]["code"] == "INVALID_INPUT"
        assert payload["error"]["detail"] == {"index": 0}

    def test_missing_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(cli, ["--json", "build", str(tmp_path / "nope.json")])
        assert result.exit_code == 1
        assert json.loads(result.stderr)["error"]["code"] == "INVALID_DOCUMENT"

    def test_malformed_json(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["build", "-"], input="{not json")
        assert result.exit_code == 1
        assert "Invalid JSON in <stdin>" in result.stderr

    def test_bad_direction_is_usage_error(
        self, cli_runner: CliRunner, declarations_file: Path
    ) -> None:
        result = cli_runner.invoke(cli, ["build", str(declarations_file), "-d", "sideways"])
        assert result.exit_code == 2

    def test_bad_format_is_usage_error(
        self, cli_runner: CliRunner, declarations_file: Path
    ) -> None:
        result = cli_runner.invoke(cli, ["build", str(declarations_file), "-f", "dot"])
        assert result.exit_code == 2

    def test_unwritable_out(
        self, cli_runner: CliRunner, declarations_file: Path, tmp_path: Path
    ) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        result = cli_runner.invoke(
            cli, ["--json", "build", str(declarations_file), "-o", str(blocker / "g.json")]
        )
        assert result.exit_code == 1
        assert json.loads(result.stderr)["error"]["code"] == "OUTPUT_ERROR"
