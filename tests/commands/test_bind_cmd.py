"""Tests for the ``envbind bind`` command."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from envbind.cli import cli

TARGET = "sample_records:ServerConfig"


@pytest.mark.usefixtures("_isolated_cwd")
class TestBindCommand:
    def test_zero_values(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["bind", TARGET])
        assert result.exit_code == 0, result.output
        assert "OK" in result.output
        assert "EB_PORT" in result.output
        assert "zero" in result.output

    def test_env_value(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["bind", TARGET], env={"EB_PORT": "9000"})
        assert result.exit_code == 0, result.output
        assert "9000" in result.output
        assert "env" in result.output

    def test_json_output(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli,
            ["--json", "bind", TARGET],
            env={"EB_PORT": "9000", "EB_TIMEOUT": "1m30s", "EB_ALLOWED_HOSTS": "a, b"},
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["ok"] is True
        assert data["op"] == "bind"
        assert data["data"]["count"] == 5
        fields = {f["field"]: f for f in data["data"]["fields"]}
        assert fields["port"] == {"field": "port", "key": "EB_PORT", "source": "env", "value": 9000}
        assert fields["timeout"]["value"] == "1m30s"
        assert fields["allowed_hosts"]["value"] == ["a", "b"]
        assert fields["debug"]["source"] == "zero"
        assert "label" not in fields
        assert data["data"]["env_vars"]["EB_PORT"] == "9000"

    def test_quiet_output(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-q", "bind", TARGET], env={"EB_PORT": "9000"})
        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert lines == [
            "EB_LISTEN_ADDRESS=",
            "EB_PORT=9000",
            "EB_DEBUG=false",
            "EB_TIMEOUT=0s",
            "EB_ALLOWED_HOSTS=",
        ]

    def test_verbose_shows_tables(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-v", "bind", TARGET], env={"EB_PORT": "9000"})
        assert result.exit_code == 0, result.output
        assert "Environment" in result.output
        assert "All values" in result.output

    def test_parse_failure(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "bind", TARGET], env={"EB_PORT": "abc"})
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["ok"] is False
        assert data["error"]["code"] == "VALUE_PARSE_FAILURE"
        assert data["error"]["detail"]["key"] == "EB_PORT"

    def test_parse_failure_human(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["bind", TARGET], env={"EB_DEBUG": "maybe"})
        assert result.exit_code == 1
        assert "ERROR" in result.output
        assert "EB_DEBUG" in result.output

    def test_unknown_target(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "bind", "sample_records:Missing"])
        assert result.exit_code == 1
        assert json.loads(result.output)["error"]["code"] == "TARGET_NOT_FOUND"

    def test_invalid_target(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "bind", "sample_records"])
        assert result.exit_code == 1
        assert json.loads(result.output)["error"]["code"] == "INVALID_TARGET"

    def test_needs_arguments(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "bind", "sample_records:NeedsArgs"])
        assert result.exit_code == 1
        assert json.loads(result.output)["error"]["code"] == "CONSTRUCT_FAILED"

    def test_frozen_record(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "bind", "sample_records:FrozenConfig"])
        assert result.exit_code == 1
        assert json.loads(result.output)["error"]["code"] == "TARGET_NOT_REFERENCE"

    def test_unsupported_field(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "bind", "sample_records:TimestampConfig"])
        assert result.exit_code == 1
        assert json.loads(result.output)["error"]["code"] == "UNSUPPORTED_FIELD_TYPE"

    def test_pydantic_model(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli,
            ["--json", "bind", "sample_records:ModelConfig"],
            env={"EB_SERVICE": "api", "EB_GRACE": "5s"},
        )
        assert result.exit_code == 0, result.output
        fields = {f["field"]: f for f in json.loads(result.output)["data"]["fields"]}
        assert fields["service"]["value"] == "api"
        assert fields["grace"]["value"] == "5s"


@pytest.mark.usefixtures("_isolated_cwd")
class TestBindWithConfigDefaults:
    def test_discovered_defaults(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "envbind.toml").write_text(
            '[defaults]\nEB_PORT = 8080\nEB_ALLOWED_HOSTS = ["localhost"]\n'
        )
        result = cli_runner.invoke(cli, ["--json", "bind", TARGET])
        assert result.exit_code == 0, result.output
        fields = {f["field"]: f for f in json.loads(result.output)["data"]["fields"]}
        assert fields["port"]["source"] == "default"
        assert fields["port"]["value"] == 8080
        assert fields["allowed_hosts"]["value"] == ["localhost"]

    def test_env_beats_default(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "envbind.toml").write_text("[defaults]\nEB_PORT = 8080\n")
        result = cli_runner.invoke(cli, ["--json", "bind", TARGET], env={"EB_PORT": "9000"})
        fields = {f["field"]: f for f in json.loads(result.output)["data"]["fields"]}
        assert fields["port"]["source"] == "env"
        assert fields["port"]["value"] == 9000

    def test_explicit_config(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        staging = tmp_path / "conf" / "staging.toml"
        staging.parent.mkdir()
        staging.write_text('[defaults]\nEB_LISTEN_ADDRESS = "0.0.0.0"\n')
        result = cli_runner.invoke(cli, ["--json", "-c", str(staging), "bind", TARGET])
        assert result.exit_code == 0, result.output
        fields = {f["field"]: f for f in json.loads(result.output)["data"]["fields"]}
        assert fields["listen_address"]["value"] == "0.0.0.0"

    def test_default_type_mismatch(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "envbind.toml").write_text('[defaults]\nEB_PORT = "8080"\n')
        result = cli_runner.invoke(cli, ["--json", "bind", TARGET])
        assert result.exit_code == 1
        error = json.loads(result.output)["error"]
        assert error["code"] == "DEFAULT_TYPE_MISMATCH"
        assert "EB_PORT" in error["message"]

    def test_duration_default_not_expressible(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "envbind.toml").write_text('[defaults]\nEB_TIMEOUT = "30s"\n')
        result = cli_runner.invoke(cli, ["--json", "bind", TARGET])
        assert result.exit_code == 1
        assert json.loads(result.output)["error"]["code"] == "DEFAULT_TYPE_MISMATCH"
