from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import click
import pytest
from click.testing import CliRunner

from pogo_cli.shared.cli import CLIContext, common_cli_options, handle_cli_errors
from pogo_cli.shared.exceptions import ConfigurationError, OperationNotFound, PogoError


class DummyAppConfig:
    def __init__(self, connection_string: str) -> None:
        self.database = SimpleNamespace(connection_string=connection_string)

    def with_connection_string(self, connection_string: str) -> DummyAppConfig:
        return DummyAppConfig(connection_string)


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def test_common_cli_options_bootstraps_config_by_default(
    monkeypatch: pytest.MonkeyPatch, runner: CliRunner, tmp_path: Path
) -> None:
    bootstrapped: list[str | None] = []

    monkeypatch.setattr("pogo_cli.shared.cli.load_config", lambda config_path: DummyAppConfig("postgresql://a/db"))

    def fake_ensure(config_path: str | None) -> Path:
        bootstrapped.append(config_path)
        return tmp_path / "config.yaml"

    monkeypatch.setattr("pogo_cli.shared.cli.ensure_default_config", fake_ensure)

    @click.command()
    @common_cli_options
    def sample(cli_ctx: CLIContext) -> None:
        click.echo(f"verbose={cli_ctx.verbose} db={cli_ctx.config.database.connection_string}")

    result = runner.invoke(sample, ["--config", str(tmp_path / "config.yaml")])

    assert result.exit_code == 0, result.output
    assert "verbose=False db=postgresql://a/db" in result.output
    assert bootstrapped == [str(tmp_path / "config.yaml")]


def test_common_cli_options_skips_bootstrap_when_disabled(
    monkeypatch: pytest.MonkeyPatch, runner: CliRunner
) -> None:
    monkeypatch.setattr("pogo_cli.shared.cli.load_config", lambda config_path: DummyAppConfig("postgresql://a/db"))

    called = False

    def fake_ensure(config_path: str | None) -> Path:
        nonlocal called
        called = True
        return Path("unused")

    monkeypatch.setattr("pogo_cli.shared.cli.ensure_default_config", fake_ensure)

    @click.command()
    @common_cli_options(bootstrap_config=False)
    def sample(cli_ctx: CLIContext) -> None:
        click.echo("ran")

    result = runner.invoke(sample, ["--verbose"])

    assert result.exit_code == 0, result.output
    assert "ran" in result.output
    assert called is False


def test_common_cli_options_applies_database_override(
    monkeypatch: pytest.MonkeyPatch, runner: CliRunner
) -> None:
    monkeypatch.setattr("pogo_cli.shared.cli.load_config", lambda config_path: DummyAppConfig("postgresql://a/db"))
    monkeypatch.setattr("pogo_cli.shared.cli.ensure_default_config", lambda config_path: Path("unused"))

    @click.command()
    @common_cli_options
    def sample(cli_ctx: CLIContext) -> None:
        click.echo(cli_ctx.config.database.connection_string)

    result = runner.invoke(sample, ["--database", "postgresql://override/db"])

    assert result.exit_code == 0, result.output
    assert "postgresql://override/db" in result.output


def test_common_cli_options_reports_configuration_errors(
    monkeypatch: pytest.MonkeyPatch, runner: CliRunner
) -> None:
    def broken(config_path: str | None) -> Path:
        raise ConfigurationError("root must be a mapping")

    monkeypatch.setattr("pogo_cli.shared.cli.ensure_default_config", broken)

    @click.command()
    @common_cli_options
    def sample(cli_ctx: CLIContext) -> None:  # pragma: no cover - never reached
        click.echo("unreachable")

    result = runner.invoke(sample, [])

    assert result.exit_code == 1
    assert "Configuration error: root must be a mapping" in result.output


def test_handle_cli_errors_wraps_known_exceptions() -> None:
    @handle_cli_errors
    def boom() -> None:
        raise PogoError("boom")

    with pytest.raises(click.ClickException) as excinfo:
        boom()
    assert str(excinfo.value) == "boom"


def test_handle_cli_errors_keeps_operation_message() -> None:
    @handle_cli_errors
    def missing() -> None:
        raise OperationNotFound("Operation 'x' is not defined.")

    with pytest.raises(click.ClickException) as excinfo:
        missing()
    assert str(excinfo.value) == "Operation 'x' is not defined."


def test_handle_cli_errors_formats_configuration_errors() -> None:
    @handle_cli_errors
    def misconfigured() -> None:
        raise ConfigurationError("missing value")

    with pytest.raises(click.ClickException) as excinfo:
        misconfigured()
    assert "Configuration error" in str(excinfo.value)


def test_handle_cli_errors_wraps_unexpected_exceptions() -> None:
    @handle_cli_errors
    def explode() -> None:
        raise RuntimeError("kapow")

    with pytest.raises(click.ClickException) as excinfo:
        explode()
    assert "Unexpected error: kapow" == str(excinfo.value)
