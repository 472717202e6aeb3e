from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import click
import pytest
from click.testing import CliRunner

from litedesk.shared.cli import CLIContext, common_cli_options, handle_cli_errors
from litedesk.shared.exceptions import ConfigurationError, DatabaseNotOpenError, LiteDeskError


class DummyAppConfig:
    def __init__(self, path: Path) -> None:
        self.database = SimpleNamespace(path=path)

    def with_database_path(self, new_path: str | Path) -> DummyAppConfig:
        return DummyAppConfig(Path(new_path))


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def test_common_cli_options_builds_context(
    monkeypatch: pytest.MonkeyPatch, runner: CliRunner, tmp_path: Path
) -> None:
    monkeypatch.setattr(
        "litedesk.shared.cli.load_config", lambda config_path: DummyAppConfig(tmp_path / "db.sqlite")
    )

    @click.command()
    @common_cli_options
    def sample(cli_ctx: CLIContext) -> None:
        click.echo(f"dry={cli_ctx.dry_run} db={cli_ctx.db_path.name} open={cli_ctx.service.list_open()}")

    result = runner.invoke(sample, [])

    assert result.exit_code == 0, result.output
    assert "dry=False db=db.sqlite open=()" in result.output


def test_common_cli_options_applies_db_override(
    monkeypatch: pytest.MonkeyPatch, runner: CliRunner, tmp_path: Path
) -> None:
    base_config = DummyAppConfig(tmp_path / "original.sqlite")
    monkeypatch.setattr("litedesk.shared.cli.load_config", lambda config_path: base_config)

    @click.command()
    @common_cli_options
    def sample(cli_ctx: CLIContext) -> None:
        click.echo(str(cli_ctx.db_path))

    override_path = tmp_path / "override.sqlite"
    result = runner.invoke(sample, ["--db", str(override_path), "--dry-run"])

    assert result.exit_code == 0, result.output
    assert override_path.as_posix() in result.output


def test_common_cli_options_closes_sessions_on_exit(
    monkeypatch: pytest.MonkeyPatch, runner: CliRunner, tmp_path: Path
) -> None:
    db_path = tmp_path / "session.sqlite"
    monkeypatch.setattr("litedesk.shared.cli.load_config", lambda config_path: DummyAppConfig(db_path))
    seen: dict[str, object] = {}

    @click.command()
    @common_cli_options
    def sample(cli_ctx: CLIContext) -> None:
        cli_ctx.service.create(cli_ctx.db_path)
        cli_ctx.service.execute_query(cli_ctx.db_path, "CREATE TABLE t (x)")
        seen["service"] = cli_ctx.service

    result = runner.invoke(sample, [])

    assert result.exit_code == 0, result.output
    assert seen["service"].list_open() == ()  # type: ignore[attr-defined]
    assert db_path.exists()


def test_common_cli_options_reports_configuration_errors(
    monkeypatch: pytest.MonkeyPatch, runner: CliRunner
) -> None:
    def broken(config_path: str | None) -> DummyAppConfig:
        raise ConfigurationError("bad yaml")

    monkeypatch.setattr("litedesk.shared.cli.load_config", broken)

    @click.command()
    @common_cli_options
    def sample(cli_ctx: CLIContext) -> None:  # pragma: no cover - never reached
        click.echo("unreachable")

    result = runner.invoke(sample, [])

    assert result.exit_code == 1
    assert "bad yaml" in result.output


def test_handle_cli_errors_wraps_known_exceptions() -> None:
    @handle_cli_errors
    def boom() -> None:
        raise LiteDeskError("boom")

    with pytest.raises(click.ClickException) as excinfo:
        boom()
    assert str(excinfo.value) == "boom"


def test_handle_cli_errors_wraps_database_errors() -> None:
    @handle_cli_errors
    def closed() -> None:
        raise DatabaseNotOpenError("Database not open: x.db")

    with pytest.raises(click.ClickException) as excinfo:
        closed()
    assert str(excinfo.value) == "Database not open: x.db"


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
