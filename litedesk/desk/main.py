"""litedesk CLI entrypoint."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click

from litedesk.core import ddl
from litedesk.core.types import (
    AddColumnPayload,
    CreateIndexPayload,
    CreateTablePayload,
    DatabaseInfo,
    ErrorResult,
    QueryResult,
)
from litedesk.shared.cli import CLIContext, common_cli_options, handle_cli_errors, pass_cli_context
from litedesk.shared.config import OUTPUT_FORMATS
from litedesk.shared.exceptions import PayloadError

from . import render

INFO_FORMAT_CHOICES = ("table", "json")


@click.group(help="Browse and edit SQLite database files.")
@common_cli_options
@handle_cli_errors
def cli(cli_ctx: CLIContext) -> None:
    """Primary Click group for litedesk commands."""
    cli_ctx.logger.debug(f"litedesk initialised (database: {cli_ctx.db_path}).")


@cli.command("create")
@click.argument("path", type=click.Path(dir_okay=False, path_type=Path))
@pass_cli_context
@handle_cli_errors
def create_database(cli_ctx: CLIContext, path: Path) -> None:
    """Create an empty database file at PATH."""
    if path.exists():
        raise click.ClickException(f"Refusing to overwrite existing file {path}.")
    info = cli_ctx.service.create(path)
    cli_ctx.logger.success(f"Created {info.path} ({info.size} bytes).")


@cli.command("info")
@click.option(
    "--format",
    "output_format",
    default="table",
    show_default=True,
    type=click.Choice(INFO_FORMAT_CHOICES),
)
@pass_cli_context
@handle_cli_errors
def show_info(cli_ctx: CLIContext, output_format: str) -> None:
    """Display tables, columns, indexes, foreign keys and views."""
    info = _open_database(cli_ctx)
    render.render_database_info(info, output_format=output_format, logger=cli_ctx.logger)


@cli.command("tables")
@pass_cli_context
@handle_cli_errors
def list_tables(cli_ctx: CLIContext) -> None:
    """List tables with their column and row counts."""
    info = _open_database(cli_ctx)
    render.render_table_summary(info)


@cli.command("sql")
@click.argument("query", type=str, required=False)
@click.option(
    "--file",
    "sql_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Read statements from a .sql file.",
)
@click.option("--all", "show_all", is_flag=True, help="Show the result of every statement.")
@click.option("--format", "output_format", type=click.Choice(OUTPUT_FORMATS), help="Output format.")
@pass_cli_context
@handle_cli_errors
def run_sql(
    cli_ctx: CLIContext,
    query: str | None,
    sql_file: Path | None,
    show_all: bool,
    output_format: str | None,
) -> None:
    """Execute one or more SQL statements separated by semicolons."""
    if query and sql_file:
        raise click.ClickException("Pass either QUERY or --file, not both.")
    text = sql_file.read_text(encoding="utf-8") if sql_file else (query or "")
    if not text.strip():
        raise click.ClickException("Query text must not be empty.")

    fmt = output_format or cli_ctx.config.query.output_format
    _open_database(cli_ctx)
    if show_all:
        results = cli_ctx.service.execute_batch(cli_ctx.db_path, text)
        render.render_query_results(results, output_format=fmt, logger=cli_ctx.logger)
    else:
        results = [cli_ctx.service.execute_buffer(cli_ctx.db_path, text)]
        render.render_query_result(results[0], output_format=fmt, logger=cli_ctx.logger)

    if any(isinstance(result, ErrorResult) for result in results):
        raise SystemExit(1)


@cli.command("data")
@click.argument("table", type=str)
@click.option("--limit", type=click.IntRange(min=1), help="Rows per page (defaults to config page size).")
@click.option("--offset", type=click.IntRange(min=0), default=0, show_default=True)
@click.option("--format", "output_format", type=click.Choice(OUTPUT_FORMATS), help="Output format.")
@pass_cli_context
@handle_cli_errors
def table_data(
    cli_ctx: CLIContext,
    table: str,
    limit: int | None,
    offset: int,
    output_format: str | None,
) -> None:
    """Show a page of rows from TABLE."""
    _open_database(cli_ctx)
    page_size = limit or cli_ctx.config.query.page_size
    result = cli_ctx.service.get_table_data(cli_ctx.db_path, table, page_size, offset)
    _render_result(cli_ctx, result, output_format)


@cli.command("ddl")
@click.argument("operation", type=click.Choice([op.value for op in ddl.DDLOperation]))
@click.option("--payload", "payload_source", help="JSON payload, or @path to a JSON file.")
@click.option("--name", "object_name", help="Object name for dropTable/dropIndex.")
@pass_cli_context
@handle_cli_errors
def preview_ddl(
    cli_ctx: CLIContext,
    operation: str,
    payload_source: str | None,
    object_name: str | None,
) -> None:
    """Print the SQL for OPERATION without running it."""
    if operation in (ddl.DDLOperation.DROP_TABLE.value, ddl.DDLOperation.DROP_INDEX.value):
        payload: Any = object_name
    else:
        payload = _load_payload(payload_source)
    render.render_sql(cli_ctx.service.generate_sql(operation, payload))


@cli.command("create-table")
@click.option("--payload", "payload_source", required=True, help="JSON payload, or @path to a JSON file.")
@pass_cli_context
@handle_cli_errors
def create_table(cli_ctx: CLIContext, payload_source: str) -> None:
    """Create a table from a column payload."""
    payload = CreateTablePayload.from_mapping(_load_payload(payload_source))
    _run_schema_change(cli_ctx, ddl.create_table_sql(payload), cli_ctx.service.create_table, payload)


@cli.command("add-column")
@click.option("--payload", "payload_source", required=True, help="JSON payload, or @path to a JSON file.")
@pass_cli_context
@handle_cli_errors
def add_column(cli_ctx: CLIContext, payload_source: str) -> None:
    """Append a column to an existing table."""
    payload = AddColumnPayload.from_mapping(_load_payload(payload_source))
    _run_schema_change(cli_ctx, ddl.add_column_sql(payload), cli_ctx.service.add_column, payload)


@cli.command("create-index")
@click.option("--payload", "payload_source", required=True, help="JSON payload, or @path to a JSON file.")
@pass_cli_context
@handle_cli_errors
def create_index(cli_ctx: CLIContext, payload_source: str) -> None:
    """Create an index from a payload."""
    payload = CreateIndexPayload.from_mapping(_load_payload(payload_source))
    _run_schema_change(cli_ctx, ddl.create_index_sql(payload), cli_ctx.service.create_index, payload)


@cli.command("drop-table")
@click.argument("name", type=str)
@pass_cli_context
@handle_cli_errors
def drop_table(cli_ctx: CLIContext, name: str) -> None:
    """Drop table NAME if it exists."""
    _run_schema_change(cli_ctx, ddl.drop_table_sql(name), cli_ctx.service.drop_table, name)


@cli.command("drop-index")
@click.argument("name", type=str)
@pass_cli_context
@handle_cli_errors
def drop_index(cli_ctx: CLIContext, name: str) -> None:
    """Drop index NAME if it exists."""
    _run_schema_change(cli_ctx, ddl.drop_index_sql(name), cli_ctx.service.drop_index, name)


def _open_database(cli_ctx: CLIContext) -> DatabaseInfo:
    cli_ctx.logger.debug(f"Opening {cli_ctx.db_path}")
    return cli_ctx.service.open(cli_ctx.db_path)


def _load_payload(source: str | None) -> dict[str, Any]:
    if not source:
        raise click.ClickException("--payload is required for this operation.")
    if source.startswith("@"):
        path = Path(source[1:]).expanduser()
        try:
            source = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise click.ClickException(f"Unable to read payload file '{path}': {exc}") from exc
    try:
        data = json.loads(source)
    except json.JSONDecodeError as exc:
        raise click.ClickException(f"Payload is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise PayloadError("Payload must be a JSON object.")
    return data


def _run_schema_change(
    cli_ctx: CLIContext,
    sql: str,
    action: Callable[..., QueryResult],
    payload: Any,
) -> None:
    if cli_ctx.dry_run:
        cli_ctx.logger.info("Dry run: statement not executed.")
        render.render_sql(f"{sql};")
        return
    _open_database(cli_ctx)
    result = action(cli_ctx.db_path, payload)
    _render_result(cli_ctx, result, None)


def _render_result(cli_ctx: CLIContext, result: QueryResult, output_format: str | None) -> None:
    fmt = output_format or cli_ctx.config.query.output_format
    render.render_query_result(result, output_format=fmt, logger=cli_ctx.logger)
    if isinstance(result, ErrorResult):
        raise SystemExit(1)


def main() -> None:
    """Entry point for console_scripts."""
    cli()


if __name__ == "__main__":  # pragma: no cover
    main()
