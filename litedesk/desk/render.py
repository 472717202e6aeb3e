"""Output rendering helpers for the litedesk CLI."""

from __future__ import annotations

import csv
import json
import sys
from collections.abc import Sequence
from typing import IO, Any

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from litedesk.core.types import (
    DatabaseInfo,
    DDLResult,
    ErrorResult,
    MutationResult,
    QueryResult,
    SelectResult,
)
from litedesk.shared.logging import Logger


def render_query_result(
    result: QueryResult,
    *,
    output_format: str,
    logger: Logger,
    stream=None,
) -> None:
    """Render a single statement result in the desired format."""
    output_stream = stream or sys.stdout
    fmt = (output_format or "table").lower()

    if fmt == "json":
        json.dump(_json_safe(result.to_dict()), output_stream, indent=2)
        output_stream.write("\n")
        return

    if isinstance(result, SelectResult):
        if fmt == "table":
            _render_table(result, logger=logger, stream=output_stream)
        elif fmt == "csv":
            _render_delimited(result, stream=output_stream, delimiter=",")
        elif fmt == "tsv":
            _render_delimited(result, stream=output_stream, delimiter="\t")
        else:  # pragma: no cover - Click validation should prevent this
            raise ValueError(f"Unsupported output format '{output_format}'.")
        logger.debug(f"{len(result.rows)} row(s) in {result.execution_time_ms:.2f} ms")
    elif isinstance(result, MutationResult):
        logger.success(
            f"{result.affected_rows} row(s) affected ({result.execution_time_ms:.2f} ms)"
        )
    elif isinstance(result, DDLResult):
        logger.success(f"Statement executed ({result.execution_time_ms:.2f} ms)")
    elif isinstance(result, ErrorResult):
        logger.error(f"Error: {result.error}")


def render_query_results(
    results: Sequence[QueryResult],
    *,
    output_format: str,
    logger: Logger,
    stream=None,
) -> None:
    """Render every result of a batch in statement order."""
    output_stream = stream or sys.stdout
    if (output_format or "table").lower() == "json":
        payload = [_json_safe(result.to_dict()) for result in results]
        json.dump(payload, output_stream, indent=2)
        output_stream.write("\n")
        return
    for result in results:
        render_query_result(result, output_format=output_format, logger=logger, stream=output_stream)


def render_database_info(
    info: DatabaseInfo,
    *,
    output_format: str,
    logger: Logger,
    stream=None,
) -> None:
    """Render a schema snapshot to the output stream."""
    output_stream = stream or sys.stdout
    fmt = (output_format or "table").lower()

    if fmt == "json":
        json.dump(info.to_dict(), output_stream, indent=2)
        output_stream.write("\n")
        return

    console = Console(file=output_stream, highlight=False, force_terminal=False)
    console.print(f"[bold]{escape(info.name)}[/bold] ({info.size} bytes)")
    for table in info.tables:
        console.print(f"\n[bold]{escape(table.name)}[/bold] ({table.row_count} rows)")
        column_table = Table(box=box.SIMPLE, show_header=True, header_style="bold")
        for heading in ("#", "Column", "Type", "PK", "Not Null", "Unique", "Default"):
            column_table.add_column(heading)
        for column in table.columns:
            column_table.add_row(
                str(column.cid),
                column.name,
                column.type,
                "yes" if column.primary_key else "",
                "yes" if column.not_null else "",
                "yes" if column.unique else "",
                _stringify(column.default_value),
            )
        console.print(column_table)

        if table.indexes:
            idx_table = Table(box=box.SIMPLE, show_header=True, header_style="bold")
            idx_table.add_column("Index")
            idx_table.add_column("Unique")
            idx_table.add_column("Columns")
            for index in table.indexes:
                idx_table.add_row(
                    index.name,
                    "yes" if index.unique else "",
                    ", ".join(_stringify(column) for column in index.columns),
                )
            console.print(idx_table)

        if table.foreign_keys:
            fk_table = Table(box=box.SIMPLE, show_header=True, header_style="bold")
            fk_table.add_column("From")
            fk_table.add_column("References")
            fk_table.add_column("On Update")
            fk_table.add_column("On Delete")
            for fk in table.foreign_keys:
                fk_table.add_row(
                    fk.from_column,
                    f"{fk.table}.{_stringify(fk.to_column)}",
                    fk.on_update,
                    fk.on_delete,
                )
            console.print(fk_table)

    for view in info.views:
        console.print(f"\n[bold]view {escape(view.name)}[/bold]")
        console.print(view.sql or "", markup=False)

    if not info.tables:
        logger.info(f"No tables found in database {info.path}.")


def render_table_summary(info: DatabaseInfo, *, stream=None) -> None:
    output_stream = stream or sys.stdout
    console = Console(file=output_stream, highlight=False, force_terminal=False)
    table = Table(box=box.SIMPLE, show_header=True, header_style="bold")
    table.add_column("Table")
    table.add_column("Columns", justify="right")
    table.add_column("Rows", justify="right")
    for entry in info.tables:
        table.add_row(entry.name, str(len(entry.columns)), str(entry.row_count))
    console.print(table)


def render_sql(sql: str, *, stream=None) -> None:
    output_stream = stream or sys.stdout
    output_stream.write(sql)
    output_stream.write("\n")


def _render_table(result: SelectResult, *, logger: Logger, stream: IO[str]) -> None:
    console = Console(file=stream, highlight=False, force_terminal=False)
    table = Table(box=box.SIMPLE_HEAVY, show_header=bool(result.columns), header_style="bold")
    for column in result.columns:
        table.add_column(column or "", overflow="fold")

    if result.rows:
        for row in result.rows:
            table.add_row(*[_stringify(row.get(column)) for column in result.columns])
    else:
        logger.info("Query returned zero rows.")

    console.print(table)


def _render_delimited(result: SelectResult, *, stream: IO[str], delimiter: str) -> None:
    writer = csv.writer(stream, delimiter=delimiter)
    if result.columns:
        writer.writerow(result.columns)
    for row in result.rows:
        writer.writerow(_stringify(row.get(column)) for column in result.columns)


def _stringify(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return f"<blob {len(value)} bytes>"
    return str(value)


def _json_safe(value: Any) -> Any:
    if isinstance(value, bytes):
        return value.hex()
    if isinstance(value, dict):
        return {key: _json_safe(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_json_safe(item) for item in value]
    return value
