"""Statement execution and result shaping."""

from __future__ import annotations

import sqlite3
import time
from typing import Any

from litedesk.shared.logging import Logger

from .classifier import StatementKind, classify
from .registry import PathLike, SessionRegistry
from .splitter import split_statements
from .types import DDLResult, ErrorResult, MutationResult, QueryResult, SelectResult

EMPTY_STATEMENT_MESSAGE = "No statements to execute"

# sqlite3.Warning covers "one statement at a time" on older interpreters; the
# others come from the driver rather than the engine.
_STATEMENT_ERRORS = (sqlite3.Error, sqlite3.Warning, ValueError, OverflowError)


class QueryExecutor:
    """Runs statements against registry sessions, one at a time.

    Engine failures never escape ``execute``; they are returned as
    ``ErrorResult`` so a batch keeps reporting per statement. Structural
    failures such as an unopened path do propagate.
    """

    def __init__(self, registry: SessionRegistry, logger: Logger | None = None) -> None:
        self.registry = registry
        self.logger = logger or registry.logger

    def execute(self, path: PathLike, statement: str) -> QueryResult:
        connection = self.registry.get(path)
        start = time.perf_counter()
        trimmed = statement.strip()
        if not trimmed:
            return ErrorResult(error=EMPTY_STATEMENT_MESSAGE, execution_time_ms=_elapsed_ms(start))

        kind = classify(trimmed)
        self.logger.statement(trimmed)
        try:
            if kind is StatementKind.READ_ONLY:
                result: QueryResult = self._run_read(connection, trimmed, start)
            elif kind is StatementKind.SCHEMA_DEFINING:
                connection.execute(trimmed)
                self.registry.persist(path)
                result = DDLResult(execution_time_ms=_elapsed_ms(start))
            else:
                connection.execute(trimmed)
                affected = _changes(connection)
                self.registry.persist(path)
                result = MutationResult(affected_rows=affected, execution_time_ms=_elapsed_ms(start))
        except _STATEMENT_ERRORS as exc:
            result = ErrorResult(error=str(exc), execution_time_ms=_elapsed_ms(start))

        self.logger.debug(
            f"{kind.value} statement -> {result.kind} in {result.execution_time_ms:.2f} ms"
        )
        return result

    def execute_batch(self, path: PathLike, text: str) -> list[QueryResult]:
        """Split ``text`` and execute each statement in order."""
        return [self.execute(path, statement) for statement in split_statements(text)]

    def _run_read(self, connection: sqlite3.Connection, statement: str, start: float) -> SelectResult:
        cursor = connection.execute(statement)
        fetched = cursor.fetchall()
        # No result set and no matching rows both report an empty column list.
        if cursor.description is None or not fetched:
            return SelectResult(columns=(), rows=(), execution_time_ms=_elapsed_ms(start))
        columns = tuple(column[0] for column in cursor.description)
        rows = tuple(_row_to_dict(columns, row) for row in fetched)
        return SelectResult(columns=columns, rows=rows, execution_time_ms=_elapsed_ms(start))


def _row_to_dict(columns: tuple[str, ...], row: tuple[Any, ...]) -> dict[str, Any]:
    return {column: value for column, value in zip(columns, row)}


def _changes(connection: sqlite3.Connection) -> int:
    row = connection.execute("SELECT changes()").fetchone()
    if row is None or row[0] is None:
        return 0
    return int(row[0])


def _elapsed_ms(start: float) -> float:
    return max(0.0, (time.perf_counter() - start) * 1000.0)
