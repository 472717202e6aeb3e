"""Boundary surface consumed by front-ends (CLI, desktop shell)."""

from __future__ import annotations

from typing import Any

from litedesk.shared.logging import Logger, get_logger

from . import ddl
from .executor import EMPTY_STATEMENT_MESSAGE, QueryExecutor
from .introspect import introspect
from .registry import PathLike, SessionRegistry
from .types import (
    AddColumnPayload,
    CreateIndexPayload,
    CreateTablePayload,
    DatabaseInfo,
    ErrorResult,
    QueryResult,
)


class DatabaseService:
    """Owns one ``SessionRegistry`` and exposes every database operation.

    Use as a context manager so open sessions are flushed and closed on exit::

        with DatabaseService() as service:
            service.open("app.db")
            service.execute_batch("app.db", "INSERT INTO t VALUES (1);")
    """

    def __init__(self, logger: Logger | None = None) -> None:
        self.logger = logger or get_logger()
        self.registry = SessionRegistry(logger=self.logger)
        self.executor = QueryExecutor(self.registry, logger=self.logger)

    def __enter__(self) -> DatabaseService:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close_all()

    # -- sessions -------------------------------------------------------

    def open(self, path: PathLike) -> DatabaseInfo:
        return self.registry.open(path)

    def create(self, path: PathLike) -> DatabaseInfo:
        return self.registry.create(path)

    def close(self, path: PathLike) -> None:
        self.registry.close(path)

    def close_all(self) -> None:
        self.registry.close_all()

    def list_open(self) -> tuple[str, ...]:
        return self.registry.list_open()

    def get_info(self, path: PathLike) -> DatabaseInfo:
        return introspect(self.registry, path)

    # -- statements -----------------------------------------------------

    def execute_query(self, path: PathLike, sql: str) -> QueryResult:
        return self.executor.execute(path, sql)

    def apply_ddl(self, path: PathLike, sql: str) -> QueryResult:
        return self.executor.execute(path, sql)

    def execute_batch(self, path: PathLike, sql: str) -> list[QueryResult]:
        return self.executor.execute_batch(path, sql)

    def execute_buffer(self, path: PathLike, sql: str) -> QueryResult:
        """Run a whole editor buffer and return only its last result."""
        results = self.executor.execute_batch(path, sql)
        if not results:
            return ErrorResult(error=EMPTY_STATEMENT_MESSAGE, execution_time_ms=0.0)
        return results[-1]

    # -- schema helpers -------------------------------------------------

    def generate_sql(self, operation: str | ddl.DDLOperation, payload: Any) -> str:
        return ddl.generate_sql(operation, payload)

    def create_table(self, path: PathLike, payload: CreateTablePayload) -> QueryResult:
        return self.executor.execute(path, ddl.create_table_sql(payload))

    def add_column(self, path: PathLike, payload: AddColumnPayload) -> QueryResult:
        return self.executor.execute(path, ddl.add_column_sql(payload))

    def create_index(self, path: PathLike, payload: CreateIndexPayload) -> QueryResult:
        return self.executor.execute(path, ddl.create_index_sql(payload))

    def drop_table(self, path: PathLike, table_name: str) -> QueryResult:
        return self.executor.execute(path, ddl.drop_table_sql(table_name))

    def drop_index(self, path: PathLike, index_name: str) -> QueryResult:
        return self.executor.execute(path, ddl.drop_index_sql(index_name))

    def get_table_data(self, path: PathLike, table_name: str, limit: int, offset: int = 0) -> QueryResult:
        sql = (
            f"SELECT * FROM {ddl.escape_identifier(table_name)} "
            f"LIMIT {int(limit)} OFFSET {int(offset)}"
        )
        return self.executor.execute(path, sql)
