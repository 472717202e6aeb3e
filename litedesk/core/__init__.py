"""Public exports for the session and statement-processing layer."""

from __future__ import annotations

from .classifier import StatementKind, classify
from .ddl import DDLOperation, escape_identifier, generate_sql
from .executor import QueryExecutor
from .introspect import introspect
from .registry import SessionRegistry
from .service import DatabaseService
from .splitter import split_statements
from .types import (
    AddColumnPayload,
    ColumnDefinition,
    ColumnInfo,
    CreateIndexPayload,
    CreateTablePayload,
    DatabaseInfo,
    DDLResult,
    ErrorResult,
    ForeignKeyInfo,
    IndexInfo,
    MutationResult,
    NewColumn,
    QueryResult,
    SelectResult,
    TableInfo,
    ViewInfo,
)

__all__ = [
    "AddColumnPayload",
    "ColumnDefinition",
    "ColumnInfo",
    "CreateIndexPayload",
    "CreateTablePayload",
    "DDLOperation",
    "DDLResult",
    "DatabaseInfo",
    "DatabaseService",
    "ErrorResult",
    "ForeignKeyInfo",
    "IndexInfo",
    "MutationResult",
    "NewColumn",
    "QueryExecutor",
    "QueryResult",
    "SelectResult",
    "SessionRegistry",
    "StatementKind",
    "TableInfo",
    "ViewInfo",
    "classify",
    "escape_identifier",
    "generate_sql",
    "introspect",
    "split_statements",
]
