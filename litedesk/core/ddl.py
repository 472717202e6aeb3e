"""DDL text generation from structured payloads.

Everything here is pure string building: no engine access and no side
effects. Column types and default literals are passed through verbatim; only
identifiers are escaped.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any

from litedesk.shared.exceptions import PayloadError, UnknownOperationError

from .types import AddColumnPayload, ColumnDefinition, CreateIndexPayload, CreateTablePayload


class DDLOperation(str, Enum):
    CREATE_TABLE = "createTable"
    ADD_COLUMN = "addColumn"
    CREATE_INDEX = "createIndex"
    DROP_TABLE = "dropTable"
    DROP_INDEX = "dropIndex"


def escape_identifier(name: str) -> str:
    """Quote ``name`` for interpolation into SQL, doubling embedded quotes."""
    return '"' + name.replace('"', '""') + '"'


def _has_default(value: str | None) -> bool:
    return value is not None and value != ""


def _column_clause(column: ColumnDefinition) -> str:
    parts = [escape_identifier(column.name), column.type]
    if column.primary_key:
        parts.append("PRIMARY KEY")
    if column.not_null:
        parts.append("NOT NULL")
    if column.unique:
        parts.append("UNIQUE")
    if _has_default(column.default_value):
        parts.append(f"DEFAULT {column.default_value}")
    return " ".join(part for part in parts if part)


def create_table_sql(payload: CreateTablePayload) -> str:
    columns = ",\n  ".join(_column_clause(column) for column in payload.columns)
    return f"CREATE TABLE {escape_identifier(payload.name)} (\n  {columns}\n)"


def add_column_sql(payload: AddColumnPayload) -> str:
    """Build ``ALTER TABLE ... ADD COLUMN``.

    ``NOT NULL`` is only emitted together with a default. SQLite refuses a
    NOT NULL column without a default on a populated table, so a not-null
    request without a default is left unconstrained and it is up to the
    caller to supply one.
    """
    column = payload.column
    parts = [
        f"ALTER TABLE {escape_identifier(payload.table_name)}",
        f"ADD COLUMN {escape_identifier(column.name)}",
    ]
    if column.type:
        parts.append(column.type)
    if column.not_null and _has_default(column.default_value):
        parts.append("NOT NULL")
        parts.append(f"DEFAULT {column.default_value}")
    return " ".join(parts)


def create_index_sql(payload: CreateIndexPayload) -> str:
    unique = "UNIQUE " if payload.unique else ""
    columns = ", ".join(escape_identifier(column) for column in payload.columns)
    return (
        f"CREATE {unique}INDEX {escape_identifier(payload.index_name)} "
        f"ON {escape_identifier(payload.table_name)} ({columns})"
    )


def drop_table_sql(name: str) -> str:
    return f"DROP TABLE IF EXISTS {escape_identifier(name)}"


def drop_index_sql(name: str) -> str:
    return f"DROP INDEX IF EXISTS {escape_identifier(name)}"


def generate_sql(operation: str | DDLOperation, payload: Any) -> str:
    """Return preview DDL for ``operation``; the text is never executed here.

    ``payload`` is the matching payload dataclass (or a mapping accepted by its
    ``from_mapping``) for create/add operations, and the object name for drops.
    """
    try:
        op = DDLOperation(operation)
    except ValueError as exc:
        raise UnknownOperationError(f"Unknown operation: {operation}") from exc

    if op is DDLOperation.CREATE_TABLE:
        sql = create_table_sql(_coerce_payload(payload, CreateTablePayload))
    elif op is DDLOperation.ADD_COLUMN:
        sql = add_column_sql(_coerce_payload(payload, AddColumnPayload))
    elif op is DDLOperation.CREATE_INDEX:
        sql = create_index_sql(_coerce_payload(payload, CreateIndexPayload))
    elif op is DDLOperation.DROP_TABLE:
        sql = drop_table_sql(_coerce_name(payload))
    else:
        sql = drop_index_sql(_coerce_name(payload))
    return f"{sql};"


def _coerce_payload(payload: Any, payload_type: type) -> Any:
    if isinstance(payload, payload_type):
        return payload
    if isinstance(payload, Mapping):
        return payload_type.from_mapping(payload)
    raise PayloadError(f"Expected a {payload_type.__name__} or mapping, got {type(payload).__name__}.")


def _coerce_name(payload: Any) -> str:
    if isinstance(payload, str) and payload:
        return payload
    if isinstance(payload, Mapping) and payload.get("name"):
        return str(payload["name"])
    raise PayloadError("Drop operations require a non-empty object name.")
