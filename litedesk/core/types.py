"""Data structures shared across the session and statement-processing layer."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, ClassVar, Union

from litedesk.shared.exceptions import PayloadError

# ---------------------------------------------------------------------------
# Query results


@dataclass(frozen=True, slots=True)
class SelectResult:
    """Rows returned by a read-only statement."""

    kind: ClassVar[str] = "select"

    columns: tuple[str, ...]
    rows: tuple[dict[str, Any], ...]
    execution_time_ms: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.kind,
            "columns": list(self.columns),
            "rows": [dict(row) for row in self.rows],
            "executionTime": self.execution_time_ms,
        }


@dataclass(frozen=True, slots=True)
class MutationResult:
    """Outcome of an INSERT/UPDATE/DELETE style statement."""

    kind: ClassVar[str] = "mutation"

    affected_rows: int
    execution_time_ms: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.kind,
            "affectedRows": self.affected_rows,
            "executionTime": self.execution_time_ms,
        }


@dataclass(frozen=True, slots=True)
class DDLResult:
    """Outcome of a CREATE/ALTER/DROP statement."""

    kind: ClassVar[str] = "ddl"

    execution_time_ms: float

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind, "executionTime": self.execution_time_ms}


@dataclass(frozen=True, slots=True)
class ErrorResult:
    """A statement the engine rejected."""

    kind: ClassVar[str] = "error"

    error: str
    execution_time_ms: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.kind,
            "error": self.error,
            "executionTime": self.execution_time_ms,
        }


QueryResult = Union[SelectResult, MutationResult, DDLResult, ErrorResult]


# ---------------------------------------------------------------------------
# Schema snapshot


@dataclass(frozen=True, slots=True)
class ColumnInfo:
    cid: int
    name: str
    type: str
    not_null: bool
    default_value: str | None
    primary_key: bool
    unique: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "cid": self.cid,
            "name": self.name,
            "type": self.type,
            "notnull": self.not_null,
            "dflt_value": self.default_value,
            "pk": self.primary_key,
            "unique": self.unique,
        }


@dataclass(frozen=True, slots=True)
class IndexInfo:
    name: str
    unique: bool
    columns: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "unique": self.unique, "columns": list(self.columns)}


@dataclass(frozen=True, slots=True)
class ForeignKeyInfo:
    """One row of ``PRAGMA foreign_key_list``."""

    id: int
    seq: int
    table: str
    from_column: str
    to_column: str | None
    on_update: str
    on_delete: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "seq": self.seq,
            "table": self.table,
            "from": self.from_column,
            "to": self.to_column,
            "on_update": self.on_update,
            "on_delete": self.on_delete,
        }


@dataclass(frozen=True, slots=True)
class ViewInfo:
    name: str
    sql: str

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "sql": self.sql}


@dataclass(frozen=True, slots=True)
class TableInfo:
    name: str
    columns: tuple[ColumnInfo, ...]
    indexes: tuple[IndexInfo, ...]
    foreign_keys: tuple[ForeignKeyInfo, ...]
    row_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "columns": [column.to_dict() for column in self.columns],
            "indexes": [index.to_dict() for index in self.indexes],
            "foreignKeys": [fk.to_dict() for fk in self.foreign_keys],
            "rowCount": self.row_count,
        }


@dataclass(frozen=True, slots=True)
class DatabaseInfo:
    """Point-in-time snapshot of an open database; never updated in place."""

    path: str
    name: str
    size: int
    tables: tuple[TableInfo, ...]
    views: tuple[ViewInfo, ...]

    def table(self, name: str) -> TableInfo | None:
        for table in self.tables:
            if table.name == name:
                return table
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "name": self.name,
            "size": self.size,
            "tables": [table.to_dict() for table in self.tables],
            "views": [view.to_dict() for view in self.views],
        }


# ---------------------------------------------------------------------------
# DDL payloads


def _field(data: Mapping[str, Any], *keys: str, default: Any = None, required: bool = False) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    if required:
        raise PayloadError(f"Payload is missing required field '{keys[0]}'.")
    return default


def _require_mapping(data: Any, label: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise PayloadError(f"{label} must be a mapping of properties.")
    return data


@dataclass(frozen=True, slots=True)
class ColumnDefinition:
    """A column clause for CREATE TABLE."""

    name: str
    type: str
    primary_key: bool = False
    not_null: bool = False
    unique: bool = False
    default_value: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ColumnDefinition:
        data = _require_mapping(data, "Column definition")
        default = _field(data, "default_value", "defaultValue")
        return cls(
            name=str(_field(data, "name", required=True)),
            type=str(_field(data, "type", default="")),
            primary_key=bool(_field(data, "primary_key", "primaryKey", default=False)),
            not_null=bool(_field(data, "not_null", "notNull", default=False)),
            unique=bool(_field(data, "unique", default=False)),
            default_value=None if default is None else str(default),
        )


@dataclass(frozen=True, slots=True)
class CreateTablePayload:
    name: str
    columns: tuple[ColumnDefinition, ...] = field(default_factory=tuple)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> CreateTablePayload:
        data = _require_mapping(data, "Create table payload")
        raw_columns = _field(data, "columns", required=True)
        if isinstance(raw_columns, (str, bytes)) or not isinstance(raw_columns, Sequence):
            raise PayloadError("Create table payload 'columns' must be a list.")
        return cls(
            name=str(_field(data, "name", required=True)),
            columns=tuple(ColumnDefinition.from_mapping(column) for column in raw_columns),
        )


@dataclass(frozen=True, slots=True)
class NewColumn:
    """A column appended with ALTER TABLE ... ADD COLUMN."""

    name: str
    type: str
    not_null: bool = False
    default_value: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> NewColumn:
        data = _require_mapping(data, "Column definition")
        default = _field(data, "default_value", "defaultValue")
        return cls(
            name=str(_field(data, "name", required=True)),
            type=str(_field(data, "type", default="")),
            not_null=bool(_field(data, "not_null", "notNull", default=False)),
            default_value=None if default is None else str(default),
        )


@dataclass(frozen=True, slots=True)
class AddColumnPayload:
    table_name: str
    column: NewColumn

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> AddColumnPayload:
        data = _require_mapping(data, "Add column payload")
        return cls(
            table_name=str(_field(data, "table_name", "tableName", required=True)),
            column=NewColumn.from_mapping(_field(data, "column", required=True)),
        )


@dataclass(frozen=True, slots=True)
class CreateIndexPayload:
    table_name: str
    index_name: str
    columns: tuple[str, ...]
    unique: bool = False

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> CreateIndexPayload:
        data = _require_mapping(data, "Create index payload")
        raw_columns = _field(data, "columns", required=True)
        if isinstance(raw_columns, (str, bytes)) or not isinstance(raw_columns, Sequence):
            raise PayloadError("Create index payload 'columns' must be a list.")
        return cls(
            table_name=str(_field(data, "table_name", "tableName", required=True)),
            index_name=str(_field(data, "index_name", "indexName", required=True)),
            columns=tuple(str(column) for column in raw_columns),
            unique=bool(_field(data, "unique", default=False)),
        )
