from __future__ import annotations

import pytest

from litedesk.core import ddl
from litedesk.core.types import (
    AddColumnPayload,
    ColumnDefinition,
    CreateIndexPayload,
    CreateTablePayload,
    NewColumn,
)
from litedesk.shared.exceptions import PayloadError, UnknownOperationError


def test_escape_identifier_doubles_quotes() -> None:
    assert ddl.escape_identifier("users") == '"users"'
    assert ddl.escape_identifier('we"ird') == '"we""ird"'


def test_create_table_sql_orders_modifiers() -> None:
    payload = CreateTablePayload(
        name="users",
        columns=(
            ColumnDefinition(name="id", type="INTEGER", primary_key=True, not_null=True),
            ColumnDefinition(name="email", type="TEXT", not_null=True, unique=True, default_value="''"),
            ColumnDefinition(name="note", type="TEXT", default_value=""),
        ),
    )

    sql = ddl.create_table_sql(payload)

    assert sql == (
        'CREATE TABLE "users" (\n'
        '  "id" INTEGER PRIMARY KEY NOT NULL,\n'
        "  \"email\" TEXT NOT NULL UNIQUE DEFAULT '',\n"
        '  "note" TEXT\n'
        ")"
    )


def test_add_column_requires_default_for_not_null() -> None:
    without_default = AddColumnPayload("users", NewColumn(name="age", type="INTEGER", not_null=True))
    with_default = AddColumnPayload(
        "users", NewColumn(name="age", type="INTEGER", not_null=True, default_value="0")
    )

    assert ddl.add_column_sql(without_default) == 'ALTER TABLE "users" ADD COLUMN "age" INTEGER'
    assert (
        ddl.add_column_sql(with_default)
        == 'ALTER TABLE "users" ADD COLUMN "age" INTEGER NOT NULL DEFAULT 0'
    )


def test_create_index_sql() -> None:
    payload = CreateIndexPayload(table_name="users", index_name="ux_email", columns=("email", "org"), unique=True)
    assert ddl.create_index_sql(payload) == 'CREATE UNIQUE INDEX "ux_email" ON "users" ("email", "org")'


def test_drop_statements_are_idempotent_forms() -> None:
    assert ddl.drop_table_sql("users") == 'DROP TABLE IF EXISTS "users"'
    assert ddl.drop_index_sql("ix") == 'DROP INDEX IF EXISTS "ix"'


def test_generate_sql_accepts_mapping_payloads() -> None:
    sql = ddl.generate_sql(
        "createTable",
        {"name": "t", "columns": [{"name": "id", "type": "INTEGER", "primaryKey": True}]},
    )
    assert sql == 'CREATE TABLE "t" (\n  "id" INTEGER PRIMARY KEY\n);'

    assert ddl.generate_sql("dropTable", "t") == 'DROP TABLE IF EXISTS "t";'
    assert ddl.generate_sql(ddl.DDLOperation.DROP_INDEX, "ix") == 'DROP INDEX IF EXISTS "ix";'
    assert ddl.generate_sql(
        "addColumn", {"tableName": "t", "column": {"name": "c", "type": "TEXT"}}
    ) == 'ALTER TABLE "t" ADD COLUMN "c" TEXT;'


def test_generate_sql_rejects_unknown_operation() -> None:
    with pytest.raises(UnknownOperationError, match="renameTable"):
        ddl.generate_sql("renameTable", {})


def test_generate_sql_rejects_bad_payloads() -> None:
    with pytest.raises(PayloadError):
        ddl.generate_sql("createTable", {"columns": []})
    with pytest.raises(PayloadError):
        ddl.generate_sql("dropTable", "")
    with pytest.raises(PayloadError):
        ddl.generate_sql("createIndex", ["not", "a", "mapping"])
