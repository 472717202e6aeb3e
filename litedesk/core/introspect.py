"""Schema snapshot reconstruction from SQLite catalog queries."""

from __future__ import annotations

import os
import sqlite3
from pathlib import Path
from typing import TYPE_CHECKING

from .ddl import escape_identifier
from .types import ColumnInfo, DatabaseInfo, ForeignKeyInfo, IndexInfo, TableInfo, ViewInfo

if TYPE_CHECKING:
    from .registry import SessionRegistry

DEFAULT_COLUMN_TYPE = "TEXT"
INTERNAL_PREFIX = "sqlite_"


def introspect(registry: SessionRegistry, path: str | os.PathLike[str]) -> DatabaseInfo:
    """Rebuild the full ``DatabaseInfo`` for an open session.

    Catalog failures are not caught; they propagate as ``sqlite3.Error``.
    """
    return introspect_connection(os.fspath(path), registry.get(path))


def introspect_connection(path: str, connection: sqlite3.Connection) -> DatabaseInfo:
    tables = tuple(
        _describe_table(connection, name) for name in _fetch_table_names(connection)
    )
    views = _fetch_views(connection)
    return DatabaseInfo(
        path=path,
        name=Path(path).name,
        size=_file_size(path),
        tables=tables,
        views=views,
    )


# ---------------------------------------------------------------------------
# Internal helpers


def _file_size(path: str) -> int:
    try:
        return os.stat(path).st_size
    except FileNotFoundError:
        return 0


def _fetch_table_names(connection: sqlite3.Connection) -> list[str]:
    cursor = connection.execute(
        "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%' ORDER BY name"
    )
    return [row[0] for row in cursor.fetchall()]


def _describe_table(connection: sqlite3.Connection, table: str) -> TableInfo:
    index_rows = _fetch_index_list(connection, table)
    return TableInfo(
        name=table,
        columns=_fetch_columns(connection, table, index_rows),
        indexes=_fetch_indexes(connection, index_rows),
        foreign_keys=_fetch_foreign_keys(connection, table),
        row_count=_count_rows(connection, table),
    )


def _fetch_index_list(connection: sqlite3.Connection, table: str) -> list[tuple[str, bool]]:
    # index_list rows: (seq, name, unique, origin, partial)
    cursor = connection.execute(f"PRAGMA index_list({escape_identifier(table)})")
    return [(row[1], bool(row[2])) for row in cursor.fetchall()]


def _fetch_index_columns(connection: sqlite3.Connection, index: str) -> tuple[str, ...]:
    # index_info rows: (seqno, cid, name); name is NULL for expression columns
    cursor = connection.execute(f"PRAGMA index_info({escape_identifier(index)})")
    return tuple(row[2] for row in cursor.fetchall())


def _fetch_columns(
    connection: sqlite3.Connection,
    table: str,
    index_rows: list[tuple[str, bool]],
) -> tuple[ColumnInfo, ...]:
    unique_columns: set[str] = set()
    for index_name, unique in index_rows:
        if not unique:
            continue
        index_columns = _fetch_index_columns(connection, index_name)
        if len(index_columns) == 1 and index_columns[0] is not None:
            unique_columns.add(index_columns[0])

    # table_info rows: (cid, name, type, notnull, dflt_value, pk)
    cursor = connection.execute(f"PRAGMA table_info({escape_identifier(table)})")
    return tuple(
        ColumnInfo(
            cid=int(row[0]),
            name=row[1],
            type=row[2] or DEFAULT_COLUMN_TYPE,
            not_null=row[3] == 1,
            default_value=row[4],
            primary_key=row[5] > 0,
            unique=row[1] in unique_columns,
        )
        for row in cursor.fetchall()
    )


def _fetch_indexes(
    connection: sqlite3.Connection, index_rows: list[tuple[str, bool]]
) -> tuple[IndexInfo, ...]:
    return tuple(
        IndexInfo(
            name=index_name,
            unique=unique,
            columns=_fetch_index_columns(connection, index_name),
        )
        for index_name, unique in index_rows
        if not index_name.startswith(INTERNAL_PREFIX)
    )


def _fetch_foreign_keys(connection: sqlite3.Connection, table: str) -> tuple[ForeignKeyInfo, ...]:
    # foreign_key_list rows: (id, seq, table, from, to, on_update, on_delete, match)
    cursor = connection.execute(f"PRAGMA foreign_key_list({escape_identifier(table)})")
    return tuple(
        ForeignKeyInfo(
            id=int(row[0]),
            seq=int(row[1]),
            table=row[2],
            from_column=row[3],
            to_column=row[4],
            on_update=row[5],
            on_delete=row[6],
        )
        for row in cursor.fetchall()
    )


def _count_rows(connection: sqlite3.Connection, table: str) -> int:
    cursor = connection.execute(f"SELECT COUNT(*) FROM {escape_identifier(table)}")
    return int(cursor.fetchone()[0])


def _fetch_views(connection: sqlite3.Connection) -> tuple[ViewInfo, ...]:
    cursor = connection.execute("SELECT name, sql FROM sqlite_master WHERE type='view' ORDER BY name")
    return tuple(ViewInfo(name=row[0], sql=row[1]) for row in cursor.fetchall())
