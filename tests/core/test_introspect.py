from __future__ import annotations

from pathlib import Path

from litedesk.core.service import DatabaseService
from litedesk.core.types import DDLResult


def _info_for(service: DatabaseService, db_path: Path, sql: str):
    results = service.execute_batch(db_path, sql)
    assert all(result.kind != "error" for result in results), results
    return service.get_info(db_path)


def test_tables_sorted_and_system_tables_hidden(service: DatabaseService, db_path: Path) -> None:
    info = _info_for(
        service,
        db_path,
        "CREATE TABLE zeta (id INTEGER PRIMARY KEY AUTOINCREMENT, v TEXT);"
        "CREATE TABLE alpha (id INTEGER);"
        "INSERT INTO zeta (v) VALUES ('x');",
    )

    assert [table.name for table in info.tables] == ["alpha", "zeta"]
    assert info.table("zeta").row_count == 1
    assert info.name == "test.db"
    assert info.size > 0


def test_column_metadata(service: DatabaseService, db_path: Path) -> None:
    info = _info_for(
        service,
        db_path,
        "CREATE TABLE t (id INTEGER PRIMARY KEY, label NOT NULL DEFAULT 'n/a', score REAL)",
    )

    columns = info.table("t").columns
    assert [(c.cid, c.name, c.type) for c in columns] == [
        (0, "id", "INTEGER"),
        (1, "label", "TEXT"),
        (2, "score", "REAL"),
    ]
    assert columns[0].primary_key is True
    assert columns[1].not_null is True
    assert columns[1].default_value == "'n/a'"
    assert columns[2].default_value is None


def test_unique_flag_only_for_single_column_unique_indexes(service: DatabaseService, db_path: Path) -> None:
    info = _info_for(
        service,
        db_path,
        "CREATE TABLE t (col TEXT, a TEXT, b TEXT, c TEXT);"
        "CREATE UNIQUE INDEX ux ON t(col);"
        "CREATE UNIQUE INDEX ux_pair ON t(a, b);"
        "CREATE INDEX ix_c ON t(c);",
    )

    table = info.table("t")
    flags = {column.name: column.unique for column in table.columns}
    assert flags == {"col": True, "a": False, "b": False, "c": False}
    assert sorted((index.name, index.unique, index.columns) for index in table.indexes) == [
        ("ix_c", False, ("c",)),
        ("ux", True, ("col",)),
        ("ux_pair", True, ("a", "b")),
    ]


def test_autoindexes_mark_unique_but_are_not_listed(service: DatabaseService, db_path: Path) -> None:
    info = _info_for(service, db_path, "CREATE TABLE t (email TEXT UNIQUE)")

    table = info.table("t")
    assert table.columns[0].unique is True
    assert table.indexes == ()


def test_foreign_keys_and_views(service: DatabaseService, db_path: Path) -> None:
    info = _info_for(
        service,
        db_path,
        "CREATE TABLE parent (id INTEGER PRIMARY KEY);"
        "CREATE TABLE child (id INTEGER, parent_id INTEGER REFERENCES parent(id) ON DELETE CASCADE);"
        "CREATE VIEW v_b AS SELECT id FROM child;"
        "CREATE VIEW v_a AS SELECT id FROM parent;",
    )

    (fk,) = info.table("child").foreign_keys
    assert (fk.id, fk.seq, fk.table, fk.from_column, fk.to_column) == (0, 0, "parent", "parent_id", "id")
    assert fk.on_delete == "CASCADE"
    assert fk.on_update == "NO ACTION"
    assert [view.name for view in info.views] == ["v_a", "v_b"]
    assert info.views[0].sql.startswith("CREATE VIEW v_a")


def test_quoted_table_names_are_escaped(service: DatabaseService, db_path: Path) -> None:
    info = _info_for(service, db_path, 'CREATE TABLE "odd ""name""" (x INTEGER)')

    assert [table.name for table in info.tables] == ['odd "name"']
    assert info.table('odd "name"').columns[0].name == "x"


def test_create_table_round_trip(service: DatabaseService, db_path: Path) -> None:
    payload = {
        "name": "people",
        "columns": [
            {"name": "id", "type": "INTEGER", "primaryKey": True},
            {"name": "email", "type": "TEXT", "notNull": True, "unique": True},
            {"name": "age", "type": "INTEGER", "defaultValue": "0"},
        ],
    }
    sql = service.generate_sql("createTable", payload)

    result = service.execute_query(db_path, sql)

    assert isinstance(result, DDLResult)
    columns = service.get_info(db_path).table("people").columns
    assert [column.name for column in columns] == ["id", "email", "age"]
    assert [column.unique for column in columns] == [False, True, False]
    assert columns[2].default_value == "0"
