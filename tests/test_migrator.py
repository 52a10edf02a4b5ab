import sqlite3

import pytest

from rocketfactory.migrator import MigrationError, Migrator

TABLE = "schema_versions"


@pytest.fixture
def conn():
    connection = sqlite3.connect(":memory:")
    yield connection
    connection.close()


def _write(directory, name, text):
    (directory / name).write_text(text, encoding="utf-8")


def _versions(conn):
    return [row[0] for row in conn.execute(f"SELECT version_id FROM {TABLE} ORDER BY version_id")]


def test_applies_migrations_in_order(tmp_path, conn):
    _write(tmp_path, "00002_items.sql", "-- +goose Up\nINSERT INTO items (name) VALUES ('bolt');\n")
    _write(tmp_path, "00001_create.sql", "-- +goose Up\nCREATE TABLE items (name TEXT);\n")
    Migrator(conn, tmp_path, TABLE).up()
    assert [r[0] for r in conn.execute("SELECT name FROM items")] == ["bolt"]
    assert _versions(conn) == [0, 1, 2]


def test_up_is_idempotent(tmp_path, conn):
    _write(tmp_path, "1_create.sql", "-- +goose Up\nCREATE TABLE items (name TEXT);\n")
    migrator = Migrator(conn, tmp_path, TABLE)
    migrator.up()
    migrator.up()
    assert _versions(conn) == [0, 1]


def test_new_migration_applied_later(tmp_path, conn):
    _write(tmp_path, "1_create.sql", "-- +goose Up\nCREATE TABLE items (name TEXT);\n")
    Migrator(conn, tmp_path, TABLE).up()
    _write(tmp_path, "2_more.sql", "-- +goose Up\nCREATE TABLE other (id INTEGER);\n")
    Migrator(conn, tmp_path, TABLE).up()
    assert _versions(conn) == [0, 1, 2]
    assert conn.execute("SELECT COUNT(*) FROM other").fetchone()[0] == 0


def test_down_section_is_not_run(tmp_path, conn):
    text = "-- +goose Up\nCREATE TABLE items (name TEXT);\n\n-- +goose Down\nDROP TABLE items;\n"
    _write(tmp_path, "1_create.sql", text)
    Migrator(conn, tmp_path, TABLE).up()
    assert conn.execute("SELECT COUNT(*) FROM items").fetchone()[0] == 0


def test_statement_block_keeps_inner_semicolons(tmp_path, conn):
    text = (
        "-- +goose Up\n"
        "CREATE TABLE a (id INTEGER);\n"
        "CREATE TABLE b (id INTEGER);\n"
        "-- +goose StatementBegin\n"
        "CREATE TRIGGER copy_a AFTER INSERT ON a BEGIN\n"
        "    INSERT INTO b (id) VALUES (new.id);\n"
        "END;\n"
        "-- +goose StatementEnd\n"
    )
    _write(tmp_path, "1_trigger.sql", text)
    Migrator(conn, tmp_path, TABLE).up()
    conn.execute("INSERT INTO a (id) VALUES (7)")
    assert [r[0] for r in conn.execute("SELECT id FROM b")] == [7]


def test_missing_directory_raises(tmp_path, conn):
    with pytest.raises(MigrationError, match="does not exist"):
        Migrator(conn, tmp_path / "absent", TABLE).up()


def test_bad_file_name_raises(tmp_path, conn):
    _write(tmp_path, "create.sql", "-- +goose Up\nSELECT 1;\n")
    with pytest.raises(MigrationError):
        Migrator(conn, tmp_path, TABLE).up()


def test_missing_up_annotation_raises(tmp_path, conn):
    _write(tmp_path, "1_create.sql", "CREATE TABLE items (name TEXT);\n")
    with pytest.raises(MigrationError, match="Up"):
        Migrator(conn, tmp_path, TABLE).up()


def test_unfinished_statement_raises(tmp_path, conn):
    _write(tmp_path, "1_create.sql", "-- +goose Up\nCREATE TABLE items (name TEXT)\n")
    with pytest.raises(MigrationError):
        Migrator(conn, tmp_path, TABLE).up()


def test_failing_migration_stops_and_is_not_recorded(tmp_path, conn):
    _write(tmp_path, "1_create.sql", "-- +goose Up\nCREATE TABLE items (name TEXT);\n")
    _write(tmp_path, "2_broken.sql", "-- +goose Up\nINSERT INTO missing_table VALUES (1);\n")
    _write(tmp_path, "3_after.sql", "-- +goose Up\nCREATE TABLE later (id INTEGER);\n")
    with pytest.raises(MigrationError, match="2_broken.sql"):
        Migrator(conn, tmp_path, TABLE).up()
    assert _versions(conn) == [0, 1]
    with pytest.raises(sqlite3.OperationalError):
        conn.execute("SELECT * FROM later")


def test_duplicate_versions_raise(tmp_path, conn):
    _write(tmp_path, "1_a.sql", "-- +goose Up\nSELECT 1;\n")
    _write(tmp_path, "01_b.sql", "-- +goose Up\nSELECT 1;\n")
    with pytest.raises(MigrationError, match="duplicate"):
        Migrator(conn, tmp_path, TABLE).up()


def test_invalid_table_name_rejected(tmp_path, conn):
    with pytest.raises(ValueError):
        Migrator(conn, tmp_path, "bad name; DROP")