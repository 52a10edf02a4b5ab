"""Apply versioned SQL migration files to a DB-API connection."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

_log = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_DIRECTIVE = "-- +goose"


class MigrationError(Exception):
    """A migration could not be found, parsed or applied."""


@dataclass(frozen=True)
class _Migration:
    version: int
    path: Path


def _parse_up(text: str, source: str) -> list[str]:
    statements: list[str] = []
    buffer: list[str] = []
    seen_up = in_up = in_block = False

    def flush() -> None:
        statement = "\n".join(buffer).strip()
        buffer.clear()
        if statement:
            statements.append(statement)

    for line in text.splitlines():
        stripped = line.strip()
        if stripped.startswith(_DIRECTIVE):
            directive = stripped[len(_DIRECTIVE):].strip().upper()
            if directive == "UP":
                seen_up = in_up = True
            elif directive == "DOWN":
                if in_up:
                    break
            elif in_up and directive == "STATEMENTBEGIN":
                in_block = True
            elif in_up and directive == "STATEMENTEND":
                flush()
                in_block = False
            continue
        if not in_up:
            continue
        if not in_block and (not stripped or stripped.startswith("--")):
            continue
        buffer.append(line)
        if not in_block and stripped.endswith(";"):
            flush()

    if not seen_up:
        raise MigrationError(f"{source}: missing '{_DIRECTIVE} Up' annotation")
    if in_block:
        raise MigrationError(f"{source}: missing '{_DIRECTIVE} StatementEnd' annotation")
    if any(line.strip() for line in buffer):
        raise MigrationError(f"{source}: unfinished SQL statement")
    return statements


class Migrator:
    """Runs pending up-migrations from a directory of numbered .sql files."""

    def __init__(self, connection: Any, migrations_dir: str | Path, table: str = "goose_db_version") -> None:
        if not _IDENTIFIER.match(table):
            raise ValueError(f"invalid version table name: {table!r}")
        self._connection = connection
        self._dir = Path(migrations_dir)
        self._table = table

    def _collect(self) -> list[_Migration]:
        if not self._dir.is_dir():
            raise MigrationError(f"{self._dir} directory does not exist")
        migrations: dict[int, _Migration] = {}
        for path in self._dir.glob("*.sql"):
            prefix, sep, _ = path.name.partition("_")
            if not sep or not prefix.isdigit():
                raise MigrationError(f"{path.name}: expected a numeric version followed by '_'")
            version = int(prefix)
            if version < 1:
                raise MigrationError(f"{path.name}: migration versions must be greater than zero")
            if version in migrations:
                raise MigrationError(
                    f"duplicate migration version {version}: {migrations[version].path.name}, {path.name}"
                )
            migrations[version] = _Migration(version, path)
        return sorted(migrations.values(), key=lambda m: m.version)

    def _ensure_table(self, cursor: Any) -> None:
        try:
            cursor.execute(f"SELECT 1 FROM {self._table}")
            cursor.fetchall()
            return
        except Exception:
            self._connection.rollback()
        cursor.execute(
            f"CREATE TABLE {self._table} ("
            "version_id BIGINT NOT NULL, "
            "is_applied BOOLEAN NOT NULL, "
            "tstamp TIMESTAMP DEFAULT CURRENT_TIMESTAMP)"
        )
        cursor.execute(f"INSERT INTO {self._table} (version_id, is_applied) VALUES (0, TRUE)")
        self._connection.commit()

    def _current_version(self, cursor: Any) -> int:
        cursor.execute(f"SELECT MAX(version_id) FROM {self._table} WHERE is_applied")
        row = cursor.fetchone()
        return int(row[0]) if row and row[0] is not None else 0

    def _apply(self, cursor: Any, migration: _Migration) -> None:
        statements = _parse_up(migration.path.read_text(encoding="utf-8"), migration.path.name)
        try:
            for statement in statements:
                cursor.execute(statement)
            cursor.execute(
                f"INSERT INTO {self._table} (version_id, is_applied) VALUES ({int(migration.version)}, TRUE)"
            )
            self._connection.commit()
        except Exception as exc:
            self._connection.rollback()
            raise MigrationError(f"failed to apply migration {migration.path.name}: {exc}") from exc
        _log.info("OK %s", migration.path.name)

    def up(self) -> None:
        """Apply every migration newer than the recorded version."""
        migrations = self._collect()
        cursor = self._connection.cursor()
        try:
            self._ensure_table(cursor)
            current = self._current_version(cursor)
            pending = [m for m in migrations if m.version > current]
            if not pending:
                _log.info("no migrations to run. current version: %d", current)
            for migration in pending:
                self._apply(cursor, migration)
        finally:
            cursor.close()