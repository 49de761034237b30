"""SQLite storage backend.

Executes the four row-level operations over a single sqlite3 connection
in autocommit mode. Each statement stands alone; there are no
transactions spanning several models.

Usage:
    backend = SQLiteBackend.connect("app.db")
    backend.execute("CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT)")
    users = Repository(User, ModelContext(backend=backend))

Invariants:
    - Table and column names are always quoted identifiers
    - Values are always bound parameters
    - sqlite3.Error is never caught here
"""

from __future__ import annotations

import json
import logging
import sqlite3
from collections.abc import Iterable, Mapping, Sequence
from types import TracebackType
from typing import Any, Self

from rowmodel.config.settings import SQLiteSettings

logger = logging.getLogger(__name__)


def quote_identifier(name: str) -> str:
    """Quote a table or column name for SQLite."""
    return '"' + name.replace('"', '""') + '"'


class SQLiteBackend:
    """StorageBackend implementation on top of the sqlite3 module.

    Args:
        connection: Open sqlite3 connection. The backend sets its row factory.
        json_columns: Encode mapping and list values as JSON text on write.
    """

    def __init__(self, connection: sqlite3.Connection, json_columns: bool = True):
        self._connection = connection
        self._connection.row_factory = sqlite3.Row
        self._json_columns = json_columns

    @classmethod
    def connect(
        cls, path: str = ":memory:", timeout: float = 5.0, json_columns: bool = True
    ) -> Self:
        """Open a database file in autocommit mode.

        Args:
            path: Database file path or ":memory:".
            timeout: Seconds to wait on a locked database.
            json_columns: Encode mapping and list values as JSON text.

        Returns:
            Backend owning the new connection.
        """
        connection = sqlite3.connect(path, timeout=timeout, isolation_level=None)
        logger.debug("opened sqlite database %s", path)
        return cls(connection, json_columns=json_columns)

    @classmethod
    def from_settings(cls, settings: SQLiteSettings | None = None) -> Self:
        """Open a database described by SQLiteSettings (read from env if omitted)."""
        settings = settings or SQLiteSettings()
        return cls.connect(
            settings.path, timeout=settings.timeout, json_columns=settings.json_columns
        )

    @property
    def connection(self) -> sqlite3.Connection:
        return self._connection

    def _encode(self, value: Any) -> Any:
        if self._json_columns and isinstance(value, Mapping | list | tuple):
            return json.dumps(value)
        return value

    def _columns(self, attributes: Mapping[str, Any]) -> tuple[list[str], list[Any]]:
        columns = [quote_identifier(name) for name in attributes]
        values = [self._encode(value) for value in attributes.values()]
        return columns, values

    def execute(self, sql: str, params: Sequence[Any] = ()) -> sqlite3.Cursor:
        """Run raw SQL, e.g. schema setup. Errors propagate unchanged."""
        return self._connection.execute(sql, params)

    def _insert(self, table: str, attributes: Mapping[str, Any]) -> sqlite3.Cursor:
        if not attributes:
            sql = f"INSERT INTO {quote_identifier(table)} DEFAULT VALUES"
            return self._connection.execute(sql)
        columns, values = self._columns(attributes)
        placeholders = ", ".join("?" for _ in columns)
        sql = f"INSERT INTO {quote_identifier(table)} ({', '.join(columns)}) VALUES ({placeholders})"
        return self._connection.execute(sql, values)

    def insert(self, table: str, attributes: Mapping[str, Any]) -> None:
        """Insert one row."""
        self._insert(table, attributes)
        logger.debug("sqlite insert into %s", table)

    def insert_and_return_id(self, table: str, attributes: Mapping[str, Any]) -> int | None:
        """Insert one row and return its rowid.

        For INTEGER PRIMARY KEY tables the rowid is the generated key.
        """
        row_id = self._insert(table, attributes).lastrowid
        logger.debug("sqlite insert into %s returned id %s", table, row_id)
        return row_id

    def update(self, table: str, key: str, value: Any, attributes: Mapping[str, Any]) -> int:
        """Write attributes to rows where key == value.

        Returns:
            Number of rows affected. An empty attributes mapping is a no-op.
        """
        if not attributes:
            return 0
        columns, values = self._columns(attributes)
        assignments = ", ".join(f"{column} = ?" for column in columns)
        sql = (
            f"UPDATE {quote_identifier(table)} SET {assignments} "
            f"WHERE {quote_identifier(key)} = ?"
        )
        affected = self._connection.execute(sql, [*values, value]).rowcount
        logger.debug("sqlite update on %s where %s=%r affected %d", table, key, value, affected)
        return affected

    def delete(self, table: str, key: str, value: Any) -> int:
        """Delete rows where key == value. Returns rows affected."""
        sql = f"DELETE FROM {quote_identifier(table)} WHERE {quote_identifier(key)} = ?"
        affected = self._connection.execute(sql, [value]).rowcount
        logger.debug("sqlite delete on %s where %s=%r affected %d", table, key, value, affected)
        return affected

    def fetch_one(
        self, table: str, key: str, value: Any, json_fields: Iterable[str] = ()
    ) -> dict[str, Any] | None:
        """Load the first row where key == value, for hydrating a model.

        Args:
            table: Table name.
            key: Column to match.
            value: Value to match.
            json_fields: Columns to decode from JSON text.

        Returns:
            Row as a dict, or None when no row matches.
        """
        sql = f"SELECT * FROM {quote_identifier(table)} WHERE {quote_identifier(key)} = ? LIMIT 1"
        row = self._connection.execute(sql, [value]).fetchone()
        if row is None:
            return None
        result = dict(row)
        for name in json_fields:
            if isinstance(result.get(name), str):
                result[name] = json.loads(result[name])
        return result

    def close(self) -> None:
        """Close the underlying connection."""
        self._connection.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
