"""Local in-memory storage implementation.

Simple dict-based storage suitable for single-process use and testing.

Usage:
    backend = MemoryBackend()
    users = Repository(User, ModelContext(backend=backend))
    users.create({"name": "ada"})
    backend.rows("users")  # [{"name": "ada", "created_at": "...", "id": 1}]

    # Tables keyed by something other than "id"
    backend = MemoryBackend(id_columns={"accounts": "account_id"})
"""

from __future__ import annotations

import copy as cp
import logging
from collections.abc import Mapping
from typing import Any

logger = logging.getLogger(__name__)


class MemoryBackend:
    """In-memory tables of row dicts with per-table autoincrement keys.

    Rows are stored and returned as deep copies so that callers never share
    structure with the stored state.

    Args:
        id_columns: Per-table column filled by insert_and_return_id, e.g.
            {"accounts": "account_id"}. Must match the model's primary_key.
        default_id_column: Column used for tables missing from id_columns.
    """

    def __init__(self, id_columns: Mapping[str, str] | None = None, default_id_column: str = "id"):
        self._id_columns = dict(id_columns or {})
        self._default_id_column = default_id_column
        self._tables: dict[str, list[dict[str, Any]]] = {}
        self._sequences: dict[str, int] = {}

    def id_column(self, table: str) -> str:
        """Column that holds generated ids for table."""
        return self._id_columns.get(table, self._default_id_column)

    def _table(self, table: str) -> list[dict[str, Any]]:
        return self._tables.setdefault(table, [])

    def _next_id(self, table: str) -> int:
        self._sequences[table] = self._sequences.get(table, 0) + 1
        return self._sequences[table]

    def insert(self, table: str, attributes: Mapping[str, Any]) -> None:
        """Append a copy of attributes to table.

        Args:
            table: Table name (created on first use).
            attributes: Column values.
        """
        self._table(table).append(cp.deepcopy(dict(attributes)))
        logger.debug("memory insert into %s", table)

    def insert_and_return_id(self, table: str, attributes: Mapping[str, Any]) -> int:
        """Insert a row with a generated id, ignoring any id already present.

        Args:
            table: Table name (created on first use).
            attributes: Column values.

        Returns:
            The generated integer id.
        """
        row = cp.deepcopy(dict(attributes))
        row_id = self._next_id(table)
        row[self.id_column(table)] = row_id
        self._table(table).append(row)
        logger.debug("memory insert into %s returned id %s", table, row_id)
        return row_id

    def update(self, table: str, key: str, value: Any, attributes: Mapping[str, Any]) -> int:
        """Merge attributes into every row where key == value.

        Returns:
            Number of rows affected.
        """
        affected = 0
        for row in self._table(table):
            if row.get(key) == value:
                row.update(cp.deepcopy(dict(attributes)))
                affected += 1
        logger.debug("memory update on %s where %s=%r affected %d", table, key, value, affected)
        return affected

    def delete(self, table: str, key: str, value: Any) -> int:
        """Remove every row where key == value.

        Returns:
            Number of rows removed.
        """
        rows = self._table(table)
        kept = [row for row in rows if row.get(key) != value]
        affected = len(rows) - len(kept)
        self._tables[table] = kept
        logger.debug("memory delete on %s where %s=%r affected %d", table, key, value, affected)
        return affected

    def rows(self, table: str) -> list[dict[str, Any]]:
        """Return copies of all rows in table, in insertion order."""
        return cp.deepcopy(self._tables.get(table, []))

    def fetch_one(self, table: str, key: str, value: Any) -> dict[str, Any] | None:
        """Return a copy of the first row where key == value, or None."""
        for row in self._tables.get(table, []):
            if row.get(key) == value:
                return cp.deepcopy(row)
        return None
