"""Storage protocol for swappable row-level backends.

The storage layer executes single-row operations against a named table:
- MemoryBackend: dict tables (tests, prototyping)
- SQLiteBackend: stdlib sqlite3

Usage:
    backend = SQLiteBackend.connect("app.db")
    users = Repository(User, ModelContext(backend=backend))
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class StorageBackend(Protocol):
    """Row-level operations over named tables.

    Errors raised by an implementation are propagated to the caller of
    Model.save()/delete() without wrapping or retry.
    """

    def insert(self, table: str, attributes: Mapping[str, Any]) -> None:
        """Insert one row."""
        ...

    def insert_and_return_id(self, table: str, attributes: Mapping[str, Any]) -> Any:
        """Insert one row and return its backend-generated key."""
        ...

    def update(self, table: str, key: str, value: Any, attributes: Mapping[str, Any]) -> int:
        """Write attributes to rows where key == value. Returns rows affected."""
        ...

    def delete(self, table: str, key: str, value: Any) -> int:
        """Delete rows where key == value. Returns rows affected."""
        ...
