"""Storage backends."""

from rowmodel.storage.memory import MemoryBackend
from rowmodel.storage.protocol import StorageBackend
from rowmodel.storage.sqlite import SQLiteBackend

__all__ = [
    "StorageBackend",
    "MemoryBackend",
    "SQLiteBackend",
]
