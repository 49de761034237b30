"""Injected configuration shared by the models of one repository.

Usage:
    context = ModelContext(backend=MemoryBackend(), emitter=EventEmitter())
    users = Repository(User, context)

    # Reconfiguring the context affects every model bound to it
    context.set_backend(SQLiteBackend.connect("app.db"))
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from rowmodel.config.settings import ModelSettings
from rowmodel.core.timestamps import DEFAULT_TIMESPEC, Timespec, format_timestamp, utc_now
from rowmodel.events.protocol import Emitter
from rowmodel.storage.protocol import StorageBackend


@dataclass(slots=True)
class ModelContext:
    """Collaborators and settings a model needs to persist itself.

    Attributes:
        backend: Storage backend executing row operations, or None if unbound.
        emitter: Lifecycle event notifier, or None to disable events.
        clock: Source of the current time for created/updated stamps.
        timespec: Precision of created/updated stamps.
    """

    backend: StorageBackend | None = None
    emitter: Emitter | None = None
    clock: Callable[[], datetime] = field(default=utc_now)
    timespec: Timespec = DEFAULT_TIMESPEC

    @classmethod
    def from_settings(
        cls,
        settings: ModelSettings | None = None,
        backend: StorageBackend | None = None,
        emitter: Emitter | None = None,
    ) -> ModelContext:
        """Build a context whose stamp precision comes from ModelSettings."""
        settings = settings or ModelSettings()
        return cls(backend=backend, emitter=emitter, timespec=settings.timestamp_timespec)

    def get_backend(self) -> StorageBackend | None:
        return self.backend

    def set_backend(self, backend: StorageBackend | None) -> None:
        self.backend = backend

    def get_emitter(self) -> Emitter | None:
        return self.emitter

    def set_emitter(self, emitter: Emitter | None) -> None:
        self.emitter = emitter

    def timestamp(self) -> str:
        """Current time in the fixed stamp format."""
        return format_timestamp(self.clock(), self.timespec)
