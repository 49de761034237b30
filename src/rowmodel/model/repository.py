"""Per-type factory binding a Model class to a ModelContext.

Usage:
    users = Repository(User, ModelContext(backend=backend, emitter=emitter))

    draft = users.new({"name": "ada"})        # exists=False, nothing written
    user = users.create({"name": "grace"})    # inserted, "user.created" emitted
    row = backend.fetch_one("users", "id", 1)
    loaded = users.hydrate(row)               # exists=True, clean snapshot
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from rowmodel.events.protocol import Emitter
from rowmodel.model.context import ModelContext
from rowmodel.model.model import Model
from rowmodel.storage.protocol import StorageBackend


class Repository[M: Model]:
    """Builds models of one type that share a single context.

    Changing the backend or emitter here reconfigures every model this
    repository produced, since they all hold the same context object.

    Args:
        model: Model subclass to build.
        context: Shared configuration. A fresh, unbound context if omitted.
    """

    def __init__(self, model: type[M], context: ModelContext | None = None):
        self._model = model
        self._context = context if context is not None else ModelContext()

    @property
    def model(self) -> type[M]:
        return self._model

    @property
    def context(self) -> ModelContext:
        return self._context

    @property
    def backend(self) -> StorageBackend | None:
        return self._context.backend

    @backend.setter
    def backend(self, backend: StorageBackend | None) -> None:
        self._context.backend = backend

    @property
    def emitter(self) -> Emitter | None:
        return self._context.emitter

    @emitter.setter
    def emitter(self, emitter: Emitter | None) -> None:
        self._context.emitter = emitter

    def get_table_name(self) -> str:
        return self._model.get_table_name()

    def get_primary_key(self) -> str | None:
        return self._model.get_primary_key()

    def new(self, attributes: Mapping[str, Any] | None = None) -> M:
        """Build a model that will be inserted on its first save()."""
        return self._model(attributes, exists=False, context=self._context)

    def hydrate(self, row: Mapping[str, Any]) -> M:
        """Build a model for a row that already exists in the backend.

        Like any construction, the row passes through transformers.
        """
        return self._model(row, exists=True, context=self._context)

    def create(self, attributes: Mapping[str, Any]) -> M:
        """Build a model and insert it immediately.

        Returns:
            The saved model, with exists=True and any generated key set.

        Raises:
            Whatever Model.save() raises; nothing is retried.
        """
        return self._model.create(attributes, self._context)
