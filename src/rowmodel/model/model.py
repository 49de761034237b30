"""The Model base class: one persisted row with change tracking.

Usage:
    class User(Model):
        table_name = "users"
        primary_key = "id"
        protected_fields = frozenset({"password"})

        @transformer("password")
        def hash_password(self, value: str) -> None:
            self.attributes["password"] = sha256(value.encode()).hexdigest()

    users = Repository(User, ModelContext(backend=MemoryBackend()))
    user = users.create({"name": "ada", "password": "secret"})

    user["profile.city"] = "London"   # nested upsert
    user.get_mutated_attributes()      # {"profile": {"city": "London"}}
    user.save()                        # UPDATE ... SET profile = ? WHERE id = ?
"""

from __future__ import annotations

import copy as cp
import json
import logging
from collections.abc import Iterator, Mapping
from typing import Any, ClassVar, Self

from rowmodel.core.dirty import diff, snapshot
from rowmodel.core.errors import (
    InvalidArgumentError,
    MissingPrimaryKeyError,
    ModelConfigurationError,
    NotPersistedError,
    UnimplementedError,
)
from rowmodel.core.paths import SEPARATOR, path_get, path_has
from rowmodel.core.paths import upsert as path_upsert
from rowmodel.core.transformers import Transformer, TransformerRegistry, collect_transformers
from rowmodel.model.context import ModelContext
from rowmodel.storage.protocol import StorageBackend

logger = logging.getLogger(__name__)


class Model:
    """In-memory representation of one row of a named table.

    Per-type metadata is declared as class attributes on subclasses:

    Attributes:
        table_name: Table the rows live in. Defaults to the lowercased class name.
        primary_key: Primary key column, or None if the table has none.
        incrementing: Whether the backend generates the primary key on insert.
        created_at_field: Column stamped on insert; None or "" disables it.
        updated_at_field: Column stamped on update; None or "" disables it.
        protected_fields: Columns left out of to_dict()/to_json() but still persisted.

    Instance state:
        attributes: Current column values, in insertion order.
        exists: True if the model corresponds to a row already in the backend.
    """

    table_name: ClassVar[str | None] = None
    primary_key: ClassVar[str | None] = None
    incrementing: ClassVar[bool] = True
    created_at_field: ClassVar[str | None] = "created_at"
    updated_at_field: ClassVar[str | None] = "updated_at"
    protected_fields: ClassVar[frozenset[str]] = frozenset()

    __transformers__: ClassVar[TransformerRegistry] = TransformerRegistry()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        # Start from the parent's registry so subclasses inherit transformers
        registry = cls.__transformers__.copy()
        for field, fn in collect_transformers(vars(cls)):
            registry.register(field, fn)
        cls.__transformers__ = registry
        cls.protected_fields = frozenset(cls.protected_fields)

    def __init__(
        self,
        attributes: Mapping[str, Any] | None = None,
        exists: bool = True,
        *,
        context: ModelContext | None = None,
    ):
        """Build a model from raw column values.

        Every entry passes through set_attribute, so transformers run.

        Args:
            attributes: Initial column values.
            exists: True when hydrated from the backend, False for a new row.
            context: Backend/emitter configuration. Required to persist.
        """
        self.attributes: dict[str, Any] = {}
        self._context = context
        if attributes:
            self.set_attribute(attributes)
        self.exists = exists
        self._original = snapshot(self.attributes)

    # Metadata

    @classmethod
    def get_table_name(cls) -> str:
        return cls.table_name or cls.__name__.lower()

    @classmethod
    def get_primary_key(cls) -> str | None:
        return cls.primary_key or None

    @classmethod
    def has_transformer(cls, name: str) -> bool:
        """Check whether assignments to name are intercepted by a transformer."""
        return name in cls.__transformers__

    @classmethod
    def register_transformer(cls, name: str, fn: Transformer) -> None:
        """Register fn(model, value) as the transformer for name on this type.

        Subclasses copy their parent's registry when they are defined, so a
        registration reaches subclasses defined afterwards only.

        Raises:
            ModelConfigurationError: If called on Model itself.
        """
        if cls is Model:
            raise ModelConfigurationError("Register transformers on a Model subclass, not on Model")
        cls.__transformers__.register(name, fn)

    @property
    def context(self) -> ModelContext | None:
        return self._context

    @context.setter
    def context(self, context: ModelContext | None) -> None:
        self._context = context

    @property
    def original(self) -> dict[str, Any]:
        """Copy of the snapshot taken at construction or at the last successful save."""
        return snapshot(self._original)

    # Attribute access

    def get_attribute(self, name: str) -> Any:
        """Direct lookup without path traversal. Returns None when absent."""
        return self.attributes.get(name)

    def set_attribute(self, name: str | Mapping[str, Any], value: Any = None) -> None:
        """Assign one attribute or a mapping of attributes.

        Names with a registered transformer are handed to it instead of
        being stored directly.

        Args:
            name: Attribute name, or a mapping of names to values.
            value: Value for the single-name form. Ignored for mappings.

        Raises:
            InvalidArgumentError: If the single-name form gets a None value.
        """
        if isinstance(name, Mapping):
            items = list(name.items())
        else:
            if value is None:
                raise InvalidArgumentError(f"Value for attribute '{name}' cannot be None")
            items = [(name, value)]

        for field, field_value in items:
            fn = self.__transformers__.get(field)
            if fn is not None:
                fn(self, field_value)
            else:
                self.attributes[field] = field_value

    def get_mutated_attributes(self) -> dict[str, Any]:
        """Attributes that are new or changed since the last snapshot."""
        return diff(self.attributes, self._original)

    def is_dirty(self) -> bool:
        return bool(self.get_mutated_attributes())

    # Persistence

    def _require_backend(self) -> tuple[ModelContext, StorageBackend]:
        context = self._context
        backend = context.backend if context is not None else None
        if context is None or backend is None:
            raise ModelConfigurationError(
                f"{type(self).__name__} is not bound to a storage backend. "
                "Create it through a Repository or pass context=ModelContext(backend=...)"
            )
        return context, backend

    def _require_primary_key(self, operation: str) -> str:
        primary_key = self.get_primary_key()
        if primary_key is None:
            raise MissingPrimaryKeyError(
                f"A {type(self).__name__} without a primary key cannot be {operation}"
            )
        return primary_key

    @classmethod
    def create(cls, attributes: Mapping[str, Any], context: ModelContext) -> Self:
        """Build a new model and insert it immediately.

        Raises:
            Whatever save() raises.
        """
        instance = cls(attributes, exists=False, context=context)
        instance.save()
        return instance

    def save(self) -> bool:
        """Insert the model if new, otherwise write its dirty attributes.

        An existing model with no changes returns immediately without
        touching the backend or emitting an event.

        Returns:
            True once the backend reported success.

        Raises:
            MissingPrimaryKeyError: If an update is needed but the type has no primary key.
            ModelConfigurationError: If no storage backend is bound.
        """
        if not self.exists:
            self._perform_insert()
        else:
            mutated = self.get_mutated_attributes()
            if not mutated:
                logger.debug("%s unchanged, skipping update", type(self).__name__)
                return True
            self._perform_update(mutated)

        self._original = snapshot(self.attributes)
        return True

    def _perform_insert(self) -> None:
        context, backend = self._require_backend()
        if self.created_at_field:
            self.attributes[self.created_at_field] = context.timestamp()

        table = self.get_table_name()
        primary_key = self.get_primary_key()
        if self.incrementing and primary_key:
            self.attributes[primary_key] = backend.insert_and_return_id(table, dict(self.attributes))
        else:
            backend.insert(table, dict(self.attributes))
        logger.debug("inserted %s into %s", type(self).__name__, table)

        self.exists = True
        self.trigger("created")

    def _perform_update(self, mutated: dict[str, Any]) -> None:
        primary_key = self._require_primary_key("updated")
        context, backend = self._require_backend()
        if self.updated_at_field:
            stamp = context.timestamp()
            self.attributes[self.updated_at_field] = stamp
            mutated[self.updated_at_field] = stamp

        table = self.get_table_name()
        backend.update(table, primary_key, self.attributes.get(primary_key), mutated)
        logger.debug("updated %s in %s: %s", type(self).__name__, table, sorted(mutated))

        self.trigger("updated")

    def update(self, attributes: Mapping[str, Any]) -> bool:
        """Merge attributes into the model and save.

        The merge is a plain dict update: transformers do not run here,
        unlike set_attribute().
        """
        self.attributes.update(attributes)
        return self.save()

    def delete(self) -> bool:
        """Delete the backing row. Attributes are kept; exists becomes False.

        Raises:
            MissingPrimaryKeyError: If the type has no primary key.
            NotPersistedError: If the model was never saved or already deleted.
            ModelConfigurationError: If no storage backend is bound.
        """
        primary_key = self._require_primary_key("deleted")
        if not self.exists:
            raise NotPersistedError(
                f"{type(self).__name__} has no row in '{self.get_table_name()}' to delete"
            )
        _, backend = self._require_backend()

        table = self.get_table_name()
        backend.delete(table, primary_key, self.attributes.get(primary_key))
        logger.debug("deleted %s from %s", type(self).__name__, table)

        self.exists = False
        self.trigger("deleted")
        return True

    # Events

    def trigger(self, event_name: str, arguments: Any = None) -> None:
        """Publish "<lowercased type name>.<event_name>" if an emitter is bound.

        Args:
            event_name: Event suffix, e.g. "created".
            arguments: Payload; a non-sequence is wrapped in a list.
                Defaults to [self].
        """
        emitter = self._context.emitter if self._context is not None else None
        if emitter is None:
            return

        if arguments is None:
            payload = [self]
        elif isinstance(arguments, list | tuple):
            payload = list(arguments)
        else:
            payload = [arguments]
        emitter.emit(f"{type(self).__name__.lower()}.{event_name}", payload)

    # Serialization

    def to_dict(self) -> dict[str, Any]:
        """Attributes without protected fields. Values are copies."""
        return {
            name: cp.deepcopy(value)
            for name, value in self.attributes.items()
            if name not in self.protected_fields
        }

    def to_json(self, **kwargs: Any) -> str:
        """Serialize to_dict() as JSON. Keyword arguments go to json.dumps."""
        return json.dumps(self.to_dict(), **kwargs)

    # Dot-path access

    def has(self, path: str) -> bool:
        """Check that every segment of a dot-path holds a non-None value."""
        return path_has(self.attributes, path)

    def get(self, path: str, default: Any = None) -> Any:
        """Resolve a dot-path, returning default if any segment is missing."""
        if SEPARATOR not in path:
            value = self.get_attribute(path)
            return default if value is None else value
        return path_get(self.attributes, path, default)

    def set(self, path: str, value: Any) -> None:
        """Assign at a dot-path.

        A single segment goes through set_attribute (transformers run).
        Longer paths create missing intermediate mappings and write the
        rebuilt subtree back under the top-level key.

        Raises:
            InvalidArgumentError: If a single segment gets a None value.
            TypeError: If an intermediate segment holds a non-mapping value.
        """
        head, _, rest = path.partition(SEPARATOR)
        if not rest:
            self.set_attribute(path, value)
            return
        self.attributes[head] = path_upsert(self.attributes, path, value)[head]

    def unset(self, path: str) -> None:
        raise UnimplementedError("Removing attributes by path is not supported")

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and self.has(path)

    def __getitem__(self, path: str) -> Any:
        return self.get(path)

    def __setitem__(self, path: str, value: Any) -> None:
        self.set(path, value)

    def __delitem__(self, path: str) -> None:
        self.unset(path)

    def __iter__(self) -> Iterator[str]:
        return iter(self.attributes)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(exists={self.exists}, attributes={self.to_dict()!r})"
