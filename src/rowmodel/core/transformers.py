"""Per-model-type transformer registry and decorator.

A transformer intercepts assignment of one field. It receives the model
and the incoming value and writes whatever it wants into
``model.attributes`` itself, which allows derived storage such as hashing
a password before it is kept.

Usage:
    class User(Model):
        @transformer("password")
        def hash_password(self, value: str) -> None:
            self.attributes["password"] = sha256(value.encode()).hexdigest()

    User.has_transformer("password")  # True
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

type Transformer = Callable[[Any, Any], None]
"""Callable taking (model, value). Its return value is ignored."""

_FIELD_MARKER = "__transformer_field__"


class TransformerRegistry:
    """Maps field names to transformer callables for one model type.

    Registries are built when a model class is defined. A subclass starts
    from a copy of its parent's registry, so overrides stay local to the
    subclass.
    """

    def __init__(self, entries: dict[str, Transformer] | None = None) -> None:
        self._by_field: dict[str, Transformer] = dict(entries or {})

    def register(self, field: str, fn: Transformer) -> None:
        """Register fn as the transformer for field, replacing any previous one.

        Args:
            field: Attribute name to intercept.
            fn: Callable taking (model, value).

        Raises:
            TypeError: If fn is not callable.
        """
        if not callable(fn):
            raise TypeError(f"Transformer for '{field}' must be callable, got {type(fn)}")
        self._by_field[field] = fn

    def get(self, field: str) -> Transformer | None:
        """Look up the transformer for field, or None."""
        return self._by_field.get(field)

    def __contains__(self, field: object) -> bool:
        return field in self._by_field

    def __iter__(self) -> Iterator[str]:
        return iter(self._by_field)

    def __len__(self) -> int:
        return len(self._by_field)

    def copy(self) -> TransformerRegistry:
        """Return an independent registry with the same entries."""
        return TransformerRegistry(self._by_field)


def transformer(field: str) -> Callable[[Transformer], Transformer]:
    """Mark a model method as the transformer for field.

    The mark is collected into the class registry when the model class is
    created; the method itself is returned unchanged.

    Args:
        field: Attribute name the method intercepts.

    Returns:
        Decorator storing the field name on the function.
    """

    def decorator(fn: Transformer) -> Transformer:
        setattr(fn, _FIELD_MARKER, field)
        return fn

    return decorator


def collect_transformers(namespace: dict[str, Any]) -> Iterator[tuple[str, Transformer]]:
    """Yield (field, fn) for every decorated function in a class namespace."""
    for value in namespace.values():
        field = getattr(value, _FIELD_MARKER, None)
        if field is not None:
            yield field, value
