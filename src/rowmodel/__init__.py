"""rowmodel: change-tracking row models over pluggable storage backends.

Usage:
    from rowmodel import MemoryBackend, Model, ModelContext, Repository, transformer

    class User(Model):
        table_name = "users"
        primary_key = "id"
        protected_fields = frozenset({"password"})

    users = Repository(User, ModelContext(backend=MemoryBackend()))
    user = users.create({"name": "ada", "age": 36})

    user.set_attribute("age", 37)
    user.get_mutated_attributes()  # {"age": 37}
    user.save()                    # writes only age and updated_at
"""

__version__ = "0.1.0"

# Core primitives
from rowmodel.core import (
    InvalidArgumentError,
    MissingPrimaryKeyError,
    ModelConfigurationError,
    NotPersistedError,
    RowModelError,
    TransformerRegistry,
    UnimplementedError,
    transformer,
)

# Events
from rowmodel.events import (
    Emitter,
    EventEmitter,
)

# Models
from rowmodel.model import (
    Model,
    ModelContext,
    Repository,
)

# Storage
from rowmodel.storage import (
    MemoryBackend,
    SQLiteBackend,
    StorageBackend,
)

__all__ = [
    # Version
    "__version__",
    # Models
    "Model",
    "ModelContext",
    "Repository",
    "transformer",
    "TransformerRegistry",
    # Errors
    "RowModelError",
    "InvalidArgumentError",
    "MissingPrimaryKeyError",
    "NotPersistedError",
    "UnimplementedError",
    "ModelConfigurationError",
    # Storage
    "StorageBackend",
    "MemoryBackend",
    "SQLiteBackend",
    # Events
    "Emitter",
    "EventEmitter",
]
