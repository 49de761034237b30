"""Core functionalities: stateless building blocks.

Architecture Note:
    core/ contains pure functions and small value types with no I/O.
    For the stateful entity layer, see model/; for collaborators, see
    storage/ and events/.
"""

from rowmodel.core.dirty import diff, differs, snapshot
from rowmodel.core.errors import (
    InvalidArgumentError,
    MissingPrimaryKeyError,
    ModelConfigurationError,
    NotPersistedError,
    RowModelError,
    UnimplementedError,
)
from rowmodel.core.paths import path_get, path_has, split_path, upsert
from rowmodel.core.timestamps import format_timestamp, utc_now
from rowmodel.core.transformers import Transformer, TransformerRegistry, transformer

__all__ = [
    # Errors
    "RowModelError",
    "InvalidArgumentError",
    "MissingPrimaryKeyError",
    "NotPersistedError",
    "UnimplementedError",
    "ModelConfigurationError",
    # Dirty tracking
    "diff",
    "differs",
    "snapshot",
    # Paths
    "split_path",
    "path_has",
    "path_get",
    "upsert",
    # Timestamps
    "format_timestamp",
    "utc_now",
    # Transformers
    "Transformer",
    "TransformerRegistry",
    "transformer",
]
