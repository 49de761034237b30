"""Exception hierarchy for rowmodel.

Every error raised by the library itself derives from RowModelError.
Storage backend failures are never wrapped: whatever the backend raises
reaches the caller unchanged.
"""


class RowModelError(Exception):
    """Base exception for all rowmodel errors."""

    pass


class InvalidArgumentError(RowModelError, ValueError):
    """Raised when a single-field assignment is given a None value."""

    pass


class MissingPrimaryKeyError(RowModelError):
    """Raised when a model type without a primary key is updated or deleted."""

    pass


class NotPersistedError(RowModelError):
    """Raised when a row-level operation targets a model that was never persisted."""

    pass


class UnimplementedError(RowModelError, NotImplementedError):
    """Raised by path-based attribute removal, which is not supported."""

    pass


class ModelConfigurationError(RowModelError):
    """Raised when a model is persisted without a storage backend."""

    pass
