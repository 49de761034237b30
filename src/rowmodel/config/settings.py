"""Configuration settings using Pydantic Settings.

Provides typed configuration with environment variable support.

Usage:
    from rowmodel.config import ModelSettings, SQLiteSettings

    # Load from environment variables (ROWMODEL_*, ROWMODEL_SQLITE_*)
    sqlite_settings = SQLiteSettings()
    model_settings = ModelSettings()

    # Or override with explicit values
    sqlite_settings = SQLiteSettings(path="app.db")
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SQLiteSettings(BaseSettings):  # type: ignore[misc]
    """Configuration for the SQLite storage backend.

    Attributes:
        path: Database file path, or ":memory:" for a private in-memory database.
        timeout: Seconds to wait on a locked database before failing.
        json_columns: Store nested mappings and lists as JSON text.

    Environment Variables:
        ROWMODEL_SQLITE_PATH
        ROWMODEL_SQLITE_TIMEOUT
        ROWMODEL_SQLITE_JSON_COLUMNS
    """

    model_config = SettingsConfigDict(
        env_prefix="ROWMODEL_SQLITE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    path: str = ":memory:"
    timeout: float = Field(default=5.0, gt=0)
    json_columns: bool = True


class ModelSettings(BaseSettings):  # type: ignore[misc]
    """Configuration shared by every model bound to a context.

    Attributes:
        timestamp_timespec: Precision of created/updated stamps.

    Environment Variables:
        ROWMODEL_TIMESTAMP_TIMESPEC
    """

    model_config = SettingsConfigDict(
        env_prefix="ROWMODEL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    timestamp_timespec: Literal["seconds", "milliseconds", "microseconds"] = "seconds"
