"""Configuration module using Pydantic Settings.

Usage:
    from rowmodel.config import ModelSettings, SQLiteSettings

    settings = SQLiteSettings(path="app.db")
"""

from rowmodel.config.settings import ModelSettings, SQLiteSettings

__all__ = [
    "ModelSettings",
    "SQLiteSettings",
]
