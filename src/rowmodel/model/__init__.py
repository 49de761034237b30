"""Stateful entity layer: models, their context, and per-type repositories."""

from rowmodel.model.context import ModelContext
from rowmodel.model.model import Model
from rowmodel.model.repository import Repository

__all__ = [
    "Model",
    "ModelContext",
    "Repository",
]
