"""Lifecycle event notification."""

from rowmodel.events.emitter import EventEmitter, Listener
from rowmodel.events.protocol import Emitter

__all__ = [
    "Emitter",
    "EventEmitter",
    "Listener",
]
