"""Shared test fixtures."""

import sys

import pytest

# Ensure src is in path
sys.path.insert(0, "src")

from datetime import UTC, datetime
from typing import Any

from rowmodel import EventEmitter, MemoryBackend, ModelContext

FIXED_NOW = datetime(2026, 1, 2, 3, 4, 5, tzinfo=UTC)
FIXED_STAMP = "2026-01-02T03:04:05+00:00"


@pytest.fixture
def backend():
    """Fresh in-memory backend."""
    return MemoryBackend()


@pytest.fixture
def events() -> list[tuple[str, list[Any]]]:
    """Every (topic, payload) emitted through the `emitter` fixture."""
    return []


@pytest.fixture
def emitter(events):
    emitter = EventEmitter()
    emitter.on("*", lambda topic, *payload: events.append((topic, list(payload))))
    return emitter


@pytest.fixture
def context(backend, emitter):
    """Context with a frozen clock so stamps are predictable."""
    return ModelContext(backend=backend, emitter=emitter, clock=lambda: FIXED_NOW)
