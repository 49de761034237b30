"""Protocol for lifecycle event notifiers.

Models publish "<type>.created", "<type>.updated" and "<type>.deleted"
through whatever object is bound as the context emitter.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Emitter(Protocol):
    """Publishes a payload under a topic.

    Implementations must treat a topic without subscribers as a no-op.
    """

    def emit(self, topic: str, payload: list[Any]) -> None:
        """Publish payload to every listener of topic."""
        ...
