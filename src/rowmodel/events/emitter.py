"""Synchronous in-process event emitter.

Usage:
    emitter = EventEmitter()
    emitter.on("user.created", lambda user: print(user.to_dict()))
    emitter.on("*", lambda topic, *payload: audit.append(topic))

    users = Repository(User, ModelContext(backend=backend, emitter=emitter))
    users.create({"name": "ada"})  # listener called with the new User
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

WILDCARD = "*"

type Listener = Callable[..., Any]


class EventEmitter:
    """Topic to listeners map, dispatched synchronously in registration order.

    Listeners of a topic are called with ``*payload``. Listeners of the
    wildcard topic "*" are called with ``(topic, *payload)`` after the
    topic's own listeners. Exceptions raised by a listener propagate to
    the emitting call.
    """

    def __init__(self) -> None:
        self._listeners: defaultdict[str, list[Listener]] = defaultdict(list)

    def on(self, topic: str, listener: Listener) -> Listener:
        """Subscribe listener to topic.

        Returns:
            The listener that was passed in.
        """
        self._listeners[topic].append(listener)
        return listener

    def off(self, topic: str, listener: Listener) -> bool:
        """Unsubscribe listener from topic.

        Returns:
            True if the listener was subscribed.
        """
        listeners = self._listeners.get(topic, [])
        if listener not in listeners:
            return False
        listeners.remove(listener)
        return True

    def listeners(self, topic: str) -> list[Listener]:
        """Listeners subscribed to exactly topic (wildcards excluded)."""
        return list(self._listeners.get(topic, []))

    def emit(self, topic: str, payload: list[Any]) -> None:
        """Call every listener of topic, then every wildcard listener.

        Args:
            topic: Event name, e.g. "user.created".
            payload: Positional arguments for the listeners.
        """
        direct = list(self._listeners.get(topic, []))
        wildcard = list(self._listeners.get(WILDCARD, []))
        logger.debug("emit %s to %d listener(s)", topic, len(direct) + len(wildcard))
        for listener in direct:
            listener(*payload)
        for listener in wildcard:
            listener(topic, *payload)
