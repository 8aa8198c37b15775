"""In-memory event bus for format-run events.

Handlers are called synchronously, in registration order, on the thread
that publishes.  Handlers registered with ``subscribe_all`` run after the
type-specific ones.  Implements the ``EventBus`` port.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Callable

logger = logging.getLogger(__name__)

Handler = Callable[[Any], None]


class InMemoryEventBus:
    """Synchronous in-memory event bus."""

    def __init__(self) -> None:
        self._handlers: dict[type, list[Handler]] = defaultdict(list)
        self._catch_all: list[Handler] = []

    def subscribe(self, event_type: type, handler: Handler) -> None:
        """Call *handler* whenever an event of exactly *event_type* is published."""
        self._handlers[event_type].append(handler)

    def subscribe_all(self, handler: Handler) -> None:
        """Call *handler* for every published event."""
        self._catch_all.append(handler)

    def publish(self, event: Any) -> None:
        handlers = [*self._handlers.get(type(event), []), *self._catch_all]
        logger.debug("Publishing %s to %d handler(s)", type(event).__name__, len(handlers))
        for handler in handlers:
            handler(event)


def log_event(event: Any) -> None:
    """Catch-all handler that mirrors events into the debug log."""
    logger.debug("event %s: %r", type(event).__name__, event)
