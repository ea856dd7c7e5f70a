"""In-process publish/subscribe used by the outbox dispatcher.

Handlers run synchronously inside the dispatcher's transaction. An exception
propagates to the dispatcher, which schedules the outbox row for retry.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Mapping

from reflectai.core.events.event_models import EventRecord

logger = logging.getLogger(__name__)

EventHandler = Callable[[EventRecord], None]


class EventBus:
    def __init__(self) -> None:
        self._handlers: Dict[str, List[EventHandler]] = {}

    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        # create_app may run several times per process (tests, CLI).
        handlers = self._handlers.setdefault(event_type, [])
        if handler not in handlers:
            handlers.append(handler)

    def subscribe_many(self, routes: Mapping[str, EventHandler]) -> None:
        for event_type, handler in routes.items():
            self.subscribe(event_type, handler)

    def handlers_for(self, event_type: str) -> List[EventHandler]:
        return list(self._handlers.get(event_type, ()))

    def publish(self, event: EventRecord) -> int:
        handlers = self.handlers_for(event.event_type)
        for handler in handlers:
            logger.debug("Delivering %s (id=%s) to %s", event.event_type, event.id, handler.__qualname__)
            handler(event)
        return len(handlers)


event_bus = EventBus()
