"""Outbox staging and the adapter that publishes rows onto the event bus."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from reflectai.core.events.event_bus import EventBus, event_bus
from reflectai.core.events.event_models import EventRecord
from reflectai.extensions import db
from reflectai.platform.outbox.models import STATUS_PENDING, OutboxMessage


class EventBusAdapter:
    """Turns an outbox row into an EventRecord and publishes it in-process."""

    def __init__(self, bus: Optional[EventBus] = None) -> None:
        self.bus = bus or event_bus

    def dispatch(self, message: OutboxMessage) -> None:
        payload = dict(message.payload or {})
        payload.setdefault("event_id", message.id)
        self.bus.publish(
            EventRecord(
                event_type=message.event_type,
                payload=payload,
                user_id=message.user_id,
                id=message.id,
                created_at=message.created_at or datetime.utcnow(),
            )
        )


def enqueue(
    event_name: str,
    payload: dict,
    user_id: Optional[int],
    available_at: Optional[datetime] = None,
) -> OutboxMessage:
    """Stage an event; the caller commits it together with the domain change."""
    message = OutboxMessage(
        event_type=event_name,
        payload=payload or {},
        user_id=user_id,
        available_at=available_at or datetime.utcnow(),
        status=STATUS_PENDING,
        attempts=0,
    )
    db.session.add(message)
    return message
