"""Transactional outbox models and helpers."""

from reflectai.platform.outbox.models import OutboxMessage
from reflectai.platform.outbox.services import EventBusAdapter, enqueue

__all__ = ["OutboxMessage", "EventBusAdapter", "enqueue"]
