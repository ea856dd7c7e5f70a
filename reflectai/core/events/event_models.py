"""Domain event envelope handed to subscribers after outbox dispatch."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class EventRecord:
    event_type: str
    payload: Dict[str, Any] = field(default_factory=dict)
    user_id: Optional[int] = None
    id: Optional[int] = None
    created_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def owner_id(self) -> Optional[int]:
        """User the event belongs to, falling back to the payload's ``user_id``."""
        if self.user_id is not None:
            return self.user_id
        raw = self.payload.get("user_id")
        return int(raw) if raw is not None else None
