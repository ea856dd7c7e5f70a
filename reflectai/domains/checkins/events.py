"""Check-in domain event catalog."""

from __future__ import annotations

CHECKIN_CREATED = "checkins.checkin.created"
CHECKIN_ANSWERED = "checkins.checkin.answered"
CHECKIN_FOLLOW_UP_SCHEDULED = "checkins.follow_up.scheduled"

EVENT_CATALOG = {
    CHECKIN_CREATED: {
        "version": "v1",
        "payload": {"checkin_id": "int", "user_id": "int", "type": "str", "scheduled_date": "datetime"},
    },
    CHECKIN_ANSWERED: {
        "version": "v1",
        "payload": {
            "checkin_id": "int",
            "user_id": "int",
            "is_resolved": "bool",
            "priority": "str",
            "tags": "list[str]",
        },
    },
    CHECKIN_FOLLOW_UP_SCHEDULED: {
        "version": "v1",
        "payload": {"checkin_id": "int", "source_checkin_id": "int", "user_id": "int", "scheduled_date": "datetime"},
    },
}

__all__ = ["EVENT_CATALOG", "CHECKIN_CREATED", "CHECKIN_ANSWERED", "CHECKIN_FOLLOW_UP_SCHEDULED"]
