"""Challenge domain event catalog."""

from __future__ import annotations

CHALLENGE_STARTED = "challenges.challenge.started"
CHALLENGE_COMPLETED = "challenges.challenge.completed"
BADGE_AWARDED = "challenges.badge.awarded"

EVENT_CATALOG = {
    CHALLENGE_STARTED: {
        "version": "v1",
        "payload": {"challenge_id": "int", "user_id": "int", "expires_at": "datetime"},
    },
    CHALLENGE_COMPLETED: {
        "version": "v1",
        "payload": {"challenge_id": "int", "user_id": "int", "completed_at": "datetime"},
    },
    BADGE_AWARDED: {
        "version": "v1",
        "payload": {"badge_id": "int", "challenge_id": "int", "user_id": "int", "points": "int"},
    },
}

__all__ = ["EVENT_CATALOG", "CHALLENGE_STARTED", "CHALLENGE_COMPLETED", "BADGE_AWARDED"]
