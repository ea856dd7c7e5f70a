"""Chat domain event catalog."""

from __future__ import annotations

CHAT_MESSAGE_SENT = "chat.message.sent"

EVENT_CATALOG = {
    CHAT_MESSAGE_SENT: {
        "version": "v1",
        "payload": {
            "user_id": "int",
            "support_type": "str",
            "personality_type": "str",
            "week_start_date": "datetime",
            "chat_count": "int",
        },
    },
}

__all__ = ["EVENT_CATALOG", "CHAT_MESSAGE_SENT"]
