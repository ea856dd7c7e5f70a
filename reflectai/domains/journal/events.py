"""Journal domain event catalog."""

from __future__ import annotations

JOURNAL_ENTRY_CREATED = "journal.entry.created"
JOURNAL_ENTRY_UPDATED = "journal.entry.updated"
JOURNAL_ENTRY_DELETED = "journal.entry.deleted"
JOURNAL_STALE_ENTRY_DISCARDED = "journal.entry.stale_discarded"
JOURNAL_REFLECTION_GENERATED = "journal.reflection.generated"

EVENT_CATALOG = {
    JOURNAL_ENTRY_CREATED: {
        "version": "v1",
        "payload": {
            "entry_id": "int",
            "user_id": "int",
            "entry_day": "date",
            "moods": "list[str]",
            "has_ai_response": "bool",
            "created_at": "datetime",
        },
    },
    JOURNAL_ENTRY_UPDATED: {
        "version": "v1",
        "payload": {"entry_id": "int", "user_id": "int", "fields": "list[str]", "updated_at": "datetime"},
    },
    JOURNAL_ENTRY_DELETED: {
        "version": "v1",
        "payload": {"entry_id": "int", "user_id": "int", "entry_day": "date"},
    },
    JOURNAL_STALE_ENTRY_DISCARDED: {
        "version": "v1",
        "payload": {"entry_id": "int", "user_id": "int", "entry_day": "date", "marker": "date"},
    },
    JOURNAL_REFLECTION_GENERATED: {
        "version": "v1",
        "payload": {"entry_id": "int", "user_id": "int", "fallback": "bool"},
    },
}

__all__ = [
    "EVENT_CATALOG",
    "JOURNAL_ENTRY_CREATED",
    "JOURNAL_ENTRY_UPDATED",
    "JOURNAL_ENTRY_DELETED",
    "JOURNAL_STALE_ENTRY_DISCARDED",
    "JOURNAL_REFLECTION_GENERATED",
]
