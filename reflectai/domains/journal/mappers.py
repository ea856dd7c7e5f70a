"""Journal mappers for DTO responses."""

from __future__ import annotations

from datetime import date, datetime

from reflectai.domains.journal.models import JournalEntry
from reflectai.domains.journal.schemas.journal_schemas import (
    JournalEntryResponse,
    JournalStatsResponse,
)


def map_entry(entry: JournalEntry) -> dict:
    return JournalEntryResponse(
        id=entry.id,
        title=entry.title,
        content=entry.content,
        entry_date=entry.entry_date.isoformat(),
        entry_day=entry.entry_day,
        moods=list(entry.moods or []),
        ai_response=entry.ai_response,
        is_favorite=bool(entry.is_favorite),
        created_at=entry.created_at.isoformat() if entry.created_at else "",
        updated_at=entry.updated_at.isoformat() if entry.updated_at else "",
    ).model_dump(mode="json")


def map_draft(day: date) -> dict:
    """Blank, unsaved entry pre-dated to ``day``."""
    return {
        "id": None,
        "title": None,
        "content": "",
        "entry_date": datetime.combine(day, datetime.min.time()).isoformat(),
        "entry_day": day.isoformat(),
        "moods": [],
        "ai_response": None,
        "is_favorite": False,
    }


def map_stats(snapshot) -> dict:
    return JournalStatsResponse(
        entries_count=snapshot.entries_count,
        current_streak=snapshot.current_streak,
        longest_streak=snapshot.longest_streak,
        top_moods=dict(snapshot.top_moods),
    ).model_dump(by_alias=True)
