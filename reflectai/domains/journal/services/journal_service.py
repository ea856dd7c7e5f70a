"""Journal entry store: CRUD, date queries and event emission.

Every explicit save also moves the rollover marker (see ``marker_service``) so
the editor never treats a saved entry as an abandoned draft.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, timezone
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError

from reflectai.core.errors import ConflictError, NotFoundError, ValidationError
from reflectai.core.utils.pagination import paginate
from reflectai.domains.journal.events import (
    JOURNAL_ENTRY_CREATED,
    JOURNAL_ENTRY_DELETED,
    JOURNAL_ENTRY_UPDATED,
    JOURNAL_REFLECTION_GENERATED,
)
from reflectai.domains.journal.models import JournalEntry
from reflectai.domains.journal.services import marker_service, reflection_service, stats_service
from reflectai.extensions import db
from reflectai.platform.outbox import enqueue as enqueue_outbox

MAX_MOOD_LENGTH = 64


def create_entry(
    user_id: int,
    *,
    content: str,
    title: Optional[str] = None,
    moods: Optional[Iterable[str]] = None,
    entry_date: Optional[datetime | date] = None,
    generate_ai: bool = True,
) -> JournalEntry:
    body = _require_content(content)
    when = _coerce_entry_date(entry_date)
    if _day_taken(user_id, when.date()):
        raise ConflictError("entry_exists_for_day", entry_day=when.date().isoformat())

    entry = JournalEntry(
        user_id=user_id,
        title=_clean_title(title),
        content=body,
        entry_date=when,
        moods=_clean_moods(moods),
        is_favorite=False,
    )
    if generate_ai:
        entry.ai_response, _ = reflection_service.reflect_or_fallback(body)
    db.session.add(entry)
    _flush_unique(entry)
    marker_service.mark_saved(user_id, entry.entry_day)

    stats_service.refresh_stats(user_id)
    enqueue_outbox(
        JOURNAL_ENTRY_CREATED,
        {
            "entry_id": entry.id,
            "user_id": user_id,
            "entry_day": entry.entry_day.isoformat(),
            "moods": entry.moods,
            "has_ai_response": entry.ai_response is not None,
            "created_at": (entry.created_at or datetime.utcnow()).isoformat(),
        },
        user_id=user_id,
    )
    db.session.commit()
    return entry


def update_entry(user_id: int, entry_id: int, **fields) -> JournalEntry:
    """Partial merge; fields not passed are left untouched."""
    entry = get_entry(user_id, entry_id)
    changed: List[str] = []

    if "content" in fields:
        body = _require_content(fields["content"])
        if body != entry.content:
            entry.content = body
            changed.append("content")
    if "title" in fields:
        entry.title = _clean_title(fields["title"])
        changed.append("title")
    if "moods" in fields:
        entry.moods = _clean_moods(fields["moods"])
        changed.append("moods")
    if "is_favorite" in fields and fields["is_favorite"] is not None:
        entry.is_favorite = bool(fields["is_favorite"])
        changed.append("is_favorite")
    if "entry_date" in fields and fields["entry_date"] is not None:
        when = _coerce_entry_date(fields["entry_date"])
        if when.date() != entry.entry_day and _day_taken(user_id, when.date(), exclude_id=entry.id):
            raise ConflictError("entry_exists_for_day", entry_day=when.date().isoformat())
        entry.entry_date = when
        changed.append("entry_date")

    if "ai_response" in fields:
        entry.ai_response = fields["ai_response"]
        changed.append("ai_response")
    elif "content" in changed:
        entry.ai_response, _ = reflection_service.reflect_or_fallback(entry.content, previous=entry.ai_response)
        changed.append("ai_response")

    _flush_unique(entry)
    marker_service.mark_saved(user_id, entry.entry_day)
    stats_service.refresh_stats(user_id)
    enqueue_outbox(
        JOURNAL_ENTRY_UPDATED,
        {
            "entry_id": entry.id,
            "user_id": user_id,
            "fields": changed,
            "updated_at": (entry.updated_at or datetime.utcnow()).isoformat(),
        },
        user_id=user_id,
    )
    db.session.commit()
    return entry


def delete_entry(user_id: int, entry_id: int) -> None:
    """Delete one entry; a second delete of the same id raises NotFoundError."""
    entry = get_entry(user_id, entry_id)
    remove_entry(entry)
    db.session.commit()


def remove_entry(entry: JournalEntry) -> None:
    """Stage the delete with its stats refresh and event; caller commits."""
    user_id, entry_id, day = entry.user_id, entry.id, entry.entry_day
    db.session.delete(entry)
    stats_service.refresh_stats(user_id)
    enqueue_outbox(
        JOURNAL_ENTRY_DELETED,
        {"entry_id": entry_id, "user_id": user_id, "entry_day": day.isoformat()},
        user_id=user_id,
    )


def regenerate_reflection(user_id: int, entry_id: int) -> Tuple[JournalEntry, bool]:
    """Re-run AI generation; on failure store a fallback different from the current text."""
    entry = get_entry(user_id, entry_id)
    entry.ai_response, used_fallback = reflection_service.reflect_or_fallback(
        entry.content, previous=entry.ai_response
    )
    enqueue_outbox(
        JOURNAL_REFLECTION_GENERATED,
        {"entry_id": entry.id, "user_id": user_id, "fallback": used_fallback},
        user_id=user_id,
    )
    db.session.commit()
    return entry, used_fallback


def get_entry(user_id: int, entry_id: int) -> JournalEntry:
    entry = JournalEntry.query.filter_by(id=entry_id, user_id=user_id).first()
    if not entry:
        raise NotFoundError("entry_not_found")
    return entry


def find_by_date(user_id: int, year: int, month: int, day: Optional[int] = None) -> List[JournalEntry]:
    """Entries for one calendar day, or a whole month when ``day`` is None; newest first."""
    start, end = _date_range(year, month, day)
    return (
        JournalEntry.query.filter(
            JournalEntry.user_id == user_id,
            JournalEntry.entry_day >= start,
            JournalEntry.entry_day <= end,
        )
        .order_by(JournalEntry.entry_date.desc(), JournalEntry.created_at.desc())
        .all()
    )


def list_entries(
    user_id: int,
    *,
    favorites_only: bool = False,
    search: Optional[str] = None,
    page: int = 1,
    per_page: int = 50,
) -> dict:
    query = JournalEntry.query.filter_by(user_id=user_id)
    if favorites_only:
        query = query.filter(JournalEntry.is_favorite.is_(True))
    if search:
        like = f"%{search.strip()}%"
        query = query.filter(db.or_(JournalEntry.title.ilike(like), JournalEntry.content.ilike(like)))
    query = query.order_by(JournalEntry.entry_date.desc(), JournalEntry.created_at.desc())
    return paginate(query, page=page, per_page=per_page)


# --- helpers ---


def _require_content(content: Optional[str]) -> str:
    body = (content or "").strip()
    if not body:
        raise ValidationError("content_required")
    return body


def _clean_title(title: Optional[str]) -> Optional[str]:
    return (title or "").strip() or None


def _clean_moods(moods: Optional[Iterable[str]]) -> List[str]:
    cleaned: List[str] = []
    for mood in moods or []:
        label = str(mood).strip()
        if not label:
            continue
        if len(label) > MAX_MOOD_LENGTH:
            raise ValidationError("mood_too_long")
        if label not in cleaned:
            cleaned.append(label)
    return cleaned


def _coerce_entry_date(value: Optional[datetime | date]) -> datetime:
    if value is None:
        return datetime.utcnow()
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())
    raise ValidationError("invalid_date")


def _date_range(year: int, month: int, day: Optional[int]) -> Tuple[date, date]:
    try:
        if day is None:
            last = calendar.monthrange(year, month)[1]
            return date(year, month, 1), date(year, month, last)
        target = date(year, month, day)
    except ValueError:
        raise ValidationError("invalid_date")
    return target, target


def _day_taken(user_id: int, day: date, exclude_id: Optional[int] = None) -> bool:
    query = db.session.query(JournalEntry.id).filter_by(user_id=user_id, entry_day=day)
    if exclude_id is not None:
        query = query.filter(JournalEntry.id != exclude_id)
    return query.first() is not None


def _flush_unique(entry: JournalEntry) -> None:
    """Flush, turning a (user, day) unique violation from a racing request into a conflict."""
    day = entry.entry_day
    try:
        db.session.flush()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("entry_exists_for_day", entry_day=day.isoformat())
