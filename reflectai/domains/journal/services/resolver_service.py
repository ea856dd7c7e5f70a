"""Decide what the journal editor shows for a given day.

For past or future days the answer is simply the stored entry (edit mode) or a
blank draft dated to that day (create mode). For today the rollover marker is
consulted: a row found for today while the marker still points at an earlier
day is a leftover from a session that never finished, so it is discarded and a
blank draft is presented instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from reflectai.core.errors import ValidationError
from reflectai.domains.journal.events import JOURNAL_STALE_ENTRY_DISCARDED
from reflectai.domains.journal.models import JournalEntry
from reflectai.domains.journal.services import journal_service
from reflectai.domains.journal.services.marker_service import advance_marker, read_marker
from reflectai.extensions import db
from reflectai.platform.outbox import enqueue as enqueue_outbox

logger = logging.getLogger(__name__)

MODE_EDIT = "edit"
MODE_CREATE = "create"


@dataclass
class Resolution:
    mode: str
    day: date
    is_today: bool
    entry: Optional[JournalEntry] = None
    discarded_entry_ids: List[int] = field(default_factory=list)


def _discard_stale(user_id: int, entries: List[JournalEntry], marker: date, today: date) -> bool:
    """Delete leftover rows and advance the marker in one transaction.

    On failure nothing is written, so the marker keeps its old value and the
    next resolve of today retries the cleanup.
    """
    ids = [e.id for e in entries]
    try:
        advance_marker(user_id, today)
        for entry_id, entry in zip(ids, entries):
            journal_service.remove_entry(entry)
            enqueue_outbox(
                JOURNAL_STALE_ENTRY_DISCARDED,
                {
                    "entry_id": entry_id,
                    "user_id": user_id,
                    "entry_day": today.isoformat(),
                    "marker": marker.isoformat(),
                },
                user_id=user_id,
            )
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.warning("Could not discard stale journal entries %s for user %s", ids, user_id, exc_info=True)
        return False
    logger.info("Discarded stale journal entries %s for user %s (marker %s)", ids, user_id, marker)
    return True


def resolve_entry(
    user_id: int,
    year: int,
    month: int,
    day: int,
    today: Optional[date] = None,
) -> Resolution:
    try:
        target = date(year, month, day)
    except ValueError:
        raise ValidationError("invalid_date")
    today = today or datetime.utcnow().date()
    matches = journal_service.find_by_date(user_id, year, month, day)

    if target != today:
        if matches:
            return Resolution(mode=MODE_EDIT, day=target, is_today=False, entry=matches[0])
        return Resolution(mode=MODE_CREATE, day=target, is_today=False)

    marker = read_marker(user_id)
    if matches and marker is not None and marker < today:
        stale_ids = [e.id for e in matches]
        if _discard_stale(user_id, matches, marker, today):
            return Resolution(mode=MODE_CREATE, day=target, is_today=True, discarded_entry_ids=stale_ids)
        # The leftover still occupies today's slot; a blank draft could not be saved.
        survivors = journal_service.find_by_date(user_id, year, month, day)
        if survivors:
            return Resolution(mode=MODE_EDIT, day=target, is_today=True, entry=survivors[0])
        return Resolution(mode=MODE_CREATE, day=target, is_today=True)

    if marker is None or marker < today:
        advance_marker(user_id, today)
    db.session.commit()
    if matches:
        return Resolution(mode=MODE_EDIT, day=target, is_today=True, entry=matches[0])
    return Resolution(mode=MODE_CREATE, day=target, is_today=True)
