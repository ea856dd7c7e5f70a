"""Server-side "last visited" marker for journal day rollover.

The marker is the ``journal.last_visited`` user preference. It moves forward
when the editor resolves today and when an entry is explicitly saved, so a row
saved on purpose is never mistaken for a leftover from an unfinished session.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional

from reflectai.core.users.preferences import lock_preference, write_preference

MARKER_KEY = "journal.last_visited"

# Clients ahead of UTC may legitimately save "today" one calendar day early.
SAVE_LOOKAHEAD = timedelta(days=1)


def read_marker(user_id: int) -> Optional[date]:
    pref = lock_preference(user_id, MARKER_KEY)
    if pref is None or not isinstance(pref.value, dict):
        return None
    try:
        return date.fromisoformat(pref.value.get("date") or "")
    except ValueError:
        return None


def advance_marker(user_id: int, day: date) -> None:
    """Point the marker at ``day``; caller commits."""
    write_preference(user_id, MARKER_KEY, {"date": day.isoformat()})


def mark_saved(user_id: int, day: date) -> None:
    """Record an explicit save for ``day`` in the caller's transaction.

    The marker only moves forward, and never past tomorrow in UTC, so a
    far-future entry cannot switch off rollover detection.
    """
    if day > datetime.utcnow().date() + SAVE_LOOKAHEAD:
        return
    marker = read_marker(user_id)
    if marker is None or marker < day:
        advance_marker(user_id, day)
