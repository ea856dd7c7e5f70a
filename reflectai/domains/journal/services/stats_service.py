"""Journal statistics: a pure projection over entries plus its persisted snapshot.

``compute_stats`` never reads stored counters, so the ``journal_stats`` row is
only ever a copy of its output and cannot drift from the entries. The row is
rewritten under a row lock inside the same transaction as each entry mutation.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from reflectai.domains.journal.models import JournalEntry, JournalStats
from reflectai.extensions import db


@dataclass(frozen=True)
class StatsSnapshot:
    entries_count: int = 0
    current_streak: int = 0
    longest_streak: int = 0
    top_moods: Dict[str, int] = field(default_factory=dict)


def _entry_day(entry) -> date:
    day = getattr(entry, "entry_day", None)
    if day is not None:
        return day
    value = entry.entry_date
    return value.date() if isinstance(value, datetime) else value


def _runs(days: Sequence[date]) -> List[Tuple[date, int]]:
    """(last_day, length) for each run of consecutive days in ascending ``days``."""
    runs: List[Tuple[date, int]] = []
    for day in days:
        if runs and day - runs[-1][0] == timedelta(days=1):
            runs[-1] = (day, runs[-1][1] + 1)
        else:
            runs.append((day, 1))
    return runs


def current_streak(days: Iterable[date], today: date) -> int:
    """Consecutive days with an entry ending today, or yesterday if today is empty."""
    present = set(days)
    cursor = today if today in present else today - timedelta(days=1)
    streak = 0
    while cursor in present:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def longest_streak(days: Iterable[date]) -> int:
    runs = _runs(sorted(set(days)))
    return max((length for _, length in runs), default=0)


def mood_counts(entries: Iterable) -> Dict[str, int]:
    """Entries per mood label, most frequent first (ties by label)."""
    counter: Counter = Counter()
    for entry in entries:
        # A label counts once per entry even if repeated.
        counter.update(set(m for m in (entry.moods or []) if m))
    return dict(sorted(counter.items(), key=lambda item: (-item[1], item[0])))


def compute_stats(
    entries: Sequence,
    today: date,
    month: Optional[Tuple[int, int]] = None,
) -> StatsSnapshot:
    """Pure function of ``entries`` and ``today``.

    ``month`` narrows ``entries_count`` to one (year, month) for "this month"
    views; streaks and moods always use the full history.
    """
    days = [_entry_day(e) for e in entries]
    if month:
        count = sum(1 for d in days if (d.year, d.month) == month)
    else:
        count = len(entries)
    return StatsSnapshot(
        entries_count=count,
        current_streak=current_streak(days, today),
        longest_streak=longest_streak(days),
        top_moods=mood_counts(entries),
    )


def _user_entries(user_id: int) -> List[JournalEntry]:
    return JournalEntry.query.filter_by(user_id=user_id).all()


def refresh_stats(user_id: int, today: Optional[date] = None) -> StatsSnapshot:
    """Recompute and write the user's stats row. Caller commits."""
    db.session.flush()
    snapshot = compute_stats(_user_entries(user_id), today or datetime.utcnow().date())
    row = (
        db.session.query(JournalStats)
        .filter_by(user_id=user_id)
        .with_for_update()
        .first()
    )
    if row is None:
        row = JournalStats(user_id=user_id)
        db.session.add(row)
    row.entries_count = snapshot.entries_count
    row.current_streak = snapshot.current_streak
    row.longest_streak = snapshot.longest_streak
    row.top_moods = dict(snapshot.top_moods)
    row.last_updated = datetime.utcnow()
    return snapshot


def get_stats(
    user_id: int,
    today: Optional[date] = None,
    month: Optional[Tuple[int, int]] = None,
) -> StatsSnapshot:
    """Stats relative to ``today``; the stored row is refreshed on every read."""
    today = today or datetime.utcnow().date()
    snapshot = refresh_stats(user_id, today)
    db.session.commit()
    if month:
        return compute_stats(_user_entries(user_id), today, month=month)
    return snapshot
