"""Journal statistics: pure streak/mood helpers and the persisted snapshot."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from types import SimpleNamespace

import pytest

from reflectai.domains.journal.models import JournalStats
from reflectai.domains.journal.services import journal_service, stats_service

TODAY = date(2026, 10, 19)


def _entry(day: date, moods=None):
    return SimpleNamespace(entry_day=day, moods=moods or [])


@pytest.mark.unit
def test_current_streak_counts_consecutive_days_ending_today():
    days = [TODAY, TODAY - timedelta(days=1), TODAY - timedelta(days=2)]
    assert stats_service.current_streak(days, TODAY) == 3


@pytest.mark.unit
def test_current_streak_stops_at_gap():
    days = [TODAY, TODAY - timedelta(days=2)]
    assert stats_service.current_streak(days, TODAY) == 1


@pytest.mark.unit
def test_current_streak_survives_until_today_is_written():
    days = [TODAY - timedelta(days=1), TODAY - timedelta(days=2)]
    assert stats_service.current_streak(days, TODAY) == 2
    assert stats_service.current_streak(days, TODAY + timedelta(days=1)) == 0


@pytest.mark.unit
def test_longest_streak_finds_best_run():
    days = [date(2026, 1, d) for d in (1, 2, 3, 4, 10, 11)]
    assert stats_service.longest_streak(days) == 4
    assert stats_service.longest_streak([]) == 0


@pytest.mark.unit
def test_mood_counts_orders_by_frequency():
    entries = [
        _entry(TODAY, ["Happy", "Calm"]),
        _entry(TODAY - timedelta(days=1), ["Happy", "Happy"]),
        _entry(TODAY - timedelta(days=2)),
    ]
    counts = stats_service.mood_counts(entries)
    assert counts == {"Happy": 2, "Calm": 1}
    assert list(counts) == ["Happy", "Calm"]


@pytest.mark.unit
def test_compute_stats_is_pure_and_month_scoped():
    entries = [
        _entry(TODAY, ["Happy"]),
        _entry(TODAY - timedelta(days=1)),
        _entry(date(2026, 9, 30), ["Calm"]),
    ]
    first = stats_service.compute_stats(entries, TODAY)
    again = stats_service.compute_stats(entries, TODAY)
    october = stats_service.compute_stats(entries, TODAY, month=(2026, 10))

    assert first == again
    assert first.entries_count == 3
    assert first.current_streak == 2
    assert october.entries_count == 2
    assert october.current_streak == first.current_streak


@pytest.mark.integration
def test_refresh_stats_is_idempotent(app, make_user):
    user_id = make_user("stats@example.com")["user_id"]
    today = datetime.utcnow().date()
    for offset, moods in ((0, ["Happy"]), (1, ["Happy", "Calm"]), (2, [])):
        journal_service.create_entry(user_id, content=f"Day -{offset}", entry_date=today - timedelta(days=offset), moods=moods)

    first = stats_service.get_stats(user_id, today=today)
    second = stats_service.get_stats(user_id, today=today)

    assert first == second
    row = JournalStats.query.filter_by(user_id=user_id).one()
    assert row.entries_count == 3
    assert row.current_streak == 3
    assert row.longest_streak == 3
    assert row.top_moods == {"Happy": 2, "Calm": 1}


@pytest.mark.integration
def test_stats_recomputed_after_delete(app, make_user):
    user_id = make_user("stats-delete@example.com")["user_id"]
    today = datetime.utcnow().date()
    journal_service.create_entry(user_id, content="Today", entry_date=today)
    middle = journal_service.create_entry(user_id, content="Yesterday", entry_date=today - timedelta(days=1))
    journal_service.create_entry(user_id, content="Two days ago", entry_date=today - timedelta(days=2))

    journal_service.delete_entry(user_id, middle.id)

    row = JournalStats.query.filter_by(user_id=user_id).one()
    assert row.entries_count == 2
    assert row.current_streak == 1
    assert row.longest_streak == 1


@pytest.mark.integration
def test_stats_endpoint(client, make_user):
    user = make_user("stats-api@example.com")
    journal_service.create_entry(user["user_id"], content="Entry", entry_date=TODAY, moods=["Calm"])

    resp = client.get(
        f"/api/stats?today={TODAY.isoformat()}",
        headers={"Authorization": f"Bearer {user['tokens']['access_token']}"},
    )

    assert resp.status_code == 200
    assert resp.get_json() == {
        "ok": True,
        "entriesCount": 1,
        "currentStreak": 1,
        "longestStreak": 1,
        "topMoods": {"Calm": 1},
    }
