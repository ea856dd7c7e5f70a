"""Journal service tests.

Covers create/update/delete, the one-entry-per-day rule, date queries,
reflection fallbacks and outbox event emission.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from unittest.mock import patch

import pytest

pytestmark = pytest.mark.integration

from reflectai.core.errors import ConflictError, NotFoundError, UpstreamError, ValidationError
from reflectai.domains.journal.events import (
    JOURNAL_ENTRY_CREATED,
    JOURNAL_ENTRY_DELETED,
    JOURNAL_ENTRY_UPDATED,
    JOURNAL_REFLECTION_GENERATED,
)
from reflectai.domains.journal.models import JournalEntry, JournalStats
from reflectai.domains.journal.services import journal_service
from reflectai.platform.outbox.models import OutboxMessage
from reflectai.extensions import db


@pytest.fixture
def user_id(make_user):
    return make_user("journal-service@example.com")["user_id"]


def _events(user_id: int, event_type: str) -> list[OutboxMessage]:
    return OutboxMessage.query.filter_by(user_id=user_id, event_type=event_type).all()


# ==================== Create ====================


def test_create_entry_stores_trimmed_content_and_fallback_reflection(app, user_id):
    entry = journal_service.create_entry(
        user_id,
        content="  I felt tired after a difficult meeting at work.  ",
        title="  Monday ",
        moods=["Tired", "Tired", " ", "Anxious"],
    )

    assert entry.id is not None
    assert entry.content == "I felt tired after a difficult meeting at work."
    assert entry.title == "Monday"
    assert entry.moods == ["Tired", "Anxious"]
    assert entry.entry_day == datetime.utcnow().date()
    # No API key in testing, so the keyword fallback is stored.
    assert entry.ai_response.startswith("I notice you mentioned")
    assert "feeling tired" in entry.ai_response


def test_create_entry_uses_ai_reflection_when_available(app, user_id):
    with patch("reflectai.core.ai.client.chat_completion", return_value="A thoughtful reflection.") as fake:
        entry = journal_service.create_entry(user_id, content="Walked by the river today.")

    assert fake.called
    assert entry.ai_response == "A thoughtful reflection."


def test_create_entry_rejects_whitespace_content(app, user_id):
    with pytest.raises(ValidationError) as exc:
        journal_service.create_entry(user_id, content="   \n\t ")
    assert exc.value.message == "content_required"
    assert JournalEntry.query.filter_by(user_id=user_id).count() == 0


def test_create_entry_rejects_long_mood(app, user_id):
    with pytest.raises(ValidationError):
        journal_service.create_entry(user_id, content="Hello", moods=["x" * 65])


def test_second_entry_on_same_day_conflicts(app, user_id):
    day = date(2026, 3, 14)
    journal_service.create_entry(user_id, content="Morning thoughts", entry_date=day)

    with pytest.raises(ConflictError) as exc:
        journal_service.create_entry(user_id, content="Evening thoughts", entry_date=datetime(2026, 3, 14, 21, 0))
    assert exc.value.details["entry_day"] == "2026-03-14"
    assert JournalEntry.query.filter_by(user_id=user_id).count() == 1


def test_create_entry_emits_outbox_event_and_refreshes_stats(app, user_id):
    entry = journal_service.create_entry(user_id, content="Grateful for friends", moods=["Happy"])

    events = _events(user_id, JOURNAL_ENTRY_CREATED)
    assert len(events) == 1
    assert events[0].payload["entry_id"] == entry.id
    assert events[0].payload["moods"] == ["Happy"]

    stats = JournalStats.query.filter_by(user_id=user_id).one()
    assert stats.entries_count == 1
    assert stats.current_streak == 1
    assert stats.top_moods == {"Happy": 1}


# ==================== Update ====================


def test_update_entry_merges_partial_fields(app, user_id):
    entry = journal_service.create_entry(user_id, content="Original", title="Title", moods=["Calm"])
    original_response = entry.ai_response

    updated = journal_service.update_entry(user_id, entry.id, is_favorite=True)

    assert updated.is_favorite is True
    assert updated.content == "Original"
    assert updated.title == "Title"
    assert updated.moods == ["Calm"]
    assert updated.ai_response == original_response
    assert _events(user_id, JOURNAL_ENTRY_UPDATED)[0].payload["fields"] == ["is_favorite"]


def test_update_content_regenerates_reflection(app, user_id):
    entry = journal_service.create_entry(user_id, content="Original")

    with patch("reflectai.core.ai.client.chat_completion", return_value="Fresh reflection") as fake:
        updated = journal_service.update_entry(user_id, entry.id, content="Rewritten entry")

    assert fake.called
    assert updated.ai_response == "Fresh reflection"


def test_update_entry_date_onto_taken_day_conflicts(app, user_id):
    journal_service.create_entry(user_id, content="First", entry_date=date(2026, 1, 1))
    second = journal_service.create_entry(user_id, content="Second", entry_date=date(2026, 1, 2))

    with pytest.raises(ConflictError):
        journal_service.update_entry(user_id, second.id, entry_date=date(2026, 1, 1))


def test_update_entry_of_other_user_is_not_found(app, user_id, make_user):
    other = make_user("journal-other@example.com")["user_id"]
    entry = journal_service.create_entry(other, content="Private")

    with pytest.raises(NotFoundError):
        journal_service.update_entry(user_id, entry.id, title="Mine now")


# ==================== Delete ====================


def test_delete_entry_twice_raises_not_found(app, user_id):
    entry = journal_service.create_entry(user_id, content="Short lived")
    entry_id = entry.id

    journal_service.delete_entry(user_id, entry_id)

    assert db.session.get(JournalEntry, entry_id) is None
    assert len(_events(user_id, JOURNAL_ENTRY_DELETED)) == 1
    assert JournalStats.query.filter_by(user_id=user_id).one().entries_count == 0
    with pytest.raises(NotFoundError):
        journal_service.delete_entry(user_id, entry_id)


# ==================== Queries ====================


def test_find_by_date_for_day_and_month(app, user_id):
    journal_service.create_entry(user_id, content="A", entry_date=date(2026, 5, 1))
    journal_service.create_entry(user_id, content="B", entry_date=date(2026, 5, 20))
    journal_service.create_entry(user_id, content="C", entry_date=date(2026, 6, 1))

    assert [e.content for e in journal_service.find_by_date(user_id, 2026, 5, 20)] == ["B"]
    assert [e.content for e in journal_service.find_by_date(user_id, 2026, 5)] == ["B", "A"]
    assert journal_service.find_by_date(user_id, 2026, 7, 4) == []


def test_find_by_date_rejects_impossible_day(app, user_id):
    with pytest.raises(ValidationError):
        journal_service.find_by_date(user_id, 2026, 2, 30)


def test_list_entries_filters_search_and_favorites(app, user_id):
    today = datetime.utcnow().date()
    journal_service.create_entry(user_id, content="Hiking in the hills", entry_date=today - timedelta(days=2))
    fav = journal_service.create_entry(user_id, content="Quiet reading day", entry_date=today - timedelta(days=1))
    journal_service.update_entry(user_id, fav.id, is_favorite=True)

    searched = journal_service.list_entries(user_id, search="hiking")
    assert [e.content for e in searched["items"]] == ["Hiking in the hills"]

    favorites = journal_service.list_entries(user_id, favorites_only=True)
    assert [e.id for e in favorites["items"]] == [fav.id]
    assert favorites["total"] == 1


# ==================== Reflection regeneration ====================


def test_regenerate_reflection_fallback_differs_from_previous(app, user_id):
    entry = journal_service.create_entry(user_id, content="Today was hard and I worried about money.")
    previous = entry.ai_response

    regenerated, used_fallback = journal_service.regenerate_reflection(user_id, entry.id)

    assert used_fallback is True
    assert regenerated.ai_response != previous
    events = _events(user_id, JOURNAL_REFLECTION_GENERATED)
    assert events[0].payload["fallback"] is True


def test_regenerate_reflection_reports_ai_success(app, user_id):
    entry = journal_service.create_entry(user_id, content="Calm day")

    with patch("reflectai.core.ai.client.chat_completion", return_value="New AI text"):
        regenerated, used_fallback = journal_service.regenerate_reflection(user_id, entry.id)

    assert used_fallback is False
    assert regenerated.ai_response == "New AI text"


def test_reflection_fallback_used_on_provider_error(app, user_id):
    with patch("reflectai.core.ai.client.chat_completion", side_effect=UpstreamError("ai_request_failed")):
        entry = journal_service.create_entry(user_id, content="Feeling happy about the weekend")

    assert "positive energy" in entry.ai_response
