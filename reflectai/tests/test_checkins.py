"""Check-ins: answer triage, daily prompts, follow-ups and API."""

from __future__ import annotations

import random
from datetime import datetime, timedelta
from unittest.mock import patch

import pytest

from reflectai.core.ai.fallbacks import CHECKIN_FOLLOW_UP
from reflectai.core.errors import ConflictError, NotFoundError, ValidationError
from reflectai.domains.checkins.events import CHECKIN_ANSWERED, CHECKIN_FOLLOW_UP_SCHEDULED
from reflectai.domains.checkins.models import CheckIn
from reflectai.domains.checkins.services import checkin_service
from reflectai.domains.journal.services import journal_service
from reflectai.platform.outbox.models import OutboxMessage


# ==================== Triage ====================


@pytest.mark.unit
def test_positive_answer_is_resolved_low_priority():
    result = checkin_service.assess_response("Things are much better now", "normal")
    assert result.is_resolved is True
    assert result.priority == "low"


@pytest.mark.unit
def test_negative_answer_raises_priority():
    result = checkin_service.assess_response("I'm still struggling with it", "normal")
    assert result.is_resolved is False
    assert result.priority == "high"


@pytest.mark.unit
def test_negative_urgent_answer_is_urgent():
    result = checkin_service.assess_response("This is urgent, I'm still anxious", "normal")
    assert result.priority == "urgent"


@pytest.mark.unit
def test_mixed_answer_is_not_resolved():
    result = checkin_service.assess_response("It's better but still hard", "normal")
    assert result.is_resolved is False
    assert result.priority == "high"


@pytest.mark.unit
def test_neutral_answer_keeps_priority_and_adds_topic_tags():
    result = checkin_service.assess_response("Thinking about my job and my family", "normal", ["daily"])
    assert result.priority == "normal"
    assert result.is_resolved is False
    assert result.tags == ["daily", "relationships", "work"]


# ==================== Services ====================


@pytest.fixture
def user_id(make_user):
    return make_user("checkins@example.com")["user_id"]


@pytest.mark.integration
def test_create_checkin_validates_type_and_entry(app, user_id, make_user):
    with pytest.raises(ValidationError):
        checkin_service.create_checkin(user_id, type="oracle", question="Hello?")

    other = make_user("checkins-other@example.com")["user_id"]
    foreign = journal_service.create_entry(other, content="Theirs")
    with pytest.raises(NotFoundError):
        checkin_service.create_checkin(user_id, type="counselor", question="How?", related_entry_id=foreign.id)


@pytest.mark.integration
def test_daily_checkin_once_per_day(app, user_id):
    now = datetime(2026, 10, 19, 9, 0)

    first = checkin_service.create_daily_checkin(user_id, now=now, rng=random.Random(1))
    assert first.type == "daily_checkin"
    assert first.question in checkin_service.DAILY_QUESTIONS
    assert first.tags == ["daily", "wellness"]

    with pytest.raises(ConflictError):
        checkin_service.create_daily_checkin(user_id, now=now + timedelta(hours=5))

    status = checkin_service.daily_status(user_id, today=now.date())
    assert status["has_completed_today"] is True
    assert status["can_create_new"] is False

    tomorrow = checkin_service.create_daily_checkin(user_id, now=now + timedelta(days=1))
    assert tomorrow.id != first.id


@pytest.mark.integration
def test_respond_negative_schedules_follow_up(app, user_id):
    checkin = checkin_service.create_checkin(user_id, type="counselor", question="How is work going?")

    answered, follow_up = checkin_service.respond(user_id, checkin.id, "Still struggling at work")

    assert answered.is_answered is True
    assert answered.ai_follow_up == CHECKIN_FOLLOW_UP
    assert answered.is_resolved is False
    assert answered.priority == "high"
    assert "work" in answered.tags
    assert follow_up is not None
    assert follow_up.type == "follow_up"
    assert "How is work going?" in follow_up.question
    assert "follow_up" in follow_up.tags
    assert follow_up.scheduled_date > datetime.utcnow() + timedelta(days=2)
    assert OutboxMessage.query.filter_by(event_type=CHECKIN_FOLLOW_UP_SCHEDULED).count() == 1


@pytest.mark.integration
def test_respond_positive_resolves_without_follow_up(app, user_id):
    checkin = checkin_service.create_checkin(user_id, type="philosopher", question="What gives you meaning?")

    with patch("reflectai.core.ai.client.chat_completion", return_value="A wise reply.") as fake:
        answered, follow_up = checkin_service.respond(user_id, checkin.id, "I feel good about it now")

    assert fake.called
    assert answered.ai_follow_up == "A wise reply."
    assert answered.is_resolved is True
    assert follow_up is None
    assert OutboxMessage.query.filter_by(event_type=CHECKIN_ANSWERED).count() == 1


@pytest.mark.integration
def test_respond_twice_conflicts(app, user_id):
    checkin = checkin_service.create_checkin(user_id, type="counselor", question="How are you?")
    checkin_service.respond(user_id, checkin.id, "Fine")

    with pytest.raises(ConflictError):
        checkin_service.respond(user_id, checkin.id, "Fine again")


@pytest.mark.integration
def test_pending_and_unresolved_lists(app, user_id):
    now = datetime.utcnow()
    due = checkin_service.create_checkin(user_id, type="counselor", question="Due?", scheduled_date=now - timedelta(hours=1))
    checkin_service.create_checkin(user_id, type="counselor", question="Later?", scheduled_date=now + timedelta(days=2))

    assert [c.id for c in checkin_service.pending_checkins(user_id, now)] == [due.id]

    checkin_service.respond(user_id, due.id, "Still worried")
    unresolved = checkin_service.unresolved_checkins(user_id)
    assert [c.id for c in unresolved] == [due.id]
    assert CheckIn.query.filter_by(user_id=user_id).count() == 3


# ==================== API ====================


def _headers(user: dict) -> dict[str, str]:
    return {"Authorization": f"Bearer {user['tokens']['access_token']}"}


@pytest.mark.integration
def test_checkin_api_daily_and_respond(client, make_user):
    headers = _headers(make_user("checkins-api@example.com"))

    created = client.post("/api/check-ins/daily", headers=headers)
    assert created.status_code == 201
    checkin_id = created.get_json()["check_in"]["id"]

    duplicate = client.post("/api/check-ins/daily", headers=headers)
    assert duplicate.status_code == 409

    status = client.get("/api/check-ins/daily/status", headers=headers).get_json()["status"]
    assert status["has_completed_today"] is True

    empty = client.post(f"/api/check-ins/{checkin_id}/respond", json={"response": ""}, headers=headers)
    assert empty.status_code == 400

    answered = client.post(
        f"/api/check-ins/{checkin_id}/respond",
        json={"response": "Things are okay, work is fine"},
        headers=headers,
    )
    body = answered.get_json()
    assert answered.status_code == 200
    assert body["check_in"]["is_answered"] is True
    assert body["check_in"]["is_resolved"] is True
    assert body["follow_up"] is None


@pytest.mark.integration
def test_checkin_api_unknown_is_404(client, make_user):
    headers = _headers(make_user("checkins-api-404@example.com"))
    assert client.get("/api/check-ins/999999", headers=headers).status_code == 404
