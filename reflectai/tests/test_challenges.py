"""Challenges: catalogue seeding, enrolment, progress, badges and event-driven advancement."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

pytestmark = pytest.mark.integration

from reflectai.core.errors import NotFoundError, ValidationError
from reflectai.domains.challenges.events import BADGE_AWARDED, CHALLENGE_COMPLETED
from reflectai.domains.challenges.models import Challenge, UserBadge, UserChallenge
from reflectai.domains.challenges.services import challenge_service
from reflectai.domains.goals.services import activity_service, goal_service
from reflectai.domains.journal.services import journal_service
from reflectai.extensions import db
from reflectai.platform.outbox import EventBusAdapter
from reflectai.platform.outbox.models import OutboxMessage
from reflectai.platform.worker.config import DispatchConfig
from reflectai.platform.worker.dispatcher import process_ready_batch


@pytest.fixture
def user_id(make_user):
    return make_user("challenges@example.com")["user_id"]


@pytest.fixture
def catalogue(app):
    challenge_service.seed_default_challenges()
    return {c.type: c for c in Challenge.query.all()}


def _dispatch_all() -> int:
    return process_ready_batch(EventBusAdapter().dispatch, DispatchConfig(batch_size=100, poll_interval=0))


def test_seed_is_idempotent(app):
    assert challenge_service.seed_default_challenges() == len(challenge_service.DEFAULT_CHALLENGES)
    assert challenge_service.seed_default_challenges() == 0
    assert Challenge.query.count() == len(challenge_service.DEFAULT_CHALLENGES)


def test_list_active_challenges_excludes_inactive(app, catalogue):
    catalogue["chat_explorer"].is_active = False
    db.session.commit()

    titles = [c.title for c in challenge_service.list_active_challenges()]

    assert "Curious Mind" not in titles
    assert len(titles) == len(challenge_service.DEFAULT_CHALLENGES) - 1


def test_start_challenge_sets_expiry_and_is_stable(app, user_id, catalogue):
    challenge = catalogue["daily_journal"]
    now = datetime(2026, 10, 1, 12, 0)

    enrolment = challenge_service.start_challenge(user_id, challenge.id, now=now)
    assert enrolment.status == "in_progress"
    assert enrolment.current_progress == 0
    assert enrolment.expires_at == now + timedelta(days=challenge.duration)

    challenge_service.update_progress(user_id, challenge.id, 3, now=now)
    again = challenge_service.start_challenge(user_id, challenge.id, now=now + timedelta(days=1))
    assert again.id == enrolment.id
    assert again.current_progress == 3
    assert again.started_at == now


def test_start_unknown_challenge_is_not_found(app, user_id):
    with pytest.raises(NotFoundError):
        challenge_service.start_challenge(user_id, 424242)


def test_progress_without_enrolment_is_not_found(app, user_id, catalogue):
    with pytest.raises(NotFoundError):
        challenge_service.update_progress(user_id, catalogue["daily_journal"].id, 1)


def test_reaching_target_completes_and_awards_badge_once(app, user_id, catalogue):
    challenge = catalogue["goal_achiever"]
    challenge_service.start_challenge(user_id, challenge.id)

    completed = challenge_service.update_progress(user_id, challenge.id, challenge.target_value + 2)
    assert completed.status == "completed"
    assert completed.completed_at is not None

    unchanged = challenge_service.update_progress(user_id, challenge.id, 0)
    assert unchanged.status == "completed"
    assert unchanged.current_progress == challenge.target_value + 2

    challenge_service.award_badge(user_id, challenge)
    db.session.commit()
    badges = UserBadge.query.filter_by(user_id=user_id).all()
    assert len(badges) == 1
    assert badges[0].points == challenge.points
    assert OutboxMessage.query.filter_by(event_type=BADGE_AWARDED).count() == 1
    assert OutboxMessage.query.filter_by(event_type=CHALLENGE_COMPLETED).count() == 1

    stats = challenge_service.challenge_stats(user_id)
    assert stats == {
        "total_badges": 1,
        "total_points": challenge.points,
        "active_challenges": 0,
        "completed_challenges": 1,
    }


def test_expired_challenge_rejects_progress(app, user_id, catalogue):
    challenge = catalogue["mood_tracker"]
    start = datetime(2026, 1, 1)
    challenge_service.start_challenge(user_id, challenge.id, now=start)

    with pytest.raises(ValidationError) as exc:
        challenge_service.update_progress(user_id, challenge.id, 1, now=start + timedelta(days=challenge.duration + 1))
    assert exc.value.message == "challenge_expired"

    enrolment = UserChallenge.query.filter_by(user_id=user_id, challenge_id=challenge.id).one()
    assert enrolment.status == "expired"

    restarted = challenge_service.start_challenge(user_id, challenge.id, now=datetime.utcnow())
    assert restarted.status == "in_progress"
    assert restarted.current_progress == 0


def test_negative_progress_is_rejected(app, user_id, catalogue):
    challenge_service.start_challenge(user_id, catalogue["daily_journal"].id)
    with pytest.raises(ValidationError):
        challenge_service.update_progress(user_id, catalogue["daily_journal"].id, -1)


# ==================== Event-driven advancement ====================


def test_journal_entry_event_advances_challenges(app, user_id, catalogue):
    challenge_service.start_challenge(user_id, catalogue["daily_journal"].id)
    challenge_service.start_challenge(user_id, catalogue["mood_tracker"].id)
    challenge_service.start_challenge(user_id, catalogue["streak_keeper"].id)

    journal_service.create_entry(user_id, content="Counting this one", moods=["Calm"])
    assert _dispatch_all() > 0

    progress = {
        uc.challenge.type: uc.current_progress
        for uc in UserChallenge.query.filter_by(user_id=user_id).all()
    }
    assert progress == {"daily_journal": 1, "mood_tracker": 1, "streak_keeper": 1}
    assert OutboxMessage.query.filter(OutboxMessage.status != "sent").count() == 0


def test_goal_completion_event_advances_goal_achiever(app, user_id, catalogue):
    challenge_service.start_challenge(user_id, catalogue["goal_achiever"].id)
    goal = goal_service.create_goal(user_id, title="Finish", type="daily")
    activity_service.log_activity(user_id, goal.id, minutes_spent=10, progress_increment=100)

    _dispatch_all()

    enrolment = UserChallenge.query.filter_by(user_id=user_id, challenge_id=catalogue["goal_achiever"].id).one()
    assert enrolment.current_progress == 1


def test_unenrolled_user_is_not_advanced(app, user_id, catalogue):
    journal_service.create_entry(user_id, content="No challenge yet")

    _dispatch_all()

    assert UserChallenge.query.filter_by(user_id=user_id).count() == 0


# ==================== API ====================


def test_challenge_api_flow(client, make_user, catalogue):
    user = make_user("challenges-api@example.com")
    headers = {"Authorization": f"Bearer {user['tokens']['access_token']}"}
    challenge = catalogue["reflection_master"]

    listing = client.get("/api/challenges", headers=headers).get_json()
    assert len(listing["items"]) == len(challenge_service.DEFAULT_CHALLENGES)

    missing = client.post(f"/api/challenges/{challenge.id}/progress", json={"progress": 1}, headers=headers)
    assert missing.status_code == 404

    started = client.post(f"/api/challenges/{challenge.id}/start", headers=headers)
    assert started.status_code == 200
    assert started.get_json()["challenge"]["status"] == "in_progress"

    finished = client.post(
        f"/api/challenges/{challenge.id}/progress",
        json={"progress": challenge.target_value},
        headers=headers,
    )
    assert finished.get_json()["challenge"]["status"] == "completed"

    badges = client.get("/api/badges", headers=headers).get_json()["items"]
    assert [b["challenge_id"] for b in badges] == [challenge.id]

    active = client.get("/api/challenges/user", headers=headers).get_json()["items"]
    everything = client.get("/api/challenges/user?all=1", headers=headers).get_json()["items"]
    assert active == []
    assert len(everything) == 1


# ==================== CLI ====================


def test_cli_seed_and_dispatch(app, user_id):
    runner = app.test_cli_runner()

    seeded = runner.invoke(args=["seed-challenges"])
    assert seeded.exit_code == 0
    assert f"Seeded {len(challenge_service.DEFAULT_CHALLENGES)} challenge(s)" in seeded.output

    journal_service.create_entry(user_id, content="Queued for dispatch")
    dispatched = runner.invoke(args=["dispatch-outbox", "--once"])
    assert dispatched.exit_code == 0
    assert "Processed 1 outbox message(s)" in dispatched.output
