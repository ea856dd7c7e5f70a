"""Goals and goal activities: progress accounting, hierarchy and API."""

from __future__ import annotations

from datetime import date, datetime

import pytest

pytestmark = pytest.mark.integration

from reflectai.core.errors import NotFoundError, ValidationError
from reflectai.domains.goals.events import GOAL_ACTIVITY_LOGGED, GOAL_COMPLETED
from reflectai.domains.goals.models import Goal, GoalActivity
from reflectai.domains.goals.services import activity_service, goal_service
from reflectai.extensions import db
from reflectai.platform.outbox.models import OutboxMessage


@pytest.fixture
def user_id(make_user):
    return make_user("goals@example.com")["user_id"]


def _events(user_id: int, event_type: str) -> list[OutboxMessage]:
    return OutboxMessage.query.filter_by(user_id=user_id, event_type=event_type).all()


# ==================== Goals ====================


def test_create_goal_defaults(app, user_id):
    goal = goal_service.create_goal(user_id, title="  Read more  ", type="monthly")

    assert goal.title == "Read more"
    assert goal.status == "not_started"
    assert goal.progress == 0
    assert goal.time_spent == 0
    assert goal.completed_date is None


def test_create_goal_rejects_unknown_type(app, user_id):
    with pytest.raises(ValidationError) as exc:
        goal_service.create_goal(user_id, title="Bad", type="decade")
    assert exc.value.message == "invalid_goal_type"


def test_explicit_completed_status_sets_full_progress(app, user_id):
    goal = goal_service.create_goal(user_id, title="Done", type="weekly", progress=40)

    updated = goal_service.update_goal(user_id, goal.id, status="completed")

    assert updated.status == "completed"
    assert updated.progress == 100
    assert updated.completed_date is not None
    assert len(_events(user_id, GOAL_COMPLETED)) == 1


def test_lowering_progress_reopens_completed_goal(app, user_id):
    goal = goal_service.create_goal(user_id, title="Reopen", type="weekly", progress=100)
    assert goal.status == "completed"

    updated = goal_service.update_goal(user_id, goal.id, progress=60)

    assert updated.status == "in_progress"
    assert updated.completed_date is None


def test_parent_goal_must_not_form_cycle(app, user_id):
    root = goal_service.create_goal(user_id, title="Life", type="life")
    child = goal_service.create_goal(user_id, title="Year", type="yearly", parent_goal_id=root.id)

    assert [g.id for g in goal_service.list_children(user_id, root.id)] == [child.id]
    with pytest.raises(ValidationError):
        goal_service.update_goal(user_id, root.id, parent_goal_id=child.id)
    with pytest.raises(ValidationError):
        goal_service.update_goal(user_id, root.id, parent_goal_id=root.id)


def test_parent_goal_of_other_user_is_not_found(app, user_id, make_user):
    other = make_user("goals-other@example.com")["user_id"]
    foreign = goal_service.create_goal(other, title="Theirs", type="life")

    with pytest.raises(NotFoundError):
        goal_service.create_goal(user_id, title="Mine", type="yearly", parent_goal_id=foreign.id)


def test_summary_counts_by_status_and_type(app, user_id):
    goal_service.create_goal(user_id, title="A", type="daily")
    goal_service.create_goal(user_id, title="B", type="daily", status="in_progress")
    goal_service.create_goal(user_id, title="C", type="weekly", progress=100)

    result = goal_service.summary(user_id)

    assert result["total"] == 3
    assert result["completed"] == 1
    assert result["in_progress"] == 1
    assert result["by_type"] == {"daily": 2, "weekly": 1}


def test_delete_goal_removes_activities(app, user_id):
    goal = goal_service.create_goal(user_id, title="Temp", type="daily")
    activity_service.log_activity(user_id, goal.id, minutes_spent=10)

    goal_service.delete_goal(user_id, goal.id)

    assert db.session.get(Goal, goal.id) is None
    assert GoalActivity.query.filter_by(user_id=user_id).count() == 0


# ==================== Activities ====================


def test_log_activity_adds_time_and_progress(app, user_id):
    goal = goal_service.create_goal(user_id, title="Practice", type="weekly", progress=20)
    goal.time_spent = 30
    db.session.commit()

    activity, updated = activity_service.log_activity(
        user_id, goal.id, minutes_spent=45, progress_increment=10, description="Scales"
    )

    assert activity.minutes_spent == 45
    assert activity.activity_date == datetime.utcnow().date()
    assert updated.time_spent == 75
    assert updated.progress == 30
    assert updated.status == "in_progress"
    assert _events(user_id, GOAL_ACTIVITY_LOGGED)[0].payload["time_spent"] == 75


@pytest.mark.parametrize("minutes", [0, -5])
def test_log_activity_rejects_non_positive_minutes(app, user_id, minutes):
    goal = goal_service.create_goal(user_id, title="Practice", type="weekly")

    with pytest.raises(ValidationError):
        activity_service.log_activity(user_id, goal.id, minutes_spent=minutes)
    assert GoalActivity.query.count() == 0


def test_progress_is_capped_and_completes_goal_once(app, user_id):
    goal = goal_service.create_goal(user_id, title="Sprint", type="daily", progress=95)

    _, updated = activity_service.log_activity(user_id, goal.id, minutes_spent=20, progress_increment=50)
    assert updated.progress == 100
    assert updated.status == "completed"

    _, again = activity_service.log_activity(user_id, goal.id, minutes_spent=5, progress_increment=5)
    assert again.progress == 100
    assert len(_events(user_id, GOAL_COMPLETED)) == 1


def test_target_minutes_derives_progress(app, user_id):
    goal = goal_service.create_goal(user_id, title="Meditate", type="monthly", target_minutes=200)

    _, updated = activity_service.log_activity(user_id, goal.id, minutes_spent=50, progress_increment=80)

    assert updated.time_spent == 50
    assert updated.progress == 25


def test_update_and_delete_activity_apply_deltas(app, user_id):
    goal = goal_service.create_goal(user_id, title="Run", type="weekly")
    activity, _ = activity_service.log_activity(user_id, goal.id, minutes_spent=30, progress_increment=20)

    _, after_update = activity_service.update_activity(user_id, activity.id, minutes_spent=40, progress_increment=25)
    assert after_update.time_spent == 40
    assert after_update.progress == 25

    after_delete = activity_service.delete_activity(user_id, activity.id)
    assert after_delete.time_spent == 0
    assert after_delete.progress == 0


def test_list_activities_by_range(app, user_id):
    goal = goal_service.create_goal(user_id, title="Write", type="daily")
    activity_service.log_activity(user_id, goal.id, minutes_spent=10, activity_date=date(2026, 3, 1))
    activity_service.log_activity(user_id, goal.id, minutes_spent=10, activity_date=date(2026, 3, 15))

    in_range = activity_service.list_activities(user_id, date(2026, 3, 10), date(2026, 3, 31))

    assert [a.activity_date for a in in_range] == [date(2026, 3, 15)]
    with pytest.raises(ValidationError):
        activity_service.list_activities(user_id, date(2026, 4, 1), date(2026, 3, 1))


# ==================== API ====================


def _headers(user: dict) -> dict[str, str]:
    return {"Authorization": f"Bearer {user['tokens']['access_token']}"}


def test_goal_api_create_log_and_summary(client, make_user):
    user = make_user("goals-api@example.com")
    headers = _headers(user)

    created = client.post("/api/goals", json={"title": "Guitar", "type": "weekly"}, headers=headers)
    assert created.status_code == 201
    goal_id = created.get_json()["goal"]["id"]

    logged = client.post(
        f"/api/goals/{goal_id}/activities",
        json={"minutes_spent": 45, "progress_increment": 10, "date": "2026-10-01"},
        headers=headers,
    )
    assert logged.status_code == 201
    body = logged.get_json()
    assert body["activity"]["date"] == "2026-10-01"
    assert body["goal"]["time_spent"] == 45
    assert body["goal"]["progress"] == 10

    summary = client.get("/api/goals/summary", headers=headers).get_json()["summary"]
    assert summary["total"] == 1
    assert summary["time_spent"] == 45


def test_goal_api_rejects_invalid_payloads(client, make_user):
    headers = _headers(make_user("goals-api-invalid@example.com"))

    bad_type = client.post("/api/goals", json={"title": "X", "type": "forever"}, headers=headers)
    assert bad_type.status_code == 400

    goal_id = client.post("/api/goals", json={"title": "Y", "type": "daily"}, headers=headers).get_json()["goal"]["id"]
    bad_minutes = client.post(f"/api/goals/{goal_id}/activities", json={"minutes_spent": 0}, headers=headers)
    assert bad_minutes.status_code == 400


def test_goal_api_delete_then_404(client, make_user):
    headers = _headers(make_user("goals-api-delete@example.com"))
    goal_id = client.post("/api/goals", json={"title": "Z", "type": "daily"}, headers=headers).get_json()["goal"]["id"]

    assert client.delete(f"/api/goals/{goal_id}", headers=headers).status_code == 204
    assert client.get(f"/api/goals/{goal_id}", headers=headers).status_code == 404
