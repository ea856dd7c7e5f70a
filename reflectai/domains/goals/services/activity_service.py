"""Activity log against goals.

Every write locks the owning goal row and folds the activity into the goal's
``time_spent`` and ``progress`` inside the same transaction.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import List, Optional, Tuple

from reflectai.core.errors import NotFoundError, ValidationError
from reflectai.domains.goals.events import (
    GOAL_ACTIVITY_DELETED,
    GOAL_ACTIVITY_LOGGED,
    GOAL_ACTIVITY_UPDATED,
)
from reflectai.domains.goals.models import Goal, GoalActivity
from reflectai.domains.goals.services import goal_service
from reflectai.extensions import db
from reflectai.platform.outbox import enqueue as enqueue_outbox

logger = logging.getLogger(__name__)


def log_activity(
    user_id: int,
    goal_id: int,
    *,
    minutes_spent: int,
    progress_increment: float = 0.0,
    description: Optional[str] = None,
    activity_date: Optional[date] = None,
) -> Tuple[GoalActivity, Goal]:
    minutes = _require_minutes(minutes_spent)
    increment = _require_increment(progress_increment)
    goal = goal_service.lock_goal(user_id, goal_id)

    activity = GoalActivity(
        goal_id=goal.id,
        user_id=user_id,
        activity_date=_coerce_day(activity_date),
        minutes_spent=minutes,
        progress_increment=increment,
        description=(description or "").strip() or None,
    )
    db.session.add(activity)
    completed = goal_service.apply_activity_delta(goal, minutes, increment)
    db.session.flush()

    enqueue_outbox(
        GOAL_ACTIVITY_LOGGED,
        {
            "activity_id": activity.id,
            "goal_id": goal.id,
            "user_id": user_id,
            "minutes_spent": minutes,
            "progress_increment": increment,
            "time_spent": goal.time_spent,
            "progress": goal.progress,
        },
        user_id=user_id,
    )
    if completed:
        goal_service.enqueue_completed(goal)
    db.session.commit()
    logger.info("Logged %s minutes on goal %s for user %s", minutes, goal.id, user_id)
    return activity, goal


def update_activity(user_id: int, activity_id: int, **fields) -> Tuple[GoalActivity, Goal]:
    """Partial merge; the difference against the stored row is applied to the goal."""
    activity = get_activity(user_id, activity_id)
    goal = goal_service.lock_goal(user_id, activity.goal_id)

    minutes_delta = 0
    increment_delta = 0.0
    if fields.get("minutes_spent") is not None:
        minutes = _require_minutes(fields["minutes_spent"])
        minutes_delta = minutes - activity.minutes_spent
        activity.minutes_spent = minutes
    if fields.get("progress_increment") is not None:
        increment = _require_increment(fields["progress_increment"])
        increment_delta = increment - (activity.progress_increment or 0.0)
        activity.progress_increment = increment
    if "description" in fields:
        activity.description = (fields["description"] or "").strip() or None
    if fields.get("activity_date") is not None:
        activity.activity_date = _coerce_day(fields["activity_date"])

    completed = False
    if minutes_delta or increment_delta:
        completed = goal_service.apply_activity_delta(goal, minutes_delta, increment_delta)
    db.session.flush()
    enqueue_outbox(
        GOAL_ACTIVITY_UPDATED,
        {"activity_id": activity.id, "goal_id": goal.id, "user_id": user_id},
        user_id=user_id,
    )
    if completed:
        goal_service.enqueue_completed(goal)
    db.session.commit()
    return activity, goal


def delete_activity(user_id: int, activity_id: int) -> Goal:
    activity = get_activity(user_id, activity_id)
    goal = goal_service.lock_goal(user_id, activity.goal_id)
    goal_service.apply_activity_delta(goal, -activity.minutes_spent, -(activity.progress_increment or 0.0))
    db.session.delete(activity)
    enqueue_outbox(
        GOAL_ACTIVITY_DELETED,
        {"activity_id": activity_id, "goal_id": goal.id, "user_id": user_id},
        user_id=user_id,
    )
    db.session.commit()
    return goal


def get_activity(user_id: int, activity_id: int) -> GoalActivity:
    activity = GoalActivity.query.filter_by(id=activity_id, user_id=user_id).first()
    if not activity:
        raise NotFoundError("activity_not_found")
    return activity


def list_goal_activities(user_id: int, goal_id: int) -> List[GoalActivity]:
    goal_service.get_goal(user_id, goal_id)
    return (
        GoalActivity.query.filter_by(user_id=user_id, goal_id=goal_id)
        .order_by(GoalActivity.activity_date.desc(), GoalActivity.id.desc())
        .all()
    )


def list_activities(user_id: int, start: Optional[date] = None, end: Optional[date] = None) -> List[GoalActivity]:
    if start and end and start > end:
        raise ValidationError("invalid_date_range")
    query = GoalActivity.query.filter_by(user_id=user_id)
    if start:
        query = query.filter(GoalActivity.activity_date >= start)
    if end:
        query = query.filter(GoalActivity.activity_date <= end)
    return query.order_by(GoalActivity.activity_date.desc(), GoalActivity.id.desc()).all()


# --- helpers ---


def _require_minutes(value) -> int:
    try:
        minutes = int(value)
    except (TypeError, ValueError):
        raise ValidationError("minutes_spent_invalid")
    if minutes <= 0:
        raise ValidationError("minutes_spent_must_be_positive")
    return minutes


def _require_increment(value) -> float:
    try:
        increment = float(value or 0.0)
    except (TypeError, ValueError):
        raise ValidationError("progress_increment_invalid")
    if increment < 0 or increment > 100:
        raise ValidationError("progress_increment_out_of_range")
    return increment


def _coerce_day(value: Optional[date | datetime]) -> date:
    if value is None:
        return datetime.utcnow().date()
    if isinstance(value, datetime):
        return value.date()
    return value
