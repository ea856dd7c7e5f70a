"""Goal store: CRUD, hierarchy checks, progress bookkeeping and summaries."""

from __future__ import annotations

from datetime import date, datetime
from typing import Dict, List, Optional

from sqlalchemy import func

from reflectai.core.errors import NotFoundError, ValidationError
from reflectai.domains.goals.events import (
    GOAL_COMPLETED,
    GOAL_CREATED,
    GOAL_DELETED,
    GOAL_UPDATED,
)
from reflectai.domains.goals.models import GOAL_STATUSES, GOAL_TYPES, Goal
from reflectai.domains.goals.models.goal_models import (
    GOAL_STATUS_COMPLETED,
    GOAL_STATUS_IN_PROGRESS,
    GOAL_STATUS_NOT_STARTED,
)
from reflectai.extensions import db
from reflectai.platform.outbox import enqueue as enqueue_outbox

MAX_PROGRESS = 100.0


def clamp_progress(value: float) -> float:
    return max(0.0, min(MAX_PROGRESS, float(value)))


def create_goal(
    user_id: int,
    *,
    title: str,
    type: str,
    description: Optional[str] = None,
    status: str = GOAL_STATUS_NOT_STARTED,
    target_date: Optional[date] = None,
    target_minutes: Optional[int] = None,
    progress: float = 0.0,
    parent_goal_id: Optional[int] = None,
) -> Goal:
    name = (title or "").strip()
    if not name:
        raise ValidationError("title_required")
    _check_choice(type, GOAL_TYPES, "invalid_goal_type")
    _check_choice(status, GOAL_STATUSES, "invalid_goal_status")
    if parent_goal_id is not None:
        _require_parent(user_id, parent_goal_id)

    goal = Goal(
        user_id=user_id,
        title=name,
        description=description,
        type=type,
        status=status,
        target_date=target_date,
        target_minutes=_positive_or_none(target_minutes),
        progress=clamp_progress(progress),
        time_spent=0,
        parent_goal_id=parent_goal_id,
    )
    completed = settle_status(goal)
    db.session.add(goal)
    db.session.flush()

    enqueue_outbox(
        GOAL_CREATED,
        {"goal_id": goal.id, "user_id": user_id, "type": goal.type, "parent_goal_id": parent_goal_id},
        user_id=user_id,
    )
    if completed:
        enqueue_completed(goal)
    db.session.commit()
    return goal


def update_goal(user_id: int, goal_id: int, **fields) -> Goal:
    """Partial merge; fields not passed are left untouched."""
    goal = lock_goal(user_id, goal_id)
    changed: List[str] = []

    if "title" in fields and fields["title"] is not None:
        name = fields["title"].strip()
        if not name:
            raise ValidationError("title_required")
        goal.title = name
        changed.append("title")
    if "description" in fields:
        goal.description = fields["description"]
        changed.append("description")
    if fields.get("type") is not None:
        _check_choice(fields["type"], GOAL_TYPES, "invalid_goal_type")
        goal.type = fields["type"]
        changed.append("type")
    if "target_date" in fields:
        goal.target_date = fields["target_date"]
        changed.append("target_date")
    if "target_minutes" in fields:
        goal.target_minutes = _positive_or_none(fields["target_minutes"])
        if goal.target_minutes:
            goal.progress = derived_progress(goal.time_spent, goal.target_minutes)
        changed.append("target_minutes")
    if "parent_goal_id" in fields:
        parent_id = fields["parent_goal_id"]
        if parent_id is not None:
            _require_parent(user_id, parent_id, child_id=goal.id)
        goal.parent_goal_id = parent_id
        changed.append("parent_goal_id")
    if fields.get("progress") is not None:
        goal.progress = clamp_progress(fields["progress"])
        changed.append("progress")

    was_completed = goal.status == GOAL_STATUS_COMPLETED
    if fields.get("status") is not None:
        _check_choice(fields["status"], GOAL_STATUSES, "invalid_goal_status")
        goal.status = fields["status"]
        if goal.status != GOAL_STATUS_COMPLETED:
            goal.completed_date = None
        changed.append("status")
    completed = settle_status(goal, explicit_status=fields.get("status") is not None)

    db.session.flush()
    enqueue_outbox(
        GOAL_UPDATED,
        {"goal_id": goal.id, "user_id": user_id, "fields": changed},
        user_id=user_id,
    )
    if completed and not was_completed:
        enqueue_completed(goal)
    db.session.commit()
    return goal


def delete_goal(user_id: int, goal_id: int) -> None:
    goal = get_goal(user_id, goal_id)
    db.session.delete(goal)
    enqueue_outbox(GOAL_DELETED, {"goal_id": goal_id, "user_id": user_id}, user_id=user_id)
    db.session.commit()


def get_goal(user_id: int, goal_id: int) -> Goal:
    goal = Goal.query.filter_by(id=goal_id, user_id=user_id).first()
    if not goal:
        raise NotFoundError("goal_not_found")
    return goal


def lock_goal(user_id: int, goal_id: int) -> Goal:
    goal = Goal.query.filter_by(id=goal_id, user_id=user_id).with_for_update().first()
    if not goal:
        raise NotFoundError("goal_not_found")
    return goal


def list_goals(user_id: int, *, goal_type: Optional[str] = None, status: Optional[str] = None) -> List[Goal]:
    query = Goal.query.filter_by(user_id=user_id)
    if goal_type:
        _check_choice(goal_type, GOAL_TYPES, "invalid_goal_type")
        query = query.filter(Goal.type == goal_type)
    if status:
        _check_choice(status, GOAL_STATUSES, "invalid_goal_status")
        query = query.filter(Goal.status == status)
    return query.order_by(Goal.created_at.desc(), Goal.id.desc()).all()


def list_children(user_id: int, parent_goal_id: int) -> List[Goal]:
    get_goal(user_id, parent_goal_id)
    return (
        Goal.query.filter_by(user_id=user_id, parent_goal_id=parent_goal_id)
        .order_by(Goal.created_at.asc(), Goal.id.asc())
        .all()
    )


def summary(user_id: int) -> Dict:
    rows = (
        db.session.query(Goal.type, Goal.status, func.count(Goal.id), func.coalesce(func.sum(Goal.time_spent), 0))
        .filter(Goal.user_id == user_id)
        .group_by(Goal.type, Goal.status)
        .all()
    )
    result = {"total": 0, "completed": 0, "in_progress": 0, "time_spent": 0, "by_type": {}}
    for goal_type, status, count, minutes in rows:
        result["total"] += count
        result["time_spent"] += int(minutes or 0)
        result["by_type"][goal_type] = result["by_type"].get(goal_type, 0) + count
        if status == GOAL_STATUS_COMPLETED:
            result["completed"] += count
        elif status == GOAL_STATUS_IN_PROGRESS:
            result["in_progress"] += count
    return result


# --- progress ---


def derived_progress(time_spent: int, target_minutes: int) -> float:
    return clamp_progress(time_spent * 100.0 / target_minutes)


def apply_activity_delta(goal: Goal, minutes_delta: int, increment_delta: float) -> bool:
    """Fold an activity change into the goal; returns True if this completed it."""
    was_completed = goal.status == GOAL_STATUS_COMPLETED
    goal.time_spent = max(0, int(goal.time_spent or 0) + minutes_delta)
    if goal.target_minutes:
        goal.progress = derived_progress(goal.time_spent, goal.target_minutes)
    else:
        goal.progress = clamp_progress((goal.progress or 0.0) + increment_delta)
    if goal.status == GOAL_STATUS_NOT_STARTED and goal.time_spent > 0:
        goal.status = GOAL_STATUS_IN_PROGRESS
    completed = settle_status(goal)
    return completed and not was_completed


def settle_status(goal: Goal, explicit_status: bool = False) -> bool:
    """Keep status in line with progress; returns True when the goal is completed."""
    if goal.progress is not None and goal.progress >= MAX_PROGRESS:
        goal.progress = MAX_PROGRESS
        goal.status = GOAL_STATUS_COMPLETED
    elif goal.status == GOAL_STATUS_COMPLETED:
        if explicit_status:
            goal.progress = MAX_PROGRESS
        else:
            goal.status = GOAL_STATUS_IN_PROGRESS
            goal.completed_date = None
    if goal.status == GOAL_STATUS_COMPLETED:
        goal.completed_date = goal.completed_date or datetime.utcnow()
        return True
    return False


# --- helpers ---


def enqueue_completed(goal: Goal) -> None:
    enqueue_outbox(
        GOAL_COMPLETED,
        {
            "goal_id": goal.id,
            "user_id": goal.user_id,
            "completed_date": goal.completed_date.isoformat() if goal.completed_date else None,
        },
        user_id=goal.user_id,
    )


def _check_choice(value: str, choices, code: str) -> None:
    if value not in choices:
        raise ValidationError(code, allowed=list(choices))


def _positive_or_none(value: Optional[int]) -> Optional[int]:
    if value is None:
        return None
    if int(value) <= 0:
        raise ValidationError("target_minutes_must_be_positive")
    return int(value)


def _require_parent(user_id: int, parent_id: int, child_id: Optional[int] = None) -> Goal:
    if child_id is not None and parent_id == child_id:
        raise ValidationError("goal_cannot_parent_itself")
    parent = Goal.query.filter_by(id=parent_id, user_id=user_id).first()
    if not parent:
        raise NotFoundError("parent_goal_not_found")
    # Walk up so a goal never becomes its own ancestor.
    ancestor = parent
    while child_id is not None and ancestor.parent_goal_id is not None:
        if ancestor.parent_goal_id == child_id:
            raise ValidationError("goal_hierarchy_cycle")
        ancestor = db.session.get(Goal, ancestor.parent_goal_id)
        if ancestor is None:
            break
    return parent
