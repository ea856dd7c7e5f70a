"""Goal mappers for DTO responses."""

from __future__ import annotations

from reflectai.domains.goals.models import Goal, GoalActivity
from reflectai.domains.goals.schemas.goal_schemas import (
    ActivityResponse,
    GoalResponse,
    GoalSummaryResponse,
)


def map_goal(goal: Goal) -> dict:
    return GoalResponse(
        id=goal.id,
        title=goal.title,
        description=goal.description,
        type=goal.type,
        status=goal.status,
        target_date=goal.target_date,
        completed_date=goal.completed_date.isoformat() if goal.completed_date else None,
        progress=round(float(goal.progress or 0.0), 2),
        time_spent=int(goal.time_spent or 0),
        target_minutes=goal.target_minutes,
        parent_goal_id=goal.parent_goal_id,
        created_at=goal.created_at.isoformat() if goal.created_at else "",
        updated_at=goal.updated_at.isoformat() if goal.updated_at else "",
    ).model_dump(mode="json")


def map_activity(activity: GoalActivity) -> dict:
    return ActivityResponse(
        id=activity.id,
        goal_id=activity.goal_id,
        date=activity.activity_date.isoformat(),
        minutes_spent=activity.minutes_spent,
        progress_increment=float(activity.progress_increment or 0.0),
        description=activity.description,
        created_at=activity.created_at.isoformat() if activity.created_at else "",
    ).model_dump(mode="json")


def map_summary(summary: dict) -> dict:
    return GoalSummaryResponse(**summary).model_dump()
