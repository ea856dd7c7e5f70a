"""Check-in mappers for DTO responses."""

from __future__ import annotations

from reflectai.domains.checkins.models import CheckIn
from reflectai.domains.checkins.schemas.checkin_schemas import (
    CheckInResponse,
    DailyStatusResponse,
)


def map_checkin(checkin: CheckIn) -> dict:
    return CheckInResponse(
        id=checkin.id,
        type=checkin.type,
        question=checkin.question,
        original_date=checkin.original_date.isoformat(),
        scheduled_date=checkin.scheduled_date.isoformat(),
        is_answered=bool(checkin.is_answered),
        user_response=checkin.user_response,
        ai_follow_up=checkin.ai_follow_up,
        is_resolved=bool(checkin.is_resolved),
        priority=checkin.priority,
        tags=list(checkin.tags or []),
        related_entry_id=checkin.related_entry_id,
    ).model_dump()


def map_daily_status(status: dict) -> dict:
    last = status.get("last_check_in_date")
    return DailyStatusResponse(
        has_completed_today=status["has_completed_today"],
        last_check_in_date=last.isoformat() if last else None,
        can_create_new=status["can_create_new"],
    ).model_dump()
