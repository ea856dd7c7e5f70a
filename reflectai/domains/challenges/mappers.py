"""Challenge mappers for DTO responses."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from reflectai.domains.challenges.models import Challenge, UserBadge, UserChallenge
from reflectai.domains.challenges.schemas.challenge_schemas import (
    BadgeResponse,
    ChallengeResponse,
    ChallengeStatsResponse,
    UserChallengeResponse,
)


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _challenge(challenge: Challenge) -> ChallengeResponse:
    return ChallengeResponse(
        id=challenge.id,
        title=challenge.title,
        description=challenge.description,
        type=challenge.type,
        target_value=challenge.target_value,
        duration=challenge.duration,
        points=challenge.points,
        badge_icon=challenge.badge_icon,
        badge_color=challenge.badge_color,
        is_active=bool(challenge.is_active),
    )


def map_challenge(challenge: Challenge) -> dict:
    return _challenge(challenge).model_dump()


def map_user_challenge(enrolment: UserChallenge) -> dict:
    return UserChallengeResponse(
        id=enrolment.id,
        challenge_id=enrolment.challenge_id,
        status=enrolment.status,
        current_progress=enrolment.current_progress,
        started_at=_iso(enrolment.started_at),
        completed_at=_iso(enrolment.completed_at),
        expires_at=_iso(enrolment.expires_at),
        challenge=_challenge(enrolment.challenge),
    ).model_dump()


def map_badge(badge: UserBadge) -> dict:
    return BadgeResponse(
        id=badge.id,
        challenge_id=badge.challenge_id,
        earned_at=badge.earned_at.isoformat(),
        points=badge.points,
        title=badge.challenge.title,
        badge_icon=badge.challenge.badge_icon,
        badge_color=badge.challenge.badge_color,
    ).model_dump()


def map_challenge_stats(stats: dict) -> dict:
    return ChallengeStatsResponse(**stats).model_dump()
