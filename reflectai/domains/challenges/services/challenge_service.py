"""Wellness challenges: enrolment, progress, badges and event-driven advancement."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from reflectai.core.errors import NotFoundError, ValidationError
from reflectai.core.events.event_bus import EventBus
from reflectai.core.events.event_models import EventRecord
from reflectai.domains.challenges.events import (
    BADGE_AWARDED,
    CHALLENGE_COMPLETED,
    CHALLENGE_STARTED,
)
from reflectai.domains.challenges.models import Challenge, UserBadge, UserChallenge
from reflectai.domains.challenges.models.challenge_models import (
    STATUS_COMPLETED,
    STATUS_EXPIRED,
    STATUS_IN_PROGRESS,
    STATUS_NOT_STARTED,
)
from reflectai.domains.chat.events import CHAT_MESSAGE_SENT
from reflectai.domains.goals.events import GOAL_COMPLETED
from reflectai.domains.journal.events import JOURNAL_ENTRY_CREATED, JOURNAL_REFLECTION_GENERATED
from reflectai.domains.journal.models import JournalStats
from reflectai.extensions import db
from reflectai.platform.outbox import enqueue as enqueue_outbox

logger = logging.getLogger(__name__)

DEFAULT_CHALLENGES = (
    {
        "title": "Week of Words",
        "description": "Write a journal entry on 7 different days.",
        "type": "daily_journal",
        "target_value": 7,
        "duration": 14,
        "points": 100,
        "badge_icon": "pen",
        "badge_color": "#4F46E5",
    },
    {
        "title": "Streak Keeper",
        "description": "Journal 5 days in a row.",
        "type": "streak_keeper",
        "target_value": 5,
        "duration": 7,
        "points": 150,
        "badge_icon": "flame",
        "badge_color": "#F97316",
    },
    {
        "title": "Mood Mapper",
        "description": "Tag your mood on 10 journal entries.",
        "type": "mood_tracker",
        "target_value": 10,
        "duration": 30,
        "points": 120,
        "badge_icon": "palette",
        "badge_color": "#EC4899",
    },
    {
        "title": "Goal Getter",
        "description": "Complete 3 goals.",
        "type": "goal_achiever",
        "target_value": 3,
        "duration": 30,
        "points": 200,
        "badge_icon": "target",
        "badge_color": "#10B981",
    },
    {
        "title": "Curious Mind",
        "description": "Have 10 conversations with the AI companion.",
        "type": "chat_explorer",
        "target_value": 10,
        "duration": 14,
        "points": 80,
        "badge_icon": "chat",
        "badge_color": "#0EA5E9",
    },
    {
        "title": "Deep Reflector",
        "description": "Regenerate and read 5 AI reflections.",
        "type": "reflection_master",
        "target_value": 5,
        "duration": 14,
        "points": 90,
        "badge_icon": "sparkles",
        "badge_color": "#FFD700",
    },
)


def seed_default_challenges() -> int:
    """Insert catalogue challenges missing by title; returns how many were added."""
    existing = {title for (title,) in db.session.query(Challenge.title).all()}
    added = 0
    for spec in DEFAULT_CHALLENGES:
        if spec["title"] in existing:
            continue
        db.session.add(Challenge(is_active=True, **spec))
        added += 1
    db.session.commit()
    return added


def list_active_challenges() -> List[Challenge]:
    return Challenge.query.filter_by(is_active=True).order_by(Challenge.points.asc(), Challenge.id.asc()).all()


def list_user_challenges(user_id: int, active_only: bool = False) -> List[UserChallenge]:
    query = UserChallenge.query.filter_by(user_id=user_id)
    if active_only:
        query = query.filter(UserChallenge.status.in_((STATUS_NOT_STARTED, STATUS_IN_PROGRESS)))
    return query.order_by(UserChallenge.created_at.desc(), UserChallenge.id.desc()).all()


def list_badges(user_id: int) -> List[UserBadge]:
    return UserBadge.query.filter_by(user_id=user_id).order_by(UserBadge.earned_at.desc(), UserBadge.id.desc()).all()


def challenge_stats(user_id: int) -> Dict[str, int]:
    badges = list_badges(user_id)
    enrolments = list_user_challenges(user_id)
    return {
        "total_badges": len(badges),
        "total_points": sum(b.points for b in badges),
        "active_challenges": sum(1 for uc in enrolments if uc.status in (STATUS_NOT_STARTED, STATUS_IN_PROGRESS)),
        "completed_challenges": sum(1 for uc in enrolments if uc.status == STATUS_COMPLETED),
    }


def start_challenge(user_id: int, challenge_id: int, now: Optional[datetime] = None) -> UserChallenge:
    """Enrol the user; an in-progress or completed enrolment is returned unchanged."""
    challenge = Challenge.query.filter_by(id=challenge_id, is_active=True).first()
    if not challenge:
        raise NotFoundError("challenge_not_found")
    enrolment = _lock_enrolment(user_id, challenge_id)
    if enrolment and enrolment.status in (STATUS_IN_PROGRESS, STATUS_COMPLETED):
        return enrolment

    now = now or datetime.utcnow()
    if enrolment is None:
        enrolment = UserChallenge(user_id=user_id, challenge_id=challenge_id)
        db.session.add(enrolment)
    enrolment.status = STATUS_IN_PROGRESS
    enrolment.current_progress = 0
    enrolment.started_at = now
    enrolment.completed_at = None
    enrolment.expires_at = now + timedelta(days=challenge.duration or 7)
    db.session.flush()
    enqueue_outbox(
        CHALLENGE_STARTED,
        {"challenge_id": challenge_id, "user_id": user_id, "expires_at": enrolment.expires_at.isoformat()},
        user_id=user_id,
    )
    db.session.commit()
    return enrolment


def update_progress(
    user_id: int,
    challenge_id: int,
    progress: int,
    now: Optional[datetime] = None,
) -> UserChallenge:
    if progress is None or int(progress) < 0:
        raise ValidationError("progress_must_be_non_negative")
    enrolment = _lock_enrolment(user_id, challenge_id)
    if enrolment is None:
        raise NotFoundError("challenge_not_started")
    if enrolment.status == STATUS_COMPLETED:
        return enrolment
    now = now or datetime.utcnow()
    if _expire_if_due(enrolment, now):
        db.session.commit()
        raise ValidationError("challenge_expired")

    set_progress(enrolment, int(progress), now)
    db.session.commit()
    return enrolment


def set_progress(enrolment: UserChallenge, progress: int, now: datetime) -> None:
    """Stage progress and, on reaching the target, completion plus the badge; caller commits."""
    enrolment.current_progress = progress
    if enrolment.status == STATUS_NOT_STARTED:
        enrolment.status = STATUS_IN_PROGRESS
    if progress >= enrolment.challenge.target_value:
        enrolment.status = STATUS_COMPLETED
        enrolment.completed_at = now
        enqueue_outbox(
            CHALLENGE_COMPLETED,
            {"challenge_id": enrolment.challenge_id, "user_id": enrolment.user_id, "completed_at": now.isoformat()},
            user_id=enrolment.user_id,
        )
        award_badge(enrolment.user_id, enrolment.challenge)


def award_badge(user_id: int, challenge: Challenge) -> UserBadge:
    """Idempotent: an existing badge for (user, challenge) is returned as is."""
    badge = UserBadge.query.filter_by(user_id=user_id, challenge_id=challenge.id).first()
    if badge:
        return badge
    badge = UserBadge(user_id=user_id, challenge_id=challenge.id, points=challenge.points, earned_at=datetime.utcnow())
    db.session.add(badge)
    db.session.flush()
    enqueue_outbox(
        BADGE_AWARDED,
        {"badge_id": badge.id, "challenge_id": challenge.id, "user_id": user_id, "points": badge.points},
        user_id=user_id,
    )
    logger.info("Awarded badge for challenge %s to user %s", challenge.id, user_id)
    return badge


def advance_challenges(
    user_id: int,
    challenge_type: str,
    *,
    step: int = 1,
    absolute: Optional[int] = None,
    now: Optional[datetime] = None,
) -> List[UserChallenge]:
    """Move the user's in-progress challenges of one type forward; caller commits."""
    now = now or datetime.utcnow()
    enrolments = (
        UserChallenge.query.join(Challenge)
        .filter(
            UserChallenge.user_id == user_id,
            UserChallenge.status == STATUS_IN_PROGRESS,
            Challenge.type == challenge_type,
        )
        .all()
    )
    advanced = []
    for enrolment in enrolments:
        if _expire_if_due(enrolment, now):
            continue
        target = absolute if absolute is not None else enrolment.current_progress + step
        if target > enrolment.current_progress:
            set_progress(enrolment, target, now)
            advanced.append(enrolment)
    return advanced


# --- event subscribers (run inside the outbox dispatcher's transaction) ---


def on_journal_entry_created(event: EventRecord) -> None:
    user_id = event.owner_id
    if user_id is None:
        return
    advance_challenges(user_id, "daily_journal")
    if event.payload.get("moods"):
        advance_challenges(user_id, "mood_tracker")
    stats = JournalStats.query.filter_by(user_id=user_id).first()
    if stats is not None:
        advance_challenges(user_id, "streak_keeper", absolute=stats.current_streak)


def on_reflection_generated(event: EventRecord) -> None:
    if event.owner_id is not None:
        advance_challenges(event.owner_id, "reflection_master")


def on_goal_completed(event: EventRecord) -> None:
    if event.owner_id is not None:
        advance_challenges(event.owner_id, "goal_achiever")


def on_chat_message_sent(event: EventRecord) -> None:
    if event.owner_id is not None:
        advance_challenges(event.owner_id, "chat_explorer")


def register_subscriptions(bus: EventBus) -> None:
    bus.subscribe_many(
        {
            JOURNAL_ENTRY_CREATED: on_journal_entry_created,
            JOURNAL_REFLECTION_GENERATED: on_reflection_generated,
            GOAL_COMPLETED: on_goal_completed,
            CHAT_MESSAGE_SENT: on_chat_message_sent,
        }
    )


# --- helpers ---


def _lock_enrolment(user_id: int, challenge_id: int) -> Optional[UserChallenge]:
    return (
        UserChallenge.query.filter_by(user_id=user_id, challenge_id=challenge_id)
        .with_for_update()
        .first()
    )


def _expire_if_due(enrolment: UserChallenge, now: datetime) -> bool:
    if enrolment.expires_at and enrolment.expires_at < now and enrolment.status != STATUS_COMPLETED:
        enrolment.status = STATUS_EXPIRED
        return True
    return False
