"""Check-ins: scheduled questions, daily wellness prompts and answer triage.

Answer triage (resolution, priority, topic tags) is a keyword heuristic that
runs whether or not the AI follow-up succeeds.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

from reflectai.core.ai import client as ai_client
from reflectai.core.ai.fallbacks import CHECKIN_FOLLOW_UP as CHECKIN_FOLLOW_UP_FALLBACK
from reflectai.core.ai.prompts import follow_up_messages
from reflectai.core.errors import ConflictError, NotFoundError, UpstreamError, ValidationError
from reflectai.domains.checkins.events import (
    CHECKIN_ANSWERED,
    CHECKIN_CREATED,
    CHECKIN_FOLLOW_UP_SCHEDULED,
)
from reflectai.domains.checkins.models import CHECKIN_TYPES, PRIORITIES, CheckIn
from reflectai.domains.checkins.models.checkin_models import (
    CHECKIN_COUNSELOR,
    CHECKIN_DAILY,
    CHECKIN_FOLLOW_UP,
    CHECKIN_PHILOSOPHER,
    PRIORITY_HIGH,
    PRIORITY_LOW,
    PRIORITY_NORMAL,
    PRIORITY_URGENT,
)
from reflectai.domains.journal.models import JournalEntry
from reflectai.extensions import db
from reflectai.platform.outbox import enqueue as enqueue_outbox

logger = logging.getLogger(__name__)

DAILY_QUESTIONS = (
    "How are you feeling today? What's on your mind?",
    "What emotions have you experienced today, and what triggered them?",
    "What's one thing that's challenging you right now?",
    "How has your energy level been today?",
    "What's something you're grateful for today?",
    "What patterns in your thoughts or feelings have you noticed lately?",
    "How are you taking care of yourself today?",
    "What's weighing on your heart today?",
    "How connected do you feel to the people around you?",
    "What would you like to work on or improve about yourself?",
)
DAILY_TAGS = ("daily", "wellness")

POSITIVE_WORDS = ("better", "resolved", "solved", "good", "fine", "okay", "great", "improving", "fixed")
NEGATIVE_WORDS = ("still", "struggling", "difficult", "hard", "worried", "anxious", "upset", "problem")
TOPIC_TAGS: Tuple[Tuple[Tuple[str, ...], Tuple[str, ...]], ...] = (
    (("stress", "anxiety"), ("stress", "anxiety")),
    (("relationship", "family"), ("relationships",)),
    (("work", "job"), ("work",)),
)

# Days until the follow-up for an unresolved answer, by priority.
FOLLOW_UP_DELAYS: Dict[str, int] = {PRIORITY_URGENT: 1, PRIORITY_HIGH: 3}
FOLLOW_UP_QUESTION = (
    'Following up on our previous conversation about: "{question}". How are things going with this now?'
)


@dataclass(frozen=True)
class Assessment:
    is_resolved: bool
    priority: str
    tags: List[str] = field(default_factory=list)


def assess_response(text: str, priority: str, tags: Iterable[str] = ()) -> Assessment:
    """Keyword triage of an answer; ``priority`` is kept when no cue word appears."""
    lowered = (text or "").lower()
    has_positive = any(word in lowered for word in POSITIVE_WORDS)
    has_negative = any(word in lowered for word in NEGATIVE_WORDS)

    if has_negative and "urgent" in lowered:
        priority = PRIORITY_URGENT
    elif has_negative:
        priority = PRIORITY_HIGH
    elif has_positive:
        priority = PRIORITY_LOW

    merged = list(dict.fromkeys(tags or []))
    for cues, labels in TOPIC_TAGS:
        if any(cue in lowered for cue in cues):
            merged.extend(label for label in labels if label not in merged)
    return Assessment(is_resolved=has_positive and not has_negative, priority=priority, tags=merged)


def schedule_checkin(
    user_id: int,
    *,
    type: str,
    question: str,
    scheduled_date: Optional[datetime] = None,
    priority: str = PRIORITY_NORMAL,
    tags: Optional[Iterable[str]] = None,
    related_entry_id: Optional[int] = None,
) -> CheckIn:
    """Stage a check-in and its event; caller commits."""
    if type not in CHECKIN_TYPES:
        raise ValidationError("invalid_checkin_type", allowed=list(CHECKIN_TYPES))
    if priority not in PRIORITIES:
        raise ValidationError("invalid_priority", allowed=list(PRIORITIES))
    text = (question or "").strip()
    if not text:
        raise ValidationError("question_required")
    if related_entry_id is not None and not JournalEntry.query.filter_by(id=related_entry_id, user_id=user_id).first():
        raise NotFoundError("entry_not_found")

    now = datetime.utcnow()
    checkin = CheckIn(
        user_id=user_id,
        type=type,
        question=text,
        original_date=now,
        scheduled_date=scheduled_date or now,
        priority=priority,
        tags=list(dict.fromkeys(tags or [])),
        related_entry_id=related_entry_id,
        is_answered=False,
        is_resolved=False,
    )
    db.session.add(checkin)
    db.session.flush()
    enqueue_outbox(
        CHECKIN_CREATED,
        {
            "checkin_id": checkin.id,
            "user_id": user_id,
            "type": checkin.type,
            "scheduled_date": checkin.scheduled_date.isoformat(),
        },
        user_id=user_id,
    )
    return checkin


def create_checkin(user_id: int, **fields) -> CheckIn:
    checkin = schedule_checkin(user_id, **fields)
    db.session.commit()
    return checkin


def create_daily_checkin(
    user_id: int,
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
) -> CheckIn:
    now = now or datetime.utcnow()
    last = last_daily_checkin_date(user_id)
    if last and last.date() >= now.date():
        raise ConflictError("daily_checkin_exists", last_check_in_date=last.isoformat())
    checkin = schedule_checkin(
        user_id,
        type=CHECKIN_DAILY,
        question=(rng or random.Random()).choice(DAILY_QUESTIONS),
        scheduled_date=now,
        priority=PRIORITY_NORMAL,
        tags=DAILY_TAGS,
    )
    checkin.original_date = now
    db.session.commit()
    return checkin


def daily_status(user_id: int, today: Optional[date] = None) -> Dict:
    today = today or datetime.utcnow().date()
    last = last_daily_checkin_date(user_id)
    completed = bool(last and last.date() >= today)
    return {"has_completed_today": completed, "last_check_in_date": last, "can_create_new": not completed}


def last_daily_checkin_date(user_id: int) -> Optional[datetime]:
    return (
        db.session.query(db.func.max(CheckIn.original_date))
        .filter(CheckIn.user_id == user_id, CheckIn.type == CHECKIN_DAILY)
        .scalar()
    )


def respond(user_id: int, checkin_id: int, response: str) -> Tuple[CheckIn, Optional[CheckIn]]:
    """Record an answer; returns the check-in and the follow-up scheduled for it, if any."""
    text = (response or "").strip()
    if not text:
        raise ValidationError("response_required")
    checkin = get_checkin(user_id, checkin_id)
    if checkin.is_answered:
        raise ConflictError("checkin_already_answered")

    assessment = assess_response(text, checkin.priority, checkin.tags)
    checkin.is_answered = True
    checkin.user_response = text
    checkin.ai_follow_up = _follow_up_text(checkin, text)
    checkin.is_resolved = assessment.is_resolved
    checkin.priority = assessment.priority
    checkin.tags = assessment.tags
    enqueue_outbox(
        CHECKIN_ANSWERED,
        {
            "checkin_id": checkin.id,
            "user_id": user_id,
            "is_resolved": checkin.is_resolved,
            "priority": checkin.priority,
            "tags": checkin.tags,
        },
        user_id=user_id,
    )

    follow_up = None
    delay = FOLLOW_UP_DELAYS.get(assessment.priority)
    if not assessment.is_resolved and delay:
        follow_up = schedule_checkin(
            user_id,
            type=CHECKIN_FOLLOW_UP,
            question=FOLLOW_UP_QUESTION.format(question=checkin.question),
            scheduled_date=datetime.utcnow() + timedelta(days=delay),
            priority=assessment.priority,
            tags=[*assessment.tags, "follow_up"],
            related_entry_id=checkin.related_entry_id,
        )
        enqueue_outbox(
            CHECKIN_FOLLOW_UP_SCHEDULED,
            {
                "checkin_id": follow_up.id,
                "source_checkin_id": checkin.id,
                "user_id": user_id,
                "scheduled_date": follow_up.scheduled_date.isoformat(),
            },
            user_id=user_id,
        )
    db.session.commit()
    return checkin, follow_up


def get_checkin(user_id: int, checkin_id: int) -> CheckIn:
    checkin = CheckIn.query.filter_by(id=checkin_id, user_id=user_id).first()
    if not checkin:
        raise NotFoundError("checkin_not_found")
    return checkin


def list_checkins(user_id: int) -> List[CheckIn]:
    return CheckIn.query.filter_by(user_id=user_id).order_by(CheckIn.scheduled_date.desc(), CheckIn.id.desc()).all()


def pending_checkins(user_id: int, now: Optional[datetime] = None) -> List[CheckIn]:
    """Unanswered check-ins that are due."""
    now = now or datetime.utcnow()
    return (
        CheckIn.query.filter(
            CheckIn.user_id == user_id,
            CheckIn.is_answered.is_(False),
            CheckIn.scheduled_date <= now,
        )
        .order_by(CheckIn.scheduled_date.asc(), CheckIn.id.asc())
        .all()
    )


def unresolved_checkins(user_id: int) -> List[CheckIn]:
    return (
        CheckIn.query.filter(
            CheckIn.user_id == user_id,
            CheckIn.is_answered.is_(True),
            CheckIn.is_resolved.is_(False),
        )
        .order_by(CheckIn.scheduled_date.desc(), CheckIn.id.desc())
        .all()
    )


def _follow_up_text(checkin: CheckIn, response: str) -> str:
    persona = CHECKIN_PHILOSOPHER if checkin.type == CHECKIN_PHILOSOPHER else CHECKIN_COUNSELOR
    try:
        return ai_client.chat_completion(follow_up_messages(persona, checkin.question, response), max_tokens=300)
    except UpstreamError as exc:
        logger.info("Using fallback check-in follow-up: %s", exc.message)
        return CHECKIN_FOLLOW_UP_FALLBACK
