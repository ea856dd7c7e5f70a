"""AI companion chat with weekly limits and follow-up check-in scheduling."""

from __future__ import annotations

import logging
import random
import re
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from reflectai.core.ai import client as ai_client
from reflectai.core.ai.fallbacks import chat_fallback
from reflectai.core.ai.prompts import chatbot_system_prompt, redact
from reflectai.core.errors import LimitExceededError, ReflectError, UpstreamError
from reflectai.domains.chat.events import CHAT_MESSAGE_SENT
from reflectai.domains.chat.services import usage_service
from reflectai.domains.checkins.models.checkin_models import CHECKIN_COUNSELOR, CHECKIN_PHILOSOPHER
from reflectai.domains.checkins.services import checkin_service
from reflectai.extensions import db
from reflectai.platform.outbox import enqueue as enqueue_outbox

logger = logging.getLogger(__name__)

_QUESTION_RE = re.compile(r"[^.!?\n]*\?")
MIN_QUESTION_LENGTH = 10


def last_question(text: str) -> Optional[str]:
    """The last sentence of ``text`` ending in '?' that is long enough to ask again."""
    questions = [q.strip() for q in _QUESTION_RE.findall(text or "")]
    questions = [q for q in questions if len(q.rstrip("?").strip()) > MIN_QUESTION_LENGTH]
    return questions[-1] if questions else None


def send_message(
    user_id: int,
    messages: List[Dict[str, str]],
    *,
    support_type: str = "general",
    personality_type: str = "default",
    custom_instructions: Optional[str] = None,
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
) -> Dict:
    """Return ``{content, remaining, fallback, check_in_id}``; raises LimitExceededError."""
    status = usage_service.usage_status(user_id, now)
    if not status["can_send"]:
        raise LimitExceededError("chat_limit_reached", remaining=0)

    prompt = chatbot_system_prompt(support_type, personality_type, custom_instructions)
    conversation = [{"role": "system", "content": prompt}] + [
        {"role": m["role"], "content": redact(m["content"])} for m in messages
    ]
    try:
        reply = ai_client.chat_completion(conversation, temperature=0.8)
    except UpstreamError as exc:
        logger.info("Using fallback chat reply: %s", exc.message)
        last_user = next((m["content"] for m in reversed(messages) if m["role"] == "user"), "")
        return {
            "content": chat_fallback(last_user, personality_type, rng=rng),
            "remaining": status["remaining"],
            "fallback": True,
            "check_in_id": None,
        }

    usage = usage_service.increment_usage(user_id, now)
    enqueue_outbox(
        CHAT_MESSAGE_SENT,
        {
            "user_id": user_id,
            "support_type": support_type,
            "personality_type": personality_type,
            "week_start_date": usage.week_start_date.isoformat(),
            "chat_count": usage.chat_count,
        },
        user_id=user_id,
    )
    check_in = _schedule_follow_up(user_id, reply, support_type, now, rng)
    db.session.commit()

    return {
        "content": reply,
        "remaining": usage_service.usage_status(user_id, now)["remaining"],
        "fallback": False,
        "check_in_id": check_in.id if check_in else None,
    }


def _schedule_follow_up(
    user_id: int,
    reply: str,
    support_type: str,
    now: Optional[datetime],
    rng: Optional[random.Random],
):
    question = last_question(reply)
    if not question:
        return None
    days = (rng or random.Random()).randint(2, 3)
    try:
        return checkin_service.schedule_checkin(
            user_id,
            type=CHECKIN_PHILOSOPHER if support_type == "philosophy" else CHECKIN_COUNSELOR,
            question=question,
            scheduled_date=(now or datetime.utcnow()) + timedelta(days=days),
        )
    except ReflectError as exc:
        logger.warning("Could not schedule chat follow-up for user %s: %s", user_id, exc.message)
        return None
