"""Weekly chatbot allowance by subscription plan.

Weeks start on Sunday 00:00 (UTC). Unlimited plans report ``remaining == -1``.
"""

from __future__ import annotations

from datetime import datetime, time, timedelta
from typing import Dict, Optional

from flask import current_app

from reflectai.core.users.models import PLAN_PRO, PLAN_UNLIMITED, User
from reflectai.domains.chat.models import ChatUsage
from reflectai.extensions import db

UNLIMITED = -1


def week_start(now: Optional[datetime] = None) -> datetime:
    now = now or datetime.utcnow()
    days_since_sunday = (now.weekday() + 1) % 7
    return datetime.combine(now.date() - timedelta(days=days_since_sunday), time.min)


def weekly_count(user_id: int, now: Optional[datetime] = None) -> int:
    usage = ChatUsage.query.filter_by(user_id=user_id, week_start_date=week_start(now)).first()
    return usage.chat_count if usage else 0


def usage_status(user_id: int, now: Optional[datetime] = None) -> Dict:
    user = db.session.get(User, user_id)
    if user is None or not user.has_active_subscription:
        return {"can_send": False, "remaining": 0}
    if user.subscription_plan == PLAN_UNLIMITED:
        return {"can_send": True, "remaining": UNLIMITED}
    if user.subscription_plan == PLAN_PRO:
        limit = int(current_app.config.get("CHAT_PRO_WEEKLY_LIMIT", 15))
        remaining = max(0, limit - weekly_count(user_id, now))
        return {"can_send": remaining > 0, "remaining": remaining}
    return {"can_send": False, "remaining": 0}


def increment_usage(user_id: int, now: Optional[datetime] = None) -> ChatUsage:
    """Count one message against the current week; caller commits."""
    now = now or datetime.utcnow()
    start = week_start(now)
    usage = (
        ChatUsage.query.filter_by(user_id=user_id, week_start_date=start)
        .with_for_update()
        .first()
    )
    if usage is None:
        usage = ChatUsage(user_id=user_id, week_start_date=start, chat_count=0)
        db.session.add(usage)
    usage.chat_count = (usage.chat_count or 0) + 1
    usage.last_updated = now
    db.session.flush()
    return usage
