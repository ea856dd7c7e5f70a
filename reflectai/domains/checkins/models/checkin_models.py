"""Scheduled check-in questions and the user's answers to them."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column

from reflectai.extensions import db

CHECKIN_COUNSELOR = "counselor"
CHECKIN_PHILOSOPHER = "philosopher"
CHECKIN_DAILY = "daily_checkin"
CHECKIN_FOLLOW_UP = "follow_up"
CHECKIN_TYPES = (CHECKIN_COUNSELOR, CHECKIN_PHILOSOPHER, CHECKIN_DAILY, CHECKIN_FOLLOW_UP)

PRIORITY_LOW = "low"
PRIORITY_NORMAL = "normal"
PRIORITY_HIGH = "high"
PRIORITY_URGENT = "urgent"
PRIORITIES = (PRIORITY_LOW, PRIORITY_NORMAL, PRIORITY_HIGH, PRIORITY_URGENT)


class CheckIn(db.Model):
    __tablename__ = "check_ins"
    __table_args__ = (
        db.Index("ix_check_ins_user_scheduled", "user_id", "scheduled_date"),
        db.Index("ix_check_ins_user_type", "user_id", "type"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type: Mapped[str] = mapped_column(db.String(32), nullable=False)
    question: Mapped[str] = mapped_column(db.Text, nullable=False)
    original_date: Mapped[datetime] = mapped_column(default=datetime.utcnow, nullable=False)
    scheduled_date: Mapped[datetime] = mapped_column(nullable=False)
    is_answered: Mapped[bool] = mapped_column(default=False, nullable=False)
    user_response: Mapped[str | None] = mapped_column(db.Text)
    ai_follow_up: Mapped[str | None] = mapped_column(db.Text)
    is_resolved: Mapped[bool] = mapped_column(default=False, nullable=False)
    priority: Mapped[str] = mapped_column(db.String(16), default=PRIORITY_NORMAL, nullable=False)
    tags: Mapped[list] = mapped_column(db.JSON, default=list, nullable=False)
    related_entry_id: Mapped[int | None] = mapped_column(
        db.ForeignKey("journal_entries.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow)
