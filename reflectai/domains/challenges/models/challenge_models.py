"""Wellness challenges, per-user enrolment and earned badges."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column, relationship

from reflectai.extensions import db

CHALLENGE_TYPES = (
    "daily_journal",
    "streak_keeper",
    "mood_tracker",
    "goal_achiever",
    "chat_explorer",
    "reflection_master",
)
STATUS_NOT_STARTED = "not_started"
STATUS_IN_PROGRESS = "in_progress"
STATUS_COMPLETED = "completed"
STATUS_EXPIRED = "expired"
CHALLENGE_STATUSES = (STATUS_NOT_STARTED, STATUS_IN_PROGRESS, STATUS_COMPLETED, STATUS_EXPIRED)


class Challenge(db.Model):
    __tablename__ = "challenges"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(db.String(255), nullable=False, unique=True)
    description: Mapped[str] = mapped_column(db.Text, nullable=False)
    type: Mapped[str] = mapped_column(db.String(32), nullable=False, index=True)
    target_value: Mapped[int] = mapped_column(nullable=False)
    duration: Mapped[int] = mapped_column(nullable=False, default=7)
    points: Mapped[int] = mapped_column(nullable=False, default=100)
    badge_icon: Mapped[str] = mapped_column(db.String(32), nullable=False, default="trophy")
    badge_color: Mapped[str] = mapped_column(db.String(16), nullable=False, default="#FFD700")
    is_active: Mapped[bool] = mapped_column(nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)


class UserChallenge(db.Model):
    __tablename__ = "user_challenges"
    __table_args__ = (
        db.UniqueConstraint("user_id", "challenge_id", name="uq_user_challenges_user_challenge"),
        db.Index("ix_user_challenges_user_status", "user_id", "status"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    challenge_id: Mapped[int] = mapped_column(db.ForeignKey("challenges.id", ondelete="CASCADE"), nullable=False)
    status: Mapped[str] = mapped_column(db.String(16), nullable=False, default=STATUS_NOT_STARTED)
    current_progress: Mapped[int] = mapped_column(nullable=False, default=0)
    started_at: Mapped[datetime | None] = mapped_column(nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(nullable=True)
    expires_at: Mapped[datetime | None] = mapped_column(nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow)

    challenge: Mapped[Challenge] = relationship("Challenge")


class UserBadge(db.Model):
    __tablename__ = "user_badges"
    __table_args__ = (db.UniqueConstraint("user_id", "challenge_id", name="uq_user_badges_user_challenge"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    challenge_id: Mapped[int] = mapped_column(db.ForeignKey("challenges.id", ondelete="CASCADE"), nullable=False)
    earned_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, nullable=False)
    points: Mapped[int] = mapped_column(nullable=False, default=0)

    challenge: Mapped[Challenge] = relationship("Challenge")
