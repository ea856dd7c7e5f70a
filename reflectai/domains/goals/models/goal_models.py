"""Goals and the activity log rows that feed their progress."""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy.orm import Mapped, mapped_column, relationship

from reflectai.extensions import db

GOAL_TYPES = ("life", "yearly", "monthly", "weekly", "daily")
GOAL_STATUS_NOT_STARTED = "not_started"
GOAL_STATUS_IN_PROGRESS = "in_progress"
GOAL_STATUS_COMPLETED = "completed"
GOAL_STATUS_ABANDONED = "abandoned"
GOAL_STATUSES = (
    GOAL_STATUS_NOT_STARTED,
    GOAL_STATUS_IN_PROGRESS,
    GOAL_STATUS_COMPLETED,
    GOAL_STATUS_ABANDONED,
)


class Goal(db.Model):
    __tablename__ = "goals"
    __table_args__ = (
        db.Index("ix_goals_user_type", "user_id", "type"),
        db.Index("ix_goals_user_status", "user_id", "status"),
        db.CheckConstraint("progress >= 0 AND progress <= 100", name="ck_goals_progress_range"),
        db.CheckConstraint("time_spent >= 0", name="ck_goals_time_spent_positive"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title: Mapped[str] = mapped_column(db.String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(db.Text)
    type: Mapped[str] = mapped_column(db.String(16), nullable=False)
    status: Mapped[str] = mapped_column(db.String(16), nullable=False, default=GOAL_STATUS_NOT_STARTED)
    target_date: Mapped[date | None] = mapped_column(nullable=True)
    completed_date: Mapped[datetime | None] = mapped_column(nullable=True)
    progress: Mapped[float] = mapped_column(db.Float, nullable=False, default=0.0)
    time_spent: Mapped[int] = mapped_column(nullable=False, default=0)
    target_minutes: Mapped[int | None] = mapped_column(nullable=True)
    parent_goal_id: Mapped[int | None] = mapped_column(
        db.ForeignKey("goals.id", ondelete="SET NULL"), nullable=True, index=True
    )
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow)

    activities: Mapped[list["GoalActivity"]] = relationship(
        "GoalActivity", back_populates="goal", cascade="all, delete-orphan", passive_deletes=True
    )


class GoalActivity(db.Model):
    __tablename__ = "goal_activities"
    __table_args__ = (
        db.Index("ix_goal_activities_goal_date", "goal_id", "date"),
        db.Index("ix_goal_activities_user_date", "user_id", "date"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    goal_id: Mapped[int] = mapped_column(db.ForeignKey("goals.id", ondelete="CASCADE"), nullable=False)
    user_id: Mapped[int] = mapped_column(db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    activity_date: Mapped[date] = mapped_column("date", db.Date, nullable=False)
    minutes_spent: Mapped[int] = mapped_column(nullable=False)
    progress_increment: Mapped[float] = mapped_column(db.Float, nullable=False, default=0.0)
    description: Mapped[str | None] = mapped_column(db.Text)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)

    goal: Mapped[Goal] = relationship("Goal", back_populates="activities")
