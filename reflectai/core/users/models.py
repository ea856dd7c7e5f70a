"""User, subscription state and preference models."""

from __future__ import annotations

from datetime import datetime

from flask_login import UserMixin
from sqlalchemy.orm import Mapped, mapped_column, relationship

from reflectai.extensions import db

PLAN_FREE = "free"
PLAN_PRO = "pro"
PLAN_UNLIMITED = "unlimited"
SUBSCRIPTION_PLANS = (PLAN_FREE, PLAN_PRO, PLAN_UNLIMITED)


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow)


class User(db.Model, TimestampMixin, UserMixin):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    email: Mapped[str] = mapped_column(db.String(255), unique=True, nullable=False, index=True)
    username: Mapped[str | None] = mapped_column(db.String(64), unique=True)
    password_hash: Mapped[str] = mapped_column(db.String(255), nullable=False)
    full_name: Mapped[str | None] = mapped_column(db.String(255))
    timezone: Mapped[str | None] = mapped_column(db.String(64))
    is_active: Mapped[bool] = mapped_column(default=True)
    subscription_plan: Mapped[str] = mapped_column(db.String(32), default=PLAN_FREE, nullable=False)
    has_active_subscription: Mapped[bool] = mapped_column(default=False)
    trial_ends_at: Mapped[datetime | None] = mapped_column(nullable=True)

    preferences: Mapped[list["UserPreference"]] = relationship(
        "UserPreference", back_populates="user", cascade="all, delete-orphan"
    )
    roles = relationship("Role", secondary="user_role", backref="users", lazy="joined")

    @property
    def role_codes(self) -> list[str]:
        return [role.name for role in self.roles] if self.roles else []


class UserPreference(db.Model, TimestampMixin):
    __tablename__ = "user_preference"
    __table_args__ = (db.UniqueConstraint("user_id", "key", name="uq_user_preference_user_key"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(db.ForeignKey("users.id", ondelete="CASCADE"), index=True)
    key: Mapped[str] = mapped_column(db.String(128), nullable=False)
    value: Mapped[dict] = mapped_column(db.JSON, nullable=False, default=dict)

    user: Mapped[User] = relationship("User", back_populates="preferences")
