"""Weekly chatbot message counter per user."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column

from reflectai.extensions import db


class ChatUsage(db.Model):
    __tablename__ = "chat_usage"
    __table_args__ = (db.UniqueConstraint("user_id", "week_start_date", name="uq_chat_usage_user_week"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # Sunday 00:00 of the counted week.
    week_start_date: Mapped[datetime] = mapped_column(nullable=False)
    chat_count: Mapped[int] = mapped_column(nullable=False, default=0)
    last_updated: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow)
