"""Materialized journal statistics, one row per user."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column

from reflectai.extensions import db


class JournalStats(db.Model):
    __tablename__ = "journal_stats"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(
        db.ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    entries_count: Mapped[int] = mapped_column(default=0, nullable=False)
    current_streak: Mapped[int] = mapped_column(default=0, nullable=False)
    longest_streak: Mapped[int] = mapped_column(default=0, nullable=False)
    top_moods: Mapped[dict] = mapped_column(db.JSON, default=dict, nullable=False)
    last_updated: Mapped[datetime] = mapped_column(default=datetime.utcnow, nullable=False)
