"""Journal entry: one per user per calendar day."""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy.orm import Mapped, mapped_column, validates

from reflectai.extensions import db


class JournalEntry(db.Model):
    __tablename__ = "journal_entries"
    __table_args__ = (
        db.UniqueConstraint("user_id", "entry_day", name="uq_journal_entries_user_day"),
        db.Index("ix_journal_entries_user_entry_date", "user_id", "entry_date"),
        db.Index("ix_journal_entries_user_favorite", "user_id", "is_favorite"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(db.ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    title: Mapped[str | None] = mapped_column(db.String(255))
    content: Mapped[str] = mapped_column(db.Text, nullable=False)
    entry_date: Mapped[datetime] = mapped_column(default=datetime.utcnow, nullable=False)
    entry_day: Mapped[date] = mapped_column(nullable=False)
    moods: Mapped[list] = mapped_column(db.JSON, default=list, nullable=False)
    ai_response: Mapped[str | None] = mapped_column(db.Text)
    is_favorite: Mapped[bool] = mapped_column(default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow)

    @validates("entry_date")
    def _sync_entry_day(self, _key, value: datetime) -> datetime:
        self.entry_day = value.date()
        return value
