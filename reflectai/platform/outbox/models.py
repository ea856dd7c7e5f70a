"""Outbox rows for ReflectAI domain events.

Journal, goal, check-in, challenge, chat and auth services stage one row per
event inside their own transaction. The dispatcher later moves each row
through ``pending -> sending -> sent``, or ``retry`` / ``failed`` on errors.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column

from reflectai.extensions import db

STATUS_PENDING = "pending"
STATUS_SENDING = "sending"
STATUS_SENT = "sent"
STATUS_RETRY = "retry"
STATUS_FAILED = "failed"

CLAIMABLE_STATUSES = (STATUS_PENDING, STATUS_RETRY)


class OutboxMessage(db.Model):
    __tablename__ = "platform_outbox"
    __table_args__ = (
        db.Index("ix_platform_outbox_status_available_at", "status", "available_at"),
        db.Index("ix_platform_outbox_user_created_at", "user_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int | None] = mapped_column(db.ForeignKey("users.id", ondelete="SET NULL"), index=True)
    # e.g. "journal.entry.created", "goals.goal.completed", "chat.message.sent"
    event_type: Mapped[str] = mapped_column(db.String(128), nullable=False, index=True)
    payload: Mapped[dict] = mapped_column(db.JSON, nullable=False, default=dict)
    status: Mapped[str] = mapped_column(db.String(32), nullable=False, default=STATUS_PENDING)
    attempts: Mapped[int] = mapped_column(default=0)
    available_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    last_error: Mapped[str | None] = mapped_column(db.Text)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)

    def claim(self) -> None:
        self.status = STATUS_SENDING
        self.attempts = (self.attempts or 0) + 1

    def mark_sent(self) -> None:
        self.status = STATUS_SENT
        self.last_error = None

    def mark_failed(self, error: str, retry_at: datetime, give_up: bool) -> None:
        """Record a delivery error; ``available_at`` never moves backwards."""
        self.last_error = error
        self.available_at = max(self.available_at or retry_at, retry_at)
        self.status = STATUS_FAILED if give_up else STATUS_RETRY

    def __repr__(self) -> str:
        return f"<OutboxMessage {self.id} {self.event_type} {self.status} attempts={self.attempts}>"
