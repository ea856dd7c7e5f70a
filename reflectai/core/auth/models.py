"""Auth tables: roles, issued refresh tokens and the JWT blocklist.

Only refresh tokens are persisted. ``/auth/logout`` revokes the refresh JTI,
and the JWT loader in ``create_app`` rejects anything on the blocklist.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Mapped, mapped_column

from reflectai.core.users.models import TimestampMixin
from reflectai.extensions import db


class Role(db.Model, TimestampMixin):
    __tablename__ = "role"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(db.String(64), unique=True, nullable=False)
    description: Mapped[str] = mapped_column(db.String(255), default="")

    @classmethod
    def get_or_create(cls, name: str) -> "Role":
        """Look up a role by name, staging a new row when missing; caller commits."""
        role = cls.query.filter_by(name=name).first()
        if role is None:
            role = cls(name=name, description=f"Auto-created role {name}")
            db.session.add(role)
        return role


class UserRole(db.Model):
    __tablename__ = "user_role"

    user_id: Mapped[int] = mapped_column(db.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    role_id: Mapped[int] = mapped_column(db.ForeignKey("role.id"), primary_key=True)


class SessionToken(db.Model, TimestampMixin):
    """Refresh token handed out by login or register."""

    __tablename__ = "session_token"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    jti: Mapped[str] = mapped_column(db.String(64), nullable=False, unique=True)
    revoked: Mapped[bool] = mapped_column(default=False)
    expires_at: Mapped[datetime | None] = mapped_column(nullable=True)

    @classmethod
    def from_decoded(cls, user_id: int, decoded: dict) -> "SessionToken":
        expires = decoded.get("exp")
        return cls(
            user_id=user_id,
            jti=decoded["jti"],
            expires_at=datetime.utcfromtimestamp(expires) if expires else None,
        )

    @classmethod
    def for_jti(cls, jti: str) -> Optional["SessionToken"]:
        return cls.query.filter_by(jti=jti).first()


class JWTBlocklist(db.Model, TimestampMixin):
    __tablename__ = "jwt_blocklist"

    id: Mapped[int] = mapped_column(primary_key=True)
    jti: Mapped[str] = mapped_column(db.String(64), unique=True, nullable=False)

    @classmethod
    def contains(cls, jti: str) -> bool:
        return db.session.query(cls.id).filter_by(jti=jti).first() is not None

    @classmethod
    def block(cls, jti: str) -> None:
        """Stage a blocklist row unless the JTI is already listed; caller commits."""
        if not cls.contains(jti):
            db.session.add(cls(jti=jti))
