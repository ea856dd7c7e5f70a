"""Authentication service layer."""

from __future__ import annotations

from typing import Optional

from flask_jwt_extended import create_access_token, create_refresh_token, decode_token
from sqlalchemy import func

from reflectai.core.auth.events import AUTH_USER_LOGGED_OUT, AUTH_USER_REGISTERED
from reflectai.core.auth.models import JWTBlocklist, SessionToken
from reflectai.core.auth.password import hash_password, verify_password
from reflectai.core.auth.schemas import RegisterRequest
from reflectai.core.errors import ConflictError
from reflectai.core.users.models import User
from reflectai.core.users.services import ensure_default_roles
from reflectai.extensions import db
from reflectai.platform.outbox import enqueue as enqueue_outbox


def authenticate_user(email: str, password: str) -> Optional[User]:
    """Return the user if credentials are valid."""
    user = User.query.filter(func.lower(User.email) == email.strip().lower()).first()
    if not user or not user.is_active:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def issue_tokens(user: User) -> dict[str, str]:
    """Create access and refresh tokens and persist the refresh JTI."""
    identity = str(user.id)
    access_token = create_access_token(identity=identity, additional_claims={"roles": user.role_codes})
    refresh_token = create_refresh_token(identity=identity)

    db.session.add(SessionToken.from_decoded(user.id, decode_token(refresh_token)))
    db.session.commit()
    return {"access_token": access_token, "refresh_token": refresh_token}


def revoke_refresh_token(user_id: int, jti: str) -> None:
    token = SessionToken.for_jti(jti)
    if token:
        token.revoked = True
    JWTBlocklist.block(jti)
    enqueue_outbox(AUTH_USER_LOGGED_OUT, {"user_id": user_id, "jti": jti}, user_id=user_id)
    db.session.commit()


def is_token_revoked(jti: str) -> bool:
    return JWTBlocklist.contains(jti)


def register_user(payload: RegisterRequest, auto_issue_tokens: bool = False) -> dict:
    """Create a free-tier user with default roles and stage the registration event."""
    existing = User.query.filter(func.lower(User.email) == payload.email).first()
    if existing:
        raise ConflictError("email_already_exists")
    if payload.username and User.query.filter_by(username=payload.username).first():
        raise ConflictError("username_already_exists")

    user = User(
        email=payload.email,
        username=payload.username,
        full_name=payload.full_name,
        timezone=payload.timezone or "UTC",
        password_hash=hash_password(payload.password),
    )
    db.session.add(user)
    ensure_default_roles(user)
    db.session.flush()

    enqueue_outbox(
        AUTH_USER_REGISTERED,
        {"user_id": user.id, "email": user.email, "username": user.username, "timezone": user.timezone},
        user_id=user.id,
    )
    db.session.commit()

    tokens = issue_tokens(user) if auto_issue_tokens else {}
    return {"user": user, **tokens}
