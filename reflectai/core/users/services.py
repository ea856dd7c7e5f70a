"""User service layer."""

from __future__ import annotations

from typing import Optional

from reflectai.core.auth.models import Role
from reflectai.core.auth.password import hash_password
from reflectai.core.users.models import SUBSCRIPTION_PLANS, User
from reflectai.core.users.preferences import set_preference
from reflectai.core.users.schemas import UserCreateRequest
from reflectai.extensions import db

DEFAULT_ROLE_CODES = ("user", "journal:write")


def get_user(user_id: int) -> Optional[User]:
    return db.session.get(User, user_id)


def create_user(payload: UserCreateRequest) -> User:
    plan = payload.subscription_plan if payload.subscription_plan in SUBSCRIPTION_PLANS else "free"
    user = User(
        email=payload.email.strip().lower(),
        username=payload.username,
        full_name=payload.full_name,
        timezone=payload.timezone,
        password_hash=hash_password(payload.password),
        subscription_plan=plan,
        has_active_subscription=payload.has_active_subscription,
    )
    db.session.add(user)
    ensure_default_roles(user)
    db.session.commit()
    return user


def update_preferences(user: User, prefs: dict) -> User:
    for key, value in prefs.items():
        set_preference(user, key, value)
    db.session.commit()
    return user


def ensure_default_roles(user: User) -> None:
    """Assign baseline roles for new users."""
    for code in DEFAULT_ROLE_CODES:
        role = Role.get_or_create(code)
        if role not in user.roles:
            user.roles.append(role)
