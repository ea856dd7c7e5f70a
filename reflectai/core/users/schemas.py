"""Typed schemas for user IO."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from pydantic import BaseModel, EmailStr, Field

from reflectai.core.users.preferences import get_preferences

if TYPE_CHECKING:
    from reflectai.core.users.models import User


class UserCreateRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8)
    username: Optional[str] = Field(default=None, max_length=64)
    full_name: Optional[str] = None
    timezone: Optional[str] = None
    subscription_plan: str = "free"
    has_active_subscription: bool = False


class LoginRequest(BaseModel):
    email: str
    password: str


class UserResponse(BaseModel):
    id: int
    email: str
    username: Optional[str] = None
    full_name: Optional[str] = None
    timezone: Optional[str] = None
    is_active: bool
    subscription_plan: str
    has_active_subscription: bool
    trial_ends_at: Optional[datetime] = None
    preferences: Dict[str, Any] = {}
    role_codes: List[str] = []


def serialize_user(user: "User") -> UserResponse:
    """Build a UserResponse with merged preferences."""
    return UserResponse(
        id=user.id,
        email=user.email,
        username=user.username,
        full_name=user.full_name,
        timezone=user.timezone,
        is_active=user.is_active,
        subscription_plan=user.subscription_plan,
        has_active_subscription=user.has_active_subscription,
        trial_ends_at=user.trial_ends_at,
        preferences=get_preferences(user),
        role_codes=user.role_codes,
    )
