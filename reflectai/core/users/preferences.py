"""Default and merged preferences for users."""

from __future__ import annotations

from typing import Any, Dict, Optional

from reflectai.core.users.models import User, UserPreference
from reflectai.extensions import db

DEFAULT_PREFS: Dict[str, Any] = {
    "language": "en",
    "timezone": "UTC",
    "ai_reflections": True,
}


def get_preferences(user: User) -> Dict[str, Any]:
    """Merge stored preferences with defaults."""
    prefs = DEFAULT_PREFS.copy()
    for pref in user.preferences:
        prefs[pref.key] = pref.value
    return prefs


def set_preference(user: User, key: str, value: Any) -> None:
    existing = next((p for p in user.preferences if p.key == key), None)
    if existing:
        existing.value = value
    else:
        user.preferences.append(UserPreference(key=key, value=value))


def lock_preference(user_id: int, key: str) -> Optional[UserPreference]:
    """Fetch one preference row holding a row lock until the transaction ends."""
    return (
        db.session.query(UserPreference)
        .filter_by(user_id=user_id, key=key)
        .with_for_update()
        .populate_existing()
        .first()
    )


def write_preference(user_id: int, key: str, value: Dict[str, Any]) -> UserPreference:
    """Upsert a preference row by user id; caller commits."""
    pref = lock_preference(user_id, key)
    if pref is None:
        pref = UserPreference(user_id=user_id, key=key, value=value)
        db.session.add(pref)
    else:
        pref.value = value
    return pref
