"""Auth event catalog."""

from __future__ import annotations

AUTH_USER_REGISTERED = "auth.user.registered"
AUTH_USER_LOGGED_OUT = "auth.user.logged_out"

EVENT_CATALOG = {
    AUTH_USER_REGISTERED: {
        "version": "v1",
        "payload": {"user_id": "int", "email": "str", "username": "str?", "timezone": "str?"},
    },
    AUTH_USER_LOGGED_OUT: {
        "version": "v1",
        "payload": {"user_id": "int", "jti": "str"},
    },
}

__all__ = ["AUTH_USER_REGISTERED", "AUTH_USER_LOGGED_OUT", "EVENT_CATALOG"]
