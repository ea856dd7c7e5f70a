"""CSRF protection for cookie-backed browser sessions.

The token lives in the Flask session and is handed out by ``/auth/login``,
``/auth/register`` and ``/auth/me``. Mutating endpoints expect it back in the
``X-CSRF-Token`` header. ``WTF_CSRF_ENABLED = False`` turns the check off.
"""

from __future__ import annotations

import secrets
from functools import wraps
from typing import Callable, TypeVar

from flask import current_app, request, session

from reflectai.core.errors import CsrfError

SESSION_KEY = "_csrf_token"
HEADER_NAME = "X-CSRF-Token"

F = TypeVar("F", bound=Callable)


def generate_csrf_token() -> str:
    token = session.get(SESSION_KEY)
    if token is None:
        token = session[SESSION_KEY] = secrets.token_hex(32)
    return token


def check_csrf_token(candidate: str | None) -> None:
    expected = session.get(SESSION_KEY)
    if not candidate or not expected or not secrets.compare_digest(candidate, expected):
        raise CsrfError()


def csrf_protected(fn: F) -> F:
    @wraps(fn)
    def wrapper(*args, **kwargs):  # type: ignore[misc]
        if current_app.config.get("WTF_CSRF_ENABLED", True):
            check_csrf_token(request.headers.get(HEADER_NAME))
        return fn(*args, **kwargs)

    return wrapper  # type: ignore[return-value]
