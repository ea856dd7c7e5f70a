"""Domain error hierarchy shared by services and controllers."""

from __future__ import annotations

from typing import Any, Dict, Optional


class ReflectError(Exception):
    """Base class for errors that map onto a JSON error response."""

    code = "error"
    status_code = 400

    def __init__(self, message: Optional[str] = None, **details: Any) -> None:
        super().__init__(message or self.code)
        self.message = message or self.code
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"ok": False, "error": self.code, "message": self.message}
        body.update(self.details)
        return body


class ValidationError(ReflectError):
    code = "validation_error"
    status_code = 400


class NotFoundError(ReflectError):
    code = "not_found"
    status_code = 404


class ConflictError(ReflectError):
    code = "conflict"
    status_code = 409


class LimitExceededError(ReflectError):
    code = "limit_exceeded"
    status_code = 403


class UpstreamError(ReflectError):
    """The AI provider failed, timed out or is not configured."""

    code = "upstream_error"
    status_code = 502


class CsrfError(ReflectError):
    code = "csrf_failed"
    status_code = 403
