"""Request validation helpers shared by controllers."""

from __future__ import annotations

from flask import jsonify
from pydantic import ValidationError

_JSON_SCALARS = (str, int, float, bool, list, dict, type(None))


def jsonable_errors(exc: ValidationError) -> list[dict]:
    errors = exc.errors()
    for err in errors:
        if "ctx" in err and isinstance(err["ctx"], dict):
            err["ctx"] = {k: str(v) for k, v in err["ctx"].items()}
        if "input" in err and not isinstance(err["input"], _JSON_SCALARS):
            err["input"] = str(err["input"])
    return errors


def validation_failed(exc: ValidationError):
    """400 response body for a pydantic validation failure."""
    return jsonify({"ok": False, "error": "validation_error", "details": jsonable_errors(exc)}), 400
