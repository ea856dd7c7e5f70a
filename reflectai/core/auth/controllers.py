"""Auth HTTP controllers (API only)."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request, session
from flask_jwt_extended import create_access_token, get_jwt, get_jwt_identity, jwt_required
from pydantic import ValidationError

from reflectai.core.auth.auth_service import (
    authenticate_user,
    issue_tokens,
    register_user,
    revoke_refresh_token,
)
from reflectai.core.auth.csrf import csrf_protected, generate_csrf_token
from reflectai.core.auth.schemas import RegisterRequest
from reflectai.core.users.schemas import LoginRequest, serialize_user
from reflectai.core.users.services import get_user, update_preferences
from reflectai.core.utils.validation import validation_failed
from reflectai.extensions import limiter

auth_bp = Blueprint("auth_api", __name__)


@auth_bp.post("/register")
@limiter.limit("5/minute")
def register():
    payload = request.get_json(silent=True) or {}
    try:
        data = RegisterRequest.model_validate(payload)
    except ValidationError as exc:
        return validation_failed(exc)
    result = register_user(data, auto_issue_tokens=current_app.config.get("AUTO_LOGIN_ON_REGISTER", True))

    resp = {"ok": True, "user": serialize_user(result["user"]).model_dump(mode="json")}
    if "access_token" in result:
        resp.update(
            {
                "access_token": result["access_token"],
                "refresh_token": result["refresh_token"],
                "csrf_token": generate_csrf_token(),
            }
        )
    return jsonify(resp), 201


@auth_bp.post("/login")
@limiter.limit("10/minute")
def login():
    # Login stays stateless even if a stale session cookie is present.
    session.clear()
    payload = request.get_json(silent=True) or {}
    try:
        data = LoginRequest.model_validate(payload)
    except ValidationError as exc:
        return validation_failed(exc)
    user = authenticate_user(data.email, data.password)
    if not user:
        return jsonify({"ok": False, "error": "invalid_credentials"}), 401
    tokens = issue_tokens(user)
    return jsonify(
        {
            "ok": True,
            **tokens,
            "csrf_token": generate_csrf_token(),
            "user": serialize_user(user).model_dump(mode="json"),
        }
    )


@auth_bp.post("/refresh")
@jwt_required(refresh=True)
@limiter.limit("30/minute")
def refresh():
    identity = str(get_jwt_identity())
    return jsonify({"ok": True, "access_token": create_access_token(identity=identity)})


@auth_bp.post("/logout")
@jwt_required(refresh=True)
@csrf_protected
def logout():
    jti = get_jwt().get("jti")
    if jti:
        revoke_refresh_token(int(get_jwt_identity()), jti)
    return jsonify({"ok": True})


@auth_bp.get("/me")
@jwt_required()
def me():
    user = get_user(int(get_jwt_identity()))
    if not user:
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify(
        {
            "ok": True,
            "csrf_token": generate_csrf_token(),
            "user": serialize_user(user).model_dump(mode="json"),
        }
    )


@auth_bp.patch("/me/preferences")
@jwt_required()
@csrf_protected
def patch_preferences():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict) or not payload:
        return jsonify({"ok": False, "error": "validation_error"}), 400
    user = get_user(int(get_jwt_identity()))
    if not user:
        return jsonify({"ok": False, "error": "not_found"}), 404
    update_preferences(user, payload)
    return jsonify({"ok": True, "user": serialize_user(user).model_dump(mode="json")})
