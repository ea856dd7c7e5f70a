"""Challenges and badges JSON API."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required
from pydantic import ValidationError

from reflectai.core.auth.csrf import csrf_protected
from reflectai.core.utils.validation import validation_failed
from reflectai.domains.challenges.mappers import (
    map_badge,
    map_challenge,
    map_challenge_stats,
    map_user_challenge,
)
from reflectai.domains.challenges.schemas.challenge_schemas import ProgressUpdate
from reflectai.domains.challenges.services import challenge_service

challenge_api_bp = Blueprint("challenge_api", __name__)
badge_api_bp = Blueprint("badge_api", __name__)


@challenge_api_bp.get("")
@jwt_required()
def list_challenges():
    return jsonify({"ok": True, "items": [map_challenge(c) for c in challenge_service.list_active_challenges()]})


@challenge_api_bp.get("/user")
@jwt_required()
def user_challenges():
    active_only = request.args.get("all", "").lower() not in ("1", "true", "yes")
    items = challenge_service.list_user_challenges(int(get_jwt_identity()), active_only=active_only)
    return jsonify({"ok": True, "items": [map_user_challenge(uc) for uc in items]})


@challenge_api_bp.get("/stats")
@jwt_required()
def challenge_stats():
    stats = challenge_service.challenge_stats(int(get_jwt_identity()))
    return jsonify({"ok": True, "stats": map_challenge_stats(stats)})


@challenge_api_bp.post("/<int:challenge_id>/start")
@jwt_required()
@csrf_protected
def start_challenge(challenge_id: int):
    enrolment = challenge_service.start_challenge(int(get_jwt_identity()), challenge_id)
    return jsonify({"ok": True, "challenge": map_user_challenge(enrolment)})


@challenge_api_bp.post("/<int:challenge_id>/progress")
@jwt_required()
@csrf_protected
def update_progress(challenge_id: int):
    payload = request.get_json(silent=True) or {}
    try:
        data = ProgressUpdate.model_validate(payload)
    except ValidationError as exc:
        return validation_failed(exc)
    enrolment = challenge_service.update_progress(int(get_jwt_identity()), challenge_id, data.progress)
    return jsonify({"ok": True, "challenge": map_user_challenge(enrolment)})


@badge_api_bp.get("")
@jwt_required()
def list_badges():
    return jsonify({"ok": True, "items": [map_badge(b) for b in challenge_service.list_badges(int(get_jwt_identity()))]})
