"""Check-ins JSON API."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required
from pydantic import ValidationError

from reflectai.core.auth.csrf import csrf_protected
from reflectai.core.utils.validation import validation_failed
from reflectai.domains.checkins.mappers import map_checkin, map_daily_status
from reflectai.domains.checkins.schemas.checkin_schemas import CheckInCreate, CheckInRespond
from reflectai.domains.checkins.services import checkin_service

checkin_api_bp = Blueprint("checkin_api", __name__)


@checkin_api_bp.get("")
@jwt_required()
def list_checkins():
    items = checkin_service.list_checkins(int(get_jwt_identity()))
    return jsonify({"ok": True, "items": [map_checkin(c) for c in items]})


@checkin_api_bp.get("/pending")
@jwt_required()
def pending_checkins():
    items = checkin_service.pending_checkins(int(get_jwt_identity()))
    return jsonify({"ok": True, "items": [map_checkin(c) for c in items]})


@checkin_api_bp.get("/unresolved")
@jwt_required()
def unresolved_checkins():
    items = checkin_service.unresolved_checkins(int(get_jwt_identity()))
    return jsonify({"ok": True, "items": [map_checkin(c) for c in items]})


@checkin_api_bp.get("/<int:checkin_id>")
@jwt_required()
def get_checkin(checkin_id: int):
    checkin = checkin_service.get_checkin(int(get_jwt_identity()), checkin_id)
    return jsonify({"ok": True, "check_in": map_checkin(checkin)})


@checkin_api_bp.post("")
@jwt_required()
@csrf_protected
def create_checkin():
    payload = request.get_json(silent=True) or {}
    try:
        data = CheckInCreate.model_validate(payload)
    except ValidationError as exc:
        return validation_failed(exc)
    checkin = checkin_service.create_checkin(int(get_jwt_identity()), **data.model_dump())
    return jsonify({"ok": True, "check_in": map_checkin(checkin)}), 201


@checkin_api_bp.post("/daily")
@jwt_required()
@csrf_protected
def create_daily_checkin():
    checkin = checkin_service.create_daily_checkin(int(get_jwt_identity()))
    return jsonify({"ok": True, "check_in": map_checkin(checkin)}), 201


@checkin_api_bp.get("/daily/status")
@jwt_required()
def daily_status():
    status = checkin_service.daily_status(int(get_jwt_identity()))
    return jsonify({"ok": True, "status": map_daily_status(status)})


@checkin_api_bp.post("/<int:checkin_id>/respond")
@jwt_required()
@csrf_protected
def respond(checkin_id: int):
    payload = request.get_json(silent=True) or {}
    try:
        data = CheckInRespond.model_validate(payload)
    except ValidationError as exc:
        return validation_failed(exc)
    checkin, follow_up = checkin_service.respond(int(get_jwt_identity()), checkin_id, data.response)
    return jsonify(
        {
            "ok": True,
            "check_in": map_checkin(checkin),
            "follow_up": map_checkin(follow_up) if follow_up else None,
        }
    )
