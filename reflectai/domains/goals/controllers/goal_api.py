"""Goals and activities JSON API."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required
from pydantic import ValidationError

from reflectai.core.auth.csrf import csrf_protected
from reflectai.core.utils.validation import validation_failed
from reflectai.domains.goals.mappers import map_activity, map_goal, map_summary
from reflectai.domains.goals.schemas.goal_schemas import (
    ActivityCreate,
    ActivityRangeQuery,
    ActivityUpdate,
    GoalCreate,
    GoalUpdate,
)
from reflectai.domains.goals.services import activity_service, goal_service

goal_api_bp = Blueprint("goal_api", __name__)
activity_api_bp = Blueprint("activity_api", __name__)


@goal_api_bp.get("")
@jwt_required()
def list_goals():
    goals = goal_service.list_goals(
        int(get_jwt_identity()),
        goal_type=request.args.get("type"),
        status=request.args.get("status"),
    )
    return jsonify({"ok": True, "items": [map_goal(g) for g in goals]})


@goal_api_bp.get("/summary")
@jwt_required()
def goal_summary():
    return jsonify({"ok": True, "summary": map_summary(goal_service.summary(int(get_jwt_identity())))})


@goal_api_bp.get("/type/<string:goal_type>")
@jwt_required()
def goals_by_type(goal_type: str):
    goals = goal_service.list_goals(int(get_jwt_identity()), goal_type=goal_type)
    return jsonify({"ok": True, "items": [map_goal(g) for g in goals]})


@goal_api_bp.get("/parent/<int:goal_id>")
@jwt_required()
def child_goals(goal_id: int):
    goals = goal_service.list_children(int(get_jwt_identity()), goal_id)
    return jsonify({"ok": True, "items": [map_goal(g) for g in goals]})


@goal_api_bp.get("/<int:goal_id>")
@jwt_required()
def get_goal(goal_id: int):
    goal = goal_service.get_goal(int(get_jwt_identity()), goal_id)
    return jsonify({"ok": True, "goal": map_goal(goal)})


@goal_api_bp.post("")
@jwt_required()
@csrf_protected
def create_goal():
    payload = request.get_json(silent=True) or {}
    try:
        data = GoalCreate.model_validate(payload)
    except ValidationError as exc:
        return validation_failed(exc)
    goal = goal_service.create_goal(int(get_jwt_identity()), **data.model_dump())
    return jsonify({"ok": True, "goal": map_goal(goal)}), 201


@goal_api_bp.route("/<int:goal_id>", methods=["PUT", "PATCH"])
@jwt_required()
@csrf_protected
def update_goal(goal_id: int):
    payload = request.get_json(silent=True) or {}
    try:
        data = GoalUpdate.model_validate(payload)
    except ValidationError as exc:
        return validation_failed(exc)
    goal = goal_service.update_goal(int(get_jwt_identity()), goal_id, **data.model_dump(exclude_unset=True))
    return jsonify({"ok": True, "goal": map_goal(goal)})


@goal_api_bp.delete("/<int:goal_id>")
@jwt_required()
@csrf_protected
def delete_goal(goal_id: int):
    goal_service.delete_goal(int(get_jwt_identity()), goal_id)
    return "", 204


@goal_api_bp.get("/<int:goal_id>/activities")
@jwt_required()
def goal_activities(goal_id: int):
    activities = activity_service.list_goal_activities(int(get_jwt_identity()), goal_id)
    return jsonify({"ok": True, "items": [map_activity(a) for a in activities]})


@goal_api_bp.post("/<int:goal_id>/activities")
@jwt_required()
@csrf_protected
def log_activity(goal_id: int):
    payload = request.get_json(silent=True) or {}
    try:
        data = ActivityCreate.model_validate(payload)
    except ValidationError as exc:
        return validation_failed(exc)
    activity, goal = activity_service.log_activity(int(get_jwt_identity()), goal_id, **data.model_dump())
    return jsonify({"ok": True, "activity": map_activity(activity), "goal": map_goal(goal)}), 201


@activity_api_bp.get("")
@jwt_required()
def list_activities():
    try:
        query = ActivityRangeQuery.model_validate(request.args.to_dict())
    except ValidationError as exc:
        return validation_failed(exc)
    activities = activity_service.list_activities(int(get_jwt_identity()), start=query.start, end=query.end)
    return jsonify({"ok": True, "items": [map_activity(a) for a in activities]})


@activity_api_bp.get("/<int:activity_id>")
@jwt_required()
def get_activity(activity_id: int):
    activity = activity_service.get_activity(int(get_jwt_identity()), activity_id)
    return jsonify({"ok": True, "activity": map_activity(activity)})


@activity_api_bp.route("/<int:activity_id>", methods=["PUT", "PATCH"])
@jwt_required()
@csrf_protected
def update_activity(activity_id: int):
    payload = request.get_json(silent=True) or {}
    try:
        data = ActivityUpdate.model_validate(payload)
    except ValidationError as exc:
        return validation_failed(exc)
    activity, goal = activity_service.update_activity(
        int(get_jwt_identity()), activity_id, **data.model_dump(exclude_unset=True)
    )
    return jsonify({"ok": True, "activity": map_activity(activity), "goal": map_goal(goal)})


@activity_api_bp.delete("/<int:activity_id>")
@jwt_required()
@csrf_protected
def delete_activity(activity_id: int):
    goal = activity_service.delete_activity(int(get_jwt_identity()), activity_id)
    return jsonify({"ok": True, "goal": map_goal(goal)})
