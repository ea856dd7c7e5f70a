"""Journal entries JSON API."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required
from pydantic import ValidationError

from reflectai.core.auth.csrf import csrf_protected
from reflectai.core.utils.validation import validation_failed
from reflectai.domains.journal.mappers import map_draft, map_entry
from reflectai.domains.journal.schemas.journal_schemas import (
    JournalEntryCreate,
    JournalEntryListFilter,
    JournalEntryUpdate,
    ResolveQuery,
)
from reflectai.domains.journal.services import journal_service, resolver_service

journal_api_bp = Blueprint("journal_api", __name__)


@journal_api_bp.get("")
@jwt_required()
def list_journal():
    user_id = int(get_jwt_identity())
    try:
        filters = JournalEntryListFilter.model_validate(request.args.to_dict())
    except ValidationError as exc:
        return validation_failed(exc)
    page = journal_service.list_entries(
        user_id,
        favorites_only=filters.favorites,
        search=filters.search,
        page=filters.page,
        per_page=filters.per_page,
    )
    return jsonify(
        {
            "ok": True,
            "items": [map_entry(e) for e in page["items"]],
            "page": page["page"],
            "pages": page["pages"],
            "total": page["total"],
        }
    )


@journal_api_bp.get("/<int:entry_id>")
@jwt_required()
def get_entry(entry_id: int):
    entry = journal_service.get_entry(int(get_jwt_identity()), entry_id)
    return jsonify({"ok": True, "entry": map_entry(entry)})


@journal_api_bp.get("/date/<int:year>/<int:month>/<int:day>")
@journal_api_bp.get("/date/<int:year>/<int:month>")
@jwt_required()
def entries_by_date(year: int, month: int, day: int | None = None):
    entries = journal_service.find_by_date(int(get_jwt_identity()), year, month, day)
    return jsonify({"ok": True, "items": [map_entry(e) for e in entries]})


@journal_api_bp.post("/resolve/<int:year>/<int:month>/<int:day>")
@jwt_required()
@csrf_protected
def resolve_entry(year: int, month: int, day: int):
    """Pick edit or create mode for a day; may discard a stale row and moves the rollover marker."""
    payload = request.get_json(silent=True) or request.args.to_dict()
    try:
        query = ResolveQuery.model_validate(payload)
    except ValidationError as exc:
        return validation_failed(exc)
    resolution = resolver_service.resolve_entry(int(get_jwt_identity()), year, month, day, today=query.today)
    entry = map_entry(resolution.entry) if resolution.entry else map_draft(resolution.day)
    return jsonify(
        {
            "ok": True,
            "mode": resolution.mode,
            "is_today": resolution.is_today,
            "entry": entry,
            "discarded_entry_ids": resolution.discarded_entry_ids,
        }
    )


@journal_api_bp.post("")
@jwt_required()
@csrf_protected
def create_journal_entry():
    payload = request.get_json(silent=True) or {}
    try:
        data = JournalEntryCreate.model_validate(payload)
    except ValidationError as exc:
        return validation_failed(exc)
    entry = journal_service.create_entry(
        int(get_jwt_identity()),
        content=data.content,
        title=data.title,
        moods=data.moods,
        entry_date=data.entry_date,
    )
    return jsonify({"ok": True, "entry": map_entry(entry)}), 201


@journal_api_bp.route("/<int:entry_id>", methods=["PUT", "PATCH"])
@jwt_required()
@csrf_protected
def update_journal_entry(entry_id: int):
    payload = request.get_json(silent=True) or {}
    try:
        data = JournalEntryUpdate.model_validate(payload)
    except ValidationError as exc:
        return validation_failed(exc)
    entry = journal_service.update_entry(
        int(get_jwt_identity()), entry_id, **data.model_dump(exclude_unset=True)
    )
    return jsonify({"ok": True, "entry": map_entry(entry)})


@journal_api_bp.delete("/<int:entry_id>")
@jwt_required()
@csrf_protected
def delete_journal_entry(entry_id: int):
    journal_service.delete_entry(int(get_jwt_identity()), entry_id)
    return "", 204


@journal_api_bp.post("/<int:entry_id>/regenerate-ai")
@jwt_required()
@csrf_protected
def regenerate_ai(entry_id: int):
    entry, used_fallback = journal_service.regenerate_reflection(int(get_jwt_identity()), entry_id)
    return jsonify({"ok": True, "entry": map_entry(entry), "fallback": used_fallback})
