"""Journal statistics API."""

from __future__ import annotations

from datetime import date
from typing import Optional

from flask import Blueprint, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required
from pydantic import BaseModel, Field, ValidationError

from reflectai.core.utils.validation import validation_failed
from reflectai.domains.journal.mappers import map_stats
from reflectai.domains.journal.services import stats_service

stats_api_bp = Blueprint("stats_api", __name__)


class StatsQuery(BaseModel):
    today: Optional[date] = None
    year: Optional[int] = Field(default=None, ge=1970, le=9999)
    month: Optional[int] = Field(default=None, ge=1, le=12)


@stats_api_bp.get("")
@jwt_required()
def get_stats():
    try:
        query = StatsQuery.model_validate(request.args.to_dict())
    except ValidationError as exc:
        return validation_failed(exc)
    month = (query.year, query.month) if query.year and query.month else None
    snapshot = stats_service.get_stats(int(get_jwt_identity()), today=query.today, month=month)
    return jsonify({"ok": True, **map_stats(snapshot)})
