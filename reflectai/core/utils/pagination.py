"""Pagination helper for SQLAlchemy queries."""

from __future__ import annotations

from typing import Any, Dict

from sqlalchemy.orm import Query

MAX_PER_PAGE = 200


def paginate(query: Query, page: int = 1, per_page: int = 50) -> Dict[str, Any]:
    page = max(page, 1)
    per_page = max(min(per_page, MAX_PER_PAGE), 1)
    total = query.order_by(None).count()
    items = query.limit(per_page).offset((page - 1) * per_page).all()
    pages = (total + per_page - 1) // per_page if total else 0
    return {"items": items, "page": page, "per_page": per_page, "total": total, "pages": pages}
