from dataclasses import dataclass
from math import ceil
from typing import Optional, Sequence

from sqlalchemy import Select, select, func, or_
from sqlalchemy.orm import Session

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


@dataclass
class ListParams:
    """Query parameters shared by every list endpoint, already clamped."""
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
    search: Optional[str] = None
    sort_by: str = "id"
    descending: bool = True

    @classmethod
    def from_query(
        cls,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        search: Optional[str] = None,
        sort_by: Optional[str] = None,
        order: Optional[str] = None,
    ) -> "ListParams":
        page = DEFAULT_PAGE if page is None else max(1, page)
        limit = DEFAULT_LIMIT if limit is None else min(MAX_LIMIT, max(1, limit))
        search = search.strip() if search and search.strip() else None
        descending = (order or "DESC").upper() != "ASC"
        return cls(page=page, limit=limit, search=search, sort_by=sort_by or "id", descending=descending)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def search_clause(columns: Sequence, term: Optional[str]):
    """Case-insensitive substring match of ``term`` against any of ``columns``."""
    if not term:
        return None
    pattern = f"%{term}%"
    return or_(*(column.ilike(pattern) for column in columns))


def sort_clause(allowed: dict, params: ListParams):
    column = allowed.get(params.sort_by, allowed["id"])
    return column.desc() if params.descending else column.asc()


def pagination_meta(params: ListParams, total: int) -> dict:
    total_pages = ceil(total / params.limit) if total else 0
    return {
        "page": params.page,
        "limit": params.limit,
        "total": total,
        "totalPages": total_pages,
        "hasNext": params.page < total_pages,
        "hasPrev": params.page > 1,
    }


def count_rows(db: Session, model, *conditions) -> int:
    stmt = select(func.count()).select_from(model)
    for condition in conditions:
        if condition is not None:
            stmt = stmt.where(condition)
    return db.execute(stmt).scalar_one()


def fetch_page(db: Session, stmt: Select, model, params: ListParams, allowed_sorts: dict, *conditions):
    """Run the page query and the matching count query.

    ``conditions`` are applied to both statements; ``None`` entries are skipped.
    Returns ``(rows, pagination)``.
    """
    for condition in conditions:
        if condition is not None:
            stmt = stmt.where(condition)
    stmt = stmt.order_by(sort_clause(allowed_sorts, params)).limit(params.limit).offset(params.offset)
    rows = db.execute(stmt).all()
    total = count_rows(db, model, *conditions)
    return rows, pagination_meta(params, total)
