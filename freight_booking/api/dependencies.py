from fastapi import Query
from typing import Optional

from freight_booking.application.listing import ListParams

def list_params(
    page: Optional[int] = Query(None, description="Page number, values below 1 are raised to 1"),
    limit: Optional[int] = Query(None, description="Page size, clamped to 1..100 (default 10)"),
    search: Optional[str] = Query(None, max_length=200, description="Case-insensitive text search"),
    sortBy: Optional[str] = Query(None, description="Sort column; unknown columns fall back to id"),
    order: Optional[str] = Query(None, description="ASC or DESC (default DESC)"),
) -> ListParams:
    return ListParams.from_query(page=page, limit=limit, search=search, sort_by=sortBy, order=order)
