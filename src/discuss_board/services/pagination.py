"""Offset pagination and whitelisted sorting for list endpoints."""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from sqlalchemy.orm import Query

from discuss_board.schemas.common import Pagination

DEFAULT_SORT = "created_at"


def parse_sort(sort: str | None, sortable: Mapping[str, Any]) -> tuple[Any, bool]:
    """Resolve ``field:asc|desc`` to a column and direction.

    Unknown fields fall back to ``created_at`` descending.
    """
    if sort:
        field, _, direction = sort.partition(":")
        column = sortable.get(field.strip())
        if column is not None:
            return column, direction.strip().lower() == "asc"
    return sortable[DEFAULT_SORT], False


def paginate(
    query: Query,
    *,
    page: int,
    limit: int,
    sort: str | None,
    sortable: Mapping[str, Any],
    tiebreaker: Any,
) -> tuple[list[Any], Pagination]:
    """Apply ordering and offset/limit to ``query`` and count the full result."""
    page = max(page, 1)
    limit = max(limit, 1)
    records = query.order_by(None).count()

    column, ascending = parse_sort(sort, sortable)
    ordering = column.asc() if ascending else column.desc()
    rows = (
        query.order_by(ordering, tiebreaker)
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    pagination = Pagination(
        current=page,
        limit=limit,
        records=records,
        pages=math.ceil(records / limit),
    )
    return rows, pagination
