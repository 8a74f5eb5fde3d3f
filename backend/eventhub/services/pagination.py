"""Sorting and paging for ORM queries."""
import math
from typing import Any, Callable

from sqlalchemy.orm import Query

from eventhub.exceptions import InvalidInput
from eventhub.schemas.page import Page, PageRequest


def paginate(
    query: Query,
    page_request: PageRequest,
    sortable: dict[str, Any],
    tiebreak: Any,
    mapper: Callable[[Any], Any],
) -> Page:
    """Apply ``page_request`` to ``query`` and map each row with ``mapper``.

    ``sortable`` maps the public sort names to columns; ``tiebreak`` keeps row
    order stable across pages when sort values collide.
    """
    column = sortable.get(page_request.sort)
    if column is None:
        raise InvalidInput(
            f"Cannot sort by '{page_request.sort}'. Allowed: {', '.join(sorted(sortable))}"
        )

    total = query.order_by(None).count()
    ordering = column.desc() if page_request.descending else column.asc()
    rows = (
        query.order_by(ordering, tiebreak)
        .offset(page_request.page * page_request.size)
        .limit(page_request.size)
        .all()
    )
    return Page(
        content=[mapper(row) for row in rows],
        page=page_request.page,
        size=page_request.size,
        total_elements=total,
        total_pages=math.ceil(total / page_request.size) if total else 0,
    )
