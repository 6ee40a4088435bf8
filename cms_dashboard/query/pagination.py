"""Counted, windowed execution of report queries."""

import logging
from typing import List, Sequence, Tuple

from sqlalchemy import func, select
from sqlalchemy.engine import Row
from sqlalchemy.orm import Session
from sqlalchemy.sql import ColumnElement, Select

from cms_dashboard.core.exceptions import InvalidPageRequestError
from cms_dashboard.query.schemas import FIRST_PAGE, PageRequest

logger = logging.getLogger(__name__)


def validate_page_request(page_request: PageRequest) -> None:
    """Reject page sizes and page numbers that cannot address a window."""
    if page_request.items_per_page <= 0:
        raise InvalidPageRequestError(
            f"items_per_page must be greater than 0, got {page_request.items_per_page}"
        )
    if page_request.page < FIRST_PAGE:
        raise InvalidPageRequestError(f"page must be {FIRST_PAGE} or greater, got {page_request.page}")


def paginate(
    session: Session,
    stmt: Select,
    page_request: PageRequest,
    order_by: Sequence[ColumnElement],
) -> Tuple[int, List[Row]]:
    """
    Execute ``stmt`` as a counted page.

    Runs a COUNT over the unordered query, then the ordered query restricted to
    the requested window. A page past the end yields no rows and the real total.
    ``order_by`` is required; an unordered window is not repeatable across calls.
    """
    validate_page_request(page_request)
    if not order_by:
        raise ValueError("Paginated queries need an ORDER BY")

    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    total = session.execute(count_stmt).scalar_one()

    page_stmt = (
        stmt.order_by(None)
        .order_by(*order_by)
        .offset(page_request.offset)
        .limit(page_request.items_per_page)
    )
    rows = list(session.execute(page_stmt).all())
    logger.debug(f"Fetched {len(rows)} of {total} rows for page {page_request.page}")
    return total, rows
