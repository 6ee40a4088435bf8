"""Query composition and pagination over the host database."""

from cms_dashboard.query.builder import QueryBuilder
from cms_dashboard.query.pagination import paginate
from cms_dashboard.query.schemas import FIRST_PAGE, Page, PageRequest, SortDirection

__all__ = ["FIRST_PAGE", "Page", "PageRequest", "QueryBuilder", "SortDirection", "paginate"]
