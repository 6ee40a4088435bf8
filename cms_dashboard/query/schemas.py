"""Paging schemas shared by every paginated report."""

import math
from enum import Enum
from typing import Generic, List, TypeVar

from pydantic import BaseModel, ConfigDict, computed_field

T = TypeVar("T")

# Pages are numbered from 1.
FIRST_PAGE = 1


class SortDirection(str, Enum):
    """Sort direction options."""

    ASC = "asc"
    DESC = "desc"


class PageRequest(BaseModel):
    """Which window of a result set to fetch. Ranges are enforced by paginate()."""

    page: int = FIRST_PAGE
    items_per_page: int = 50

    model_config = ConfigDict(frozen=True)

    @property
    def offset(self) -> int:
        return (self.page - FIRST_PAGE) * self.items_per_page


class Page(BaseModel, Generic[T]):
    """One page of a report plus the total across all pages."""

    items: List[T] = []
    total_items: int = 0
    page: int = FIRST_PAGE
    items_per_page: int = 50

    @computed_field
    @property
    def total_pages(self) -> int:
        if self.items_per_page <= 0:
            return 0
        return math.ceil(self.total_items / self.items_per_page)
