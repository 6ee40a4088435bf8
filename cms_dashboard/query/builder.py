"""
QueryBuilder for composing report queries from optional filters.

Reports start from a base SELECT (columns and fixed joins) and add joins,
predicates and grouping only when the caller supplied the matching filter.
All predicates are collected first and emitted as a single AND-conjoined
WHERE clause, so the order in which filters are added never changes the
shape of the SQL beyond the order of the conditions themselves.
"""

from typing import Any, Callable, List, Optional, Tuple

from sqlalchemy import and_
from sqlalchemy.sql import ColumnElement, Select


class QueryBuilder:
    """
    Accumulates joins, predicates and group-by columns on top of a base query.

    Values only ever reach the database as bound parameters of the
    SQLAlchemy expressions passed in; the builder never formats SQL text.
    """

    def __init__(self, base: Select):
        self._base = base
        self._joins: List[Tuple[Any, Any]] = []
        self._predicates: List[ColumnElement] = []
        self._group_by: List[ColumnElement] = []

    @property
    def predicates(self) -> List[ColumnElement]:
        """Conditions added so far, in the order they were added."""
        return list(self._predicates)

    @property
    def has_conditions(self) -> bool:
        """True once the built query will carry a WHERE clause."""
        return bool(self._predicates)

    def join(self, target: Any, onclause: Any) -> "QueryBuilder":
        """Add an inner join, applied before any predicate."""
        self._joins.append((target, onclause))
        return self

    def where(self, predicate: ColumnElement) -> "QueryBuilder":
        """AND a predicate onto the query."""
        self._predicates.append(predicate)
        return self

    def where_if(self, value: Any, factory: Callable[[Any], ColumnElement]) -> "QueryBuilder":
        """AND ``factory(value)`` only when a value was supplied.

        ``None`` and empty strings mean "no constraint on this dimension".
        """
        if value is None or (isinstance(value, str) and not value.strip()):
            return self
        return self.where(factory(value))

    def group_by(self, *columns: ColumnElement) -> "QueryBuilder":
        self._group_by.extend(columns)
        return self

    def build(self, order_by: Optional[List[ColumnElement]] = None) -> Select:
        """Compose the final SELECT."""
        stmt = self._base
        for target, onclause in self._joins:
            stmt = stmt.join(target, onclause)

        if self._predicates:
            stmt = stmt.where(and_(*self._predicates))

        if self._group_by:
            stmt = stmt.group_by(*self._group_by)

        if order_by:
            stmt = stmt.order_by(*order_by)

        return stmt
