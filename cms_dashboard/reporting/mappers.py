"""Row to record mapping for every report.

Each mapper is a pure function over a SQLAlchemy ``Row`` whose labels match
the record's field names.
"""

from typing import Any, Callable, Iterable, List, Mapping, TypeVar, Union

from pydantic import BaseModel
from sqlalchemy.engine import Row

from cms_dashboard.reporting.schemas import (
    ContentItem,
    KeyValueItem,
    LanguageItem,
    MemberGroupItem,
    MemberItem,
    ServerItem,
    UsageItem,
)

RecordType = TypeVar("RecordType", bound=BaseModel)
RowLike = Union[Row, Mapping[str, Any]]


def _as_mapping(row: RowLike) -> Mapping[str, Any]:
    return row._mapping if isinstance(row, Row) else row


def to_content_item(row: RowLike) -> ContentItem:
    return ContentItem.model_validate(dict(_as_mapping(row)))


def to_usage_item(row: RowLike) -> UsageItem:
    data = dict(_as_mapping(row))
    data["node_count"] = data.get("node_count") or 0
    return UsageItem.model_validate(data)


def to_member_item(row: RowLike) -> MemberItem:
    return MemberItem.model_validate(dict(_as_mapping(row)))


def to_member_group_item(row: RowLike) -> MemberGroupItem:
    return MemberGroupItem.model_validate(dict(_as_mapping(row)))


def to_language_item(row: RowLike) -> LanguageItem:
    return LanguageItem.model_validate(dict(_as_mapping(row)))


def to_server_item(row: RowLike) -> ServerItem:
    return ServerItem.model_validate(dict(_as_mapping(row)))


def to_key_value_item(row: RowLike) -> KeyValueItem:
    return KeyValueItem.model_validate(dict(_as_mapping(row)))


def map_rows(rows: Iterable[RowLike], mapper: Callable[[RowLike], RecordType]) -> List[RecordType]:
    return [mapper(row) for row in rows]
