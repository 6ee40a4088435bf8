"""Pydantic schemas for the reporting module: filter criteria, sort options and report rows."""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, computed_field, field_validator

from cms_dashboard.host.models import ObjectTypes


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _lenient_int(value: Any) -> Optional[int]:
    """Parse an integer filter, treating anything unparseable as "no constraint"."""
    value = _blank_to_none(value)
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _lenient_bool(value: Any) -> Optional[bool]:
    value = _blank_to_none(value)
    if value is None or isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("1", "true", "yes", "on"):
        return True
    if text in ("0", "false", "no", "off"):
        return False
    return None


# ===== CRITERIA =====


class ContentCriteria(BaseModel):
    """Optional filters for the content listing. Unset fields impose no constraint."""

    alias: Optional[str] = None
    name: Optional[str] = None
    id: Optional[str] = None  # numeric node id or a fragment of the unique id
    level: Optional[int] = None
    trashed: Optional[bool] = None
    creator_id: Optional[int] = None
    updater_id: Optional[int] = None
    language_id: Optional[int] = None

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("alias", "name", "id", mode="before")
    @classmethod
    def strip_blank(cls, v):
        v = _blank_to_none(v)
        return v.strip() if isinstance(v, str) else v

    @field_validator("level", "creator_id", "updater_id", "language_id", mode="before")
    @classmethod
    def parse_int(cls, v):
        return _lenient_int(v)

    @field_validator("trashed", mode="before")
    @classmethod
    def parse_bool(cls, v):
        return _lenient_bool(v)

    @property
    def numeric_id(self) -> Optional[int]:
        """The identifier as a node id, when it parses as one."""
        return _lenient_int(self.id)


class MemberCriteria(BaseModel):
    """Optional filters for the member listing."""

    group_id: Optional[int] = None
    search: Optional[str] = None

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("group_id", mode="before")
    @classmethod
    def parse_group(cls, v):
        return _lenient_int(v)

    @field_validator("search", mode="before")
    @classmethod
    def strip_search(cls, v):
        v = _blank_to_none(v)
        return v.strip() if isinstance(v, str) else v


# ===== SORT OPTIONS =====
# Each report only sorts by the columns listed here; see ReportingDAO for the column mapping.


class ContentOrderBy(str, Enum):
    ID = "id"
    NAME = "name"
    ALIAS = "alias"
    LEVEL = "level"
    TRASHED = "trashed"
    CREATE_DATE = "create_date"
    UPDATE_DATE = "update_date"
    CREATOR = "creator_name"
    UPDATER = "updater_name"


class MemberOrderBy(str, Enum):
    ID = "id"
    NAME = "name"
    USER_NAME = "user_name"
    EMAIL = "email"
    CREATE_DATE = "create_date"


class UsageOrderBy(str, Enum):
    ID = "id"
    ALIAS = "alias"
    NODE_COUNT = "node_count"
    DESCRIPTION = "description"
    TYPE = "type"


# ===== REPORT ROWS =====


class ContentItem(BaseModel):
    udi: str
    id: int
    parent_id: int
    level: int
    icon: Optional[str] = None
    trashed: bool
    alias: str
    name: Optional[str] = None
    create_date: datetime
    creator_id: int
    creator_name: str
    update_date: datetime
    updater_id: int
    updater_name: str
    language_count: int = 0

    model_config = ConfigDict(from_attributes=True)

    @field_validator("udi", mode="before")
    @classmethod
    def udi_to_str(cls, v):
        return str(v) if v is not None else v


class UsageItem(BaseModel):
    """How many instances of a content type exist."""

    id: int
    node_count: int = 0
    description: Optional[str] = None
    alias: str
    icon: Optional[str] = None
    guid_type: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("guid_type", mode="before")
    @classmethod
    def guid_to_str(cls, v):
        return str(v) if v is not None else None

    @computed_field
    @property
    def type(self) -> str:
        """Content, Media, Members or "" for an unknown/missing object type."""
        return ObjectTypes.category(self.guid_type)


class MemberItem(BaseModel):
    id: int
    user_name: str
    name: Optional[str] = None
    email: str
    create_date: datetime
    udi: str

    model_config = ConfigDict(from_attributes=True)

    @field_validator("udi", mode="before")
    @classmethod
    def udi_to_str(cls, v):
        return str(v) if v is not None else v


class MemberGroupItem(BaseModel):
    id: int
    name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class LanguageItem(BaseModel):
    id: int
    iso_code: Optional[str] = None
    name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ServerItem(BaseModel):
    id: int
    address: str
    computer_name: str
    registered_date: datetime
    last_notified_date: datetime
    is_active: bool
    is_master: bool

    model_config = ConfigDict(from_attributes=True)


class KeyValueItem(BaseModel):
    key: str
    value: Optional[str] = None
    updated: datetime

    model_config = ConfigDict(from_attributes=True)


# ===== WARM-UP =====


class PingResult(BaseModel):
    """Outcome of requesting one warm-up URL."""

    url: str
    status_code: Optional[int] = None
    elapsed_ms: Optional[float] = None
    error: Optional[str] = None

    @computed_field
    @property
    def success(self) -> bool:
        return self.error is None and self.status_code is not None and self.status_code < 400
