# cms_dashboard/reporting/service.py
"""Service layer for the reporting module: one operation per report."""

import itertools
import logging
import threading
from enum import Enum
from typing import Any, Iterator, List, Optional, Type, TypeVar

from cms_dashboard.core.config import WARMUP_TIMEOUT
from cms_dashboard.core.exceptions import UnsafeOrderByError
from cms_dashboard.host.urls import UrlResolver
from cms_dashboard.query.pagination import validate_page_request
from cms_dashboard.query.schemas import Page, PageRequest, SortDirection
from cms_dashboard.reporting import mappers
from cms_dashboard.reporting.dao import ReportingDAO
from cms_dashboard.reporting.schemas import (
    ContentCriteria,
    ContentItem,
    ContentOrderBy,
    KeyValueItem,
    LanguageItem,
    MemberCriteria,
    MemberGroupItem,
    MemberItem,
    MemberOrderBy,
    PingResult,
    ServerItem,
    UsageItem,
    UsageOrderBy,
)
from cms_dashboard.reporting.warmup import resolve_urls, warm_up

logger = logging.getLogger(__name__)

EnumType = TypeVar("EnumType", bound=Enum)


def allowed(value: Any, options: Type[EnumType]) -> EnumType:
    """Coerce a caller-supplied sort option onto its allow-list or reject it."""
    if isinstance(value, options):
        return value
    try:
        return options(value)
    except ValueError:
        raise UnsafeOrderByError(value, [option.value for option in options]) from None


class ReportingService:
    """Facade over the host database reports and the template warm-up."""

    def __init__(self, dao: ReportingDAO, url_resolver: UrlResolver):
        self.dao = dao
        self.url_resolver = url_resolver

    # ===== CONTENT =====

    def get_content(
        self,
        criteria: Optional[ContentCriteria] = None,
        page_request: Optional[PageRequest] = None,
        order_by: Any = ContentOrderBy.ID,
        direction: Any = SortDirection.ASC,
    ) -> Page[ContentItem]:
        """Paged content listing filtered by the given criteria."""
        order_by = allowed(order_by, ContentOrderBy)
        direction = allowed(direction, SortDirection)
        page_request = page_request or PageRequest()
        validate_page_request(page_request)

        total, rows = self.dao.get_content_page(criteria or ContentCriteria(), page_request, order_by, direction)
        return Page[ContentItem](
            items=mappers.map_rows(rows, mappers.to_content_item),
            total_items=total,
            page=page_request.page,
            items_per_page=page_request.items_per_page,
        )

    def get_content_type_aliases(self) -> List[str]:
        return self.dao.get_content_type_aliases()

    def get_content_usage(
        self,
        content_type_id: Optional[int] = None,
        order_by: Any = UsageOrderBy.ALIAS,
        direction: Any = SortDirection.ASC,
    ) -> List[UsageItem]:
        """How many nodes use each content type, optionally for a single type."""
        order_by = allowed(order_by, UsageOrderBy)
        direction = allowed(direction, SortDirection)
        rows = self.dao.get_content_usage(content_type_id, order_by, direction)
        return mappers.map_rows(rows, mappers.to_usage_item)

    # ===== MEMBERS =====

    def get_members(
        self,
        criteria: Optional[MemberCriteria] = None,
        page_request: Optional[PageRequest] = None,
        order_by: Any = MemberOrderBy.NAME,
        direction: Any = SortDirection.ASC,
    ) -> Page[MemberItem]:
        order_by = allowed(order_by, MemberOrderBy)
        direction = allowed(direction, SortDirection)
        page_request = page_request or PageRequest()
        validate_page_request(page_request)

        total, rows = self.dao.get_members_page(criteria or MemberCriteria(), page_request, order_by, direction)
        return Page[MemberItem](
            items=mappers.map_rows(rows, mappers.to_member_item),
            total_items=total,
            page=page_request.page,
            items_per_page=page_request.items_per_page,
        )

    def get_member_groups(self) -> List[MemberGroupItem]:
        return mappers.map_rows(self.dao.get_member_groups(), mappers.to_member_group_item)

    # ===== SYSTEM =====

    def get_languages(self) -> List[LanguageItem]:
        return mappers.map_rows(self.dao.get_languages(), mappers.to_language_item)

    def get_servers(self) -> Optional[List[ServerItem]]:
        """Server registrations, or None when the host does not track them."""
        rows = self.dao.get_servers()
        if rows is None:
            return None
        return mappers.map_rows(rows, mappers.to_server_item)

    def get_key_values(self) -> Optional[List[KeyValueItem]]:
        rows = self.dao.get_key_values()
        if rows is None:
            return None
        return mappers.map_rows(rows, mappers.to_key_value_item)

    def get_database_type(self) -> str:
        return self.dao.get_database_type()

    def is_healthy(self) -> bool:
        return self.dao.ping()

    # ===== TEMPLATE WARM-UP =====

    def get_template_urls(self, cancel: Optional[threading.Event] = None) -> Iterator[str]:
        """
        Lazily yield one absolute URL per template.

        Nothing runs until the first URL is requested. The node ids are read in
        a single query, then each node is resolved only as the consumer advances.
        Nodes that cannot be resolved are skipped. A new call re-reads and
        re-resolves from scratch.
        """
        node_ids = self.dao.get_template_node_ids()
        logger.info(f"Resolving warm-up URLs for {len(node_ids)} templates")
        yield from resolve_urls(self.url_resolver, node_ids, cancel)

    def warm_up_templates(
        self,
        limit: Optional[int] = None,
        timeout: float = WARMUP_TIMEOUT,
        cancel: Optional[threading.Event] = None,
    ) -> List[PingResult]:
        """Request each template URL so the host compiles its views."""
        urls = self.get_template_urls(cancel=cancel)
        if limit is not None:
            urls = itertools.islice(urls, limit)
        return warm_up(urls, timeout=timeout, cancel=cancel)
