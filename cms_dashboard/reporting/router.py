# cms_dashboard/reporting/router.py
"""API router for the reporting module."""

import itertools
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from cms_dashboard.core.config import WARMUP_TIMEOUT
from cms_dashboard.core.dependencies import SessionFactoryDep, UrlResolverDep
from cms_dashboard.query.schemas import Page, PageRequest, SortDirection
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
from cms_dashboard.reporting.service import ReportingService

router = APIRouter(
    prefix="/reports",
    tags=["reports"],
)


# ===== DEPENDENCY INJECTION =====


def get_reporting_dao(session_factory: SessionFactoryDep) -> ReportingDAO:
    """Get ReportingDAO instance."""
    return ReportingDAO(session_factory)


def get_reporting_service(url_resolver: UrlResolverDep, dao: ReportingDAO = Depends(get_reporting_dao)) -> ReportingService:
    """Get ReportingService instance."""
    return ReportingService(dao, url_resolver)


def get_page_request(
    page: int = Query(1, ge=1, description="Page number, starting at 1"),
    items_per_page: int = Query(50, ge=1, le=1000, description="Rows per page"),
) -> PageRequest:
    return PageRequest(page=page, items_per_page=items_per_page)


def get_content_criteria(
    alias: Optional[str] = Query(None, description="Exact content type alias"),
    name: Optional[str] = Query(None, description="Part of the node name"),
    id: Optional[str] = Query(None, description="Node id or part of the unique id"),
    level: Optional[str] = Query(None, description="Tree level"),
    trashed: Optional[str] = Query(None, description="Only trashed (true) or live (false) nodes"),
    creator_id: Optional[str] = Query(None, description="Id of the creating user"),
    updater_id: Optional[str] = Query(None, description="Id of the user who saved the current version"),
    language_id: Optional[str] = Query(None, description="Has a variant in this language"),
) -> ContentCriteria:
    # Numeric filters arrive as text so unparseable values can fall back to "no constraint".
    return ContentCriteria(
        alias=alias,
        name=name,
        id=id,
        level=level,
        trashed=trashed,
        creator_id=creator_id,
        updater_id=updater_id,
        language_id=language_id,
    )


def _set_page_headers(response: Response, page: Page) -> None:
    response.headers["X-Total-Count"] = str(page.total_items)
    response.headers["X-Page"] = str(page.page)
    response.headers["X-Page-Size"] = str(page.items_per_page)


# ===== CONTENT =====


@router.get("/content", response_model=Page[ContentItem])
def get_content(
    response: Response,
    criteria: ContentCriteria = Depends(get_content_criteria),
    page_request: PageRequest = Depends(get_page_request),
    order_by: str = Query(ContentOrderBy.ID.value, description="Sort column"),
    direction: str = Query(SortDirection.ASC.value, description="asc or desc"),
    service: ReportingService = Depends(get_reporting_service),
) -> Page[ContentItem]:
    """Paged content listing with optional filters."""
    page = service.get_content(criteria, page_request, order_by=order_by, direction=direction)
    _set_page_headers(response, page)
    return page


@router.get("/content-types/aliases", response_model=List[str])
def get_content_type_aliases(service: ReportingService = Depends(get_reporting_service)) -> List[str]:
    return service.get_content_type_aliases()


@router.get("/content-types/usage", response_model=List[UsageItem])
def get_content_usage(
    content_type_id: Optional[int] = Query(None, description="Restrict to one content type"),
    order_by: str = Query(UsageOrderBy.ALIAS.value, description="Sort column"),
    direction: str = Query(SortDirection.ASC.value, description="asc or desc"),
    service: ReportingService = Depends(get_reporting_service),
) -> List[UsageItem]:
    """Instance counts per content type."""
    return service.get_content_usage(content_type_id, order_by=order_by, direction=direction)


# ===== MEMBERS =====


@router.get("/members", response_model=Page[MemberItem])
def get_members(
    response: Response,
    group_id: Optional[str] = Query(None, description="Only members of this group"),
    search: Optional[str] = Query(None, description="Part of the name, email or login"),
    page_request: PageRequest = Depends(get_page_request),
    order_by: str = Query(MemberOrderBy.NAME.value, description="Sort column"),
    direction: str = Query(SortDirection.ASC.value, description="asc or desc"),
    service: ReportingService = Depends(get_reporting_service),
) -> Page[MemberItem]:
    criteria = MemberCriteria(group_id=group_id, search=search)
    page = service.get_members(criteria, page_request, order_by=order_by, direction=direction)
    _set_page_headers(response, page)
    return page


@router.get("/member-groups", response_model=List[MemberGroupItem])
def get_member_groups(service: ReportingService = Depends(get_reporting_service)) -> List[MemberGroupItem]:
    return service.get_member_groups()


# ===== SYSTEM =====


@router.get("/languages", response_model=List[LanguageItem])
def get_languages(service: ReportingService = Depends(get_reporting_service)) -> List[LanguageItem]:
    return service.get_languages()


@router.get("/servers", response_model=List[ServerItem])
def get_servers(response: Response, service: ReportingService = Depends(get_reporting_service)) -> List[ServerItem]:
    """Registered servers. Answers [] with X-Report-Available: false if the host has no server table."""
    servers = service.get_servers()
    response.headers["X-Report-Available"] = "false" if servers is None else "true"
    return servers or []


@router.get("/key-values", response_model=List[KeyValueItem])
def get_key_values(response: Response, service: ReportingService = Depends(get_reporting_service)) -> List[KeyValueItem]:
    key_values = service.get_key_values()
    response.headers["X-Report-Available"] = "false" if key_values is None else "true"
    return key_values or []


@router.get("/database-type")
def get_database_type(service: ReportingService = Depends(get_reporting_service)) -> dict:
    return {"database_type": service.get_database_type()}


# ===== TEMPLATE WARM-UP =====


@router.get("/template-urls", response_model=List[str])
def get_template_urls(
    limit: Optional[int] = Query(None, ge=1, description="Stop after this many URLs"),
    service: ReportingService = Depends(get_reporting_service),
) -> List[str]:
    """One public URL per template, for warming up the host's views."""
    urls = service.get_template_urls()
    if limit is not None:
        urls = itertools.islice(urls, limit)
    return list(urls)


@router.post("/template-urls/warm-up", response_model=List[PingResult])
def warm_up_templates(
    limit: Optional[int] = Query(None, ge=1, description="Stop after this many URLs"),
    timeout: float = Query(WARMUP_TIMEOUT, gt=0, le=120, description="Per-request timeout in seconds"),
    service: ReportingService = Depends(get_reporting_service),
) -> List[PingResult]:
    """Request every template URL so the host compiles its views."""
    return service.warm_up_templates(limit=limit, timeout=timeout)


# ===== HEALTH =====


@router.get("/health")
def health_check(service: ReportingService = Depends(get_reporting_service)) -> dict:
    """Health check for the host database connection."""
    if not service.is_healthy():
        raise HTTPException(status_code=503, detail="Host database did not answer")
    return {"status": "healthy", "service": "reporting"}
