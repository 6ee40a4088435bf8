# cms_dashboard/host/urls.py
"""Resolution of host nodes to their public URLs."""

import logging
from typing import Any, Dict, Optional, Protocol
from urllib.parse import urljoin, urlparse

import requests
from pydantic import BaseModel, ConfigDict

from cms_dashboard.core.config import HOST_CONTENT_API_URL, HOST_SITE_URL, URL_RESOLVE_TIMEOUT

logger = logging.getLogger(__name__)


class ContentHandle(BaseModel):
    """A published content instance as returned by the host."""

    id: int
    url: Optional[str] = None
    data: Dict[str, Any] = {}

    model_config = ConfigDict(frozen=True)


class UrlResolver(Protocol):
    """Host collaborator that turns node ids into absolute public URLs.

    Both calls may return None or raise; callers treat either as "no URL".
    """

    def resolve_node(self, node_id: int) -> Optional[ContentHandle]: ...

    def absolute_url(self, content: ContentHandle) -> Optional[str]: ...


class HttpUrlResolver:
    """Resolve nodes through the host's content lookup endpoint.

    The endpoint is expected to answer ``GET <content_api_url>`` with a JSON
    object holding a ``url`` property (absolute or site-relative) for
    published nodes and 404 for anything else.
    """

    def __init__(
        self,
        content_api_url: str = HOST_CONTENT_API_URL,
        site_url: str = HOST_SITE_URL,
        timeout: float = URL_RESOLVE_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.content_api_url = content_api_url
        self.site_url = site_url
        self.timeout = timeout
        self.session = session or requests.Session()

    def resolve_node(self, node_id: int) -> Optional[ContentHandle]:
        response = self.session.get(
            self.content_api_url.format(id=node_id),
            headers={"Accept": "application/json"},
            timeout=self.timeout,
        )
        if response.status_code == 404:
            return None
        response.raise_for_status()

        try:
            payload = response.json()
        except ValueError:
            logger.warning(f"Host returned a non-JSON body for node {node_id}")
            return None

        if not isinstance(payload, dict):
            return None

        return ContentHandle(id=node_id, url=payload.get("url"), data=payload)

    def absolute_url(self, content: ContentHandle) -> Optional[str]:
        if not content.url:
            return None
        if urlparse(content.url).scheme in ("http", "https"):
            return content.url
        return urljoin(self.site_url, content.url)
