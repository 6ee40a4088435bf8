"""Template warm-up: resolve one public URL per template and request it.

Requesting a page forces the host to compile the view behind it, so the first
real visitor does not pay for it.
"""

import logging
import threading
import time
from typing import Iterable, Iterator, List, NamedTuple, Optional

import requests

from cms_dashboard.core.config import WARMUP_TIMEOUT
from cms_dashboard.host.urls import UrlResolver
from cms_dashboard.reporting.schemas import PingResult

logger = logging.getLogger(__name__)


class UrlResolution(NamedTuple):
    """Outcome of resolving one node: a URL, or the reason there is none."""

    node_id: int
    url: Optional[str] = None
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return bool(self.url)


def resolve_url(resolver: UrlResolver, node_id: int) -> UrlResolution:
    """Resolve a node id to its absolute URL without raising."""
    try:
        content = resolver.resolve_node(node_id)
    except Exception as e:
        return UrlResolution(node_id, reason=f"content lookup failed: {e}")
    if content is None:
        return UrlResolution(node_id, reason="no published content")

    try:
        url = resolver.absolute_url(content)
    except Exception as e:
        return UrlResolution(node_id, reason=f"url resolution failed: {e}")
    if not url:
        return UrlResolution(node_id, reason="no absolute url")

    return UrlResolution(node_id, url=url)


def resolve_urls(
    resolver: UrlResolver,
    node_ids: Iterable[int],
    cancel: Optional[threading.Event] = None,
) -> Iterator[str]:
    """Lazily yield the URL of each node that resolves, skipping the rest.

    Each URL is resolved only when the consumer asks for it. Setting
    ``cancel`` stops the scan before the next node is resolved.
    """
    resolved = skipped = 0
    try:
        for node_id in node_ids:
            if cancel is not None and cancel.is_set():
                logger.info(f"Template URL scan cancelled after {resolved} urls")
                return

            resolution = resolve_url(resolver, node_id)
            if not resolution.ok:
                skipped += 1
                logger.warning(f"Skipping node {node_id}: {resolution.reason}")
                continue

            resolved += 1
            yield resolution.url
    finally:
        logger.debug(f"Template URL scan finished: {resolved} resolved, {skipped} skipped")


def ping_url(url: str, timeout: float = WARMUP_TIMEOUT, session: Optional[requests.Session] = None) -> PingResult:
    """GET a URL and record how it went. Network errors are captured, not raised."""
    http = session or requests
    started = time.perf_counter()
    try:
        response = http.get(url, timeout=timeout, allow_redirects=True)
    except requests.RequestException as e:
        return PingResult(url=url, error=str(e), elapsed_ms=(time.perf_counter() - started) * 1000)

    return PingResult(
        url=url,
        status_code=response.status_code,
        elapsed_ms=(time.perf_counter() - started) * 1000,
    )


def warm_up(
    urls: Iterable[str],
    timeout: float = WARMUP_TIMEOUT,
    cancel: Optional[threading.Event] = None,
    session: Optional[requests.Session] = None,
) -> List[PingResult]:
    """Request each URL in turn until the sequence ends or ``cancel`` is set."""
    results = []
    for url in urls:
        if cancel is not None and cancel.is_set():
            break
        result = ping_url(url, timeout=timeout, session=session)
        if result.success:
            logger.info(f"Warmed {url} ({result.status_code}) in {result.elapsed_ms:.0f}ms")
        else:
            logger.warning(f"Warm-up of {url} failed: {result.error or result.status_code}")
        results.append(result)
    return results
