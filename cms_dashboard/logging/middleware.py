import getpass
import logging
import os
import platform
import socket
import time
from typing import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from cms_dashboard.core.config import APPLICATION_ID

logger = logging.getLogger(__name__)


def _current_username() -> str:
    try:
        return os.environ.get("USER") or os.environ.get("USERNAME") or getpass.getuser() or "unknown_user"
    except Exception:
        return "unknown_user"


def _current_hostname() -> str:
    try:
        return socket.gethostname() or platform.node() or "unknown_host"
    except Exception:
        return "unknown_host"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log one line per API request with its status and duration."""

    def __init__(self, app: ASGIApp):
        super().__init__(app)
        self.username = _current_username()
        self.hostname = _current_hostname()
        self.application_id = APPLICATION_ID

        logger.info(
            f"Logging middleware initialized with username: {self.username} on host: {self.hostname}, App ID: {self.application_id}"
        )

    async def dispatch(self, request: Request, call_next: Callable):
        # Skip the interactive docs and schema
        excluded_paths = ["/api/docs", "/api/redoc", "/api/openapi.json"]
        if any(request.url.path.startswith(path) for path in excluded_paths):
            return await call_next(request)

        start_time = time.time()
        response = await call_next(request)
        duration_ms = (time.time() - start_time) * 1000

        client_ip = request.client.host if request.client else None
        message = (
            f"{request.method} {request.url.path} -> {response.status_code} in {duration_ms:.1f}ms "
            f"(client={client_ip}, user={self.username}, host={self.hostname}, app={self.application_id})"
        )
        if response.status_code >= 500:
            logger.error(message)
        elif response.status_code >= 400:
            logger.warning(message)
        else:
            logger.info(message)

        response.headers["X-Process-Time-Ms"] = f"{duration_ms:.1f}"
        return response
