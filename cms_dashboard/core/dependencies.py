# cms_dashboard/core/dependencies.py
"""Shared FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends

from cms_dashboard.core.database import SessionFactory, get_session_factory
from cms_dashboard.host.urls import HttpUrlResolver, UrlResolver

# Core database dependency
SessionFactoryDep = Annotated[SessionFactory, Depends(get_session_factory)]


def get_url_resolver() -> UrlResolver:
    """Get the host URL resolver."""
    return HttpUrlResolver()


UrlResolverDep = Annotated[UrlResolver, Depends(get_url_resolver)]
