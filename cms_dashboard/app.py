"""FastAPI application entry point for the CMS diagnostics dashboard."""

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError, ResponseValidationError
from fastapi.middleware.cors import CORSMiddleware

from cms_dashboard import __version__
from cms_dashboard.core.exceptions import (
    BackendUnavailableError,
    InvalidPageRequestError,
    UnsafeOrderByError,
)
from cms_dashboard.core.router import register_routes
from cms_dashboard.logging import configure_logging
from cms_dashboard.logging.exception_handlers import (
    backend_unavailable_handler,
    general_exception_handler,
    http_exception_handler,
    invalid_page_request_handler,
    request_validation_exception_handler,
    response_validation_exception_handler,
    unsafe_order_by_handler,
)
from cms_dashboard.logging.middleware import LoggingMiddleware


def create_app() -> FastAPI:

    configure_logging()

    app = FastAPI(
        title="CMS Dashboard",
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )

    # Add request logger middleware
    app.add_middleware(LoggingMiddleware)

    # Response validation errors are not seen by the middleware
    app.add_exception_handler(ResponseValidationError, response_validation_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(InvalidPageRequestError, invalid_page_request_handler)
    app.add_exception_handler(UnsafeOrderByError, unsafe_order_by_handler)
    app.add_exception_handler(BackendUnavailableError, backend_unavailable_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # In production, replace with specific origins
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Total-Count", "X-Page", "X-Page-Size", "X-Report-Available"],
    )

    register_routes(app)

    return app
