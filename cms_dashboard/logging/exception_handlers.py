# cms_dashboard/logging/exception_handlers.py

import logging

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError, ResponseValidationError
from fastapi.responses import JSONResponse

from cms_dashboard.core.exceptions import (
    BackendUnavailableError,
    InvalidPageRequestError,
    UnsafeOrderByError,
)

logger = logging.getLogger(__name__)


def _describe(request: Request) -> str:
    return f"{request.method} {request.url.path}"


async def general_exception_handler(request: Request, exc: Exception):
    """Handle all unhandled exceptions"""
    logger.error(f"Unhandled error on {_describe(request)}: {type(exc).__name__}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal Server Error"},
    )


async def response_validation_exception_handler(request: Request, exc: ResponseValidationError):
    logger.error(f"Response validation failed on {_describe(request)}: {exc.errors()}")
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal Server Error: Response validation failed."},
    )


async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request validation errors"""
    logger.warning(f"Invalid request on {_describe(request)}: {exc.errors()}")

    # Convert errors to a safe format for JSON response
    def convert_error(error):
        if isinstance(error, dict):
            return {k: convert_error(v) for k, v in error.items()}
        elif isinstance(error, list):
            return [convert_error(item) for item in error]
        else:
            return str(error)

    return JSONResponse(
        status_code=422,
        content={"detail": convert_error(exc.errors())},
    )


async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions and log 4xx/5xx errors"""
    if exc.status_code >= 400:
        logger.warning(f"HTTP {exc.status_code} on {_describe(request)}: {exc.detail}")

    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def invalid_page_request_handler(request: Request, exc: InvalidPageRequestError):
    logger.warning(f"Invalid page request on {_describe(request)}: {exc}")
    return JSONResponse(status_code=400, content={"detail": str(exc)})


async def unsafe_order_by_handler(request: Request, exc: UnsafeOrderByError):
    logger.warning(f"Rejected sort option on {_describe(request)}: {exc.value!r}")
    return JSONResponse(
        status_code=400,
        content={"detail": str(exc), "allowed": exc.allowed},
    )


async def backend_unavailable_handler(request: Request, exc: BackendUnavailableError):
    logger.error(f"Host database unavailable on {_describe(request)}: {exc}")
    return JSONResponse(
        status_code=503,
        content={"detail": str(exc)},
        headers={"Retry-After": "30"},
    )
