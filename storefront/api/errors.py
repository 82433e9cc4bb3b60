# storefront/api/errors.py
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.domain.errors import (
    ConflictError,
    InternalError,
    NotFoundError,
    StorefrontError,
    UnauthorizedError,
    ValidationError,
)
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

_STATUS = (
    (NotFoundError, 404),
    (UnauthorizedError, 401),
    (ConflictError, 409),
    (ValidationError, 400),
    (InternalError, 500),
)


def http_error(exc: StorefrontError) -> HTTPException:
    for exc_type, status_code in _STATUS:
        if isinstance(exc, exc_type):
            headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
            return HTTPException(status_code=status_code, detail=str(exc), headers=headers)
    return HTTPException(status_code=500, detail=str(exc))


async def _http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def _storefront_error_handler(request: Request, exc: StorefrontError):
    return await _http_exception_handler(request, http_error(exc))


async def _unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def register_error_handlers(app: FastAPI):
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(StorefrontError, _storefront_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
