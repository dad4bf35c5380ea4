"""
Application exceptions and the FastAPI handlers that turn them into JSON.

Every error body carries `error` and `path`; the rest depends on the kind.
"""
from typing import Optional, Union

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError, IntegrityError

from .logging_config import get_logger

logger = get_logger("error_handlers")


class AppException(Exception):
    """Base exception for stock check errors with an HTTP status."""

    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ResourceNotFoundError(AppException):
    """Godown, report or scan session that does not exist."""

    def __init__(self, resource: str, identifier: Union[int, str]):
        super().__init__(
            message=f"{resource} with identifier '{identifier}' not found",
            status_code=404,
            details={"resource": resource, "identifier": str(identifier)}
        )


class EmptyReportError(AppException):
    """A report was requested before anything was scanned or marked found."""

    def __init__(self, expected_count: int = 0):
        super().__init__(
            message="No items scanned yet",
            status_code=400,
            details={"reason": "EmptyReport", "expected_count": expected_count}
        )


class BackendError(AppException):
    """A call from the scan station to the backend failed."""

    def __init__(self, message: str, status_code: Optional[int] = None, detail=None):
        self.upstream_status = status_code
        super().__init__(
            message=message,
            status_code=502,
            details={"upstream_status": status_code, "detail": detail}
        )


def _error_response(request: Request, status_code: int, error: str, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error, **extra, "path": request.url.path}
    )


async def app_exception_handler(request: Request, exc: AppException):
    # 4xx logged as warnings
    log = logger.warning if exc.status_code < 500 else logger.error
    log(f"[APP_ERROR] {request.method} {request.url.path} - {exc.status_code} {exc.message} {exc.details}")
    return _error_response(request, exc.status_code, exc.message, details=exc.details)


async def http_exception_handler(request: Request, exc: HTTPException):
    logger.warning(f"[HTTP_ERROR] {request.method} {request.url.path} - {exc.status_code} {exc.detail}")
    error = exc.detail if isinstance(exc.detail, str) else "HTTP error"
    return _error_response(request, exc.status_code, error, status_code=exc.status_code)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """422 with one entry per invalid field, e.g. `body -> scannedCount`."""
    errors = [
        {
            "field": " -> ".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"]
        }
        for error in exc.errors()
    ]
    logger.warning(f"[VALIDATION] {request.method} {request.url.path} - {len(errors)} invalid field(s)")
    return _error_response(request, 422, "Validation failed", validation_errors=errors)


async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError):
    """Integrity violations (e.g. a duplicate godown name) are 409, the rest 500."""
    if isinstance(exc, IntegrityError):
        logger.warning(f"[DB] Integrity error on {request.method} {request.url.path}: {exc.orig}")
        return _error_response(
            request, status.HTTP_409_CONFLICT, "Data integrity constraint violated", detail=str(exc.orig)
        )

    logger.error(f"[DB] {type(exc).__name__} on {request.method} {request.url.path}: {exc}", exc_info=True)
    return _error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Database error occurred")


async def generic_exception_handler(request: Request, exc: Exception):
    logger.critical(
        f"[UNHANDLED] {type(exc).__name__} on {request.method} {request.url.path}: {exc}",
        exc_info=True
    )
    return _error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal server error",
        message="An unexpected error occurred. Please retry the last action."
    )
