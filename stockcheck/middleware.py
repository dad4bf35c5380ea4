# stockcheck/middleware.py
"""Request timing/logging middleware and the report submission rate limiter"""

import time
from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from .core.config import settings
from .logging_config import get_logger

logger = get_logger("middleware")


def terminal_key(request: Request) -> str:
    """Rate limit key: the scanner terminal id if sent, else the client address."""
    terminal = request.headers.get(settings.terminal_id_header)
    if terminal:
        return f"terminal:{terminal}"
    return get_remote_address(request)


limiter = Limiter(key_func=terminal_key)


def _client(request: Request) -> str:
    return request.headers.get(settings.terminal_id_header) or (
        request.client.host if request.client else "unknown"
    )


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """One line per request and per response, with duration in X-Process-Time"""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        logger.info(f"[REQUEST] {request.method} {request.url.path} - Client: {_client(request)}")

        try:
            response = await call_next(request)
        except Exception as e:
            elapsed = (time.perf_counter() - started) * 1000
            logger.error(
                f"[ERROR] {request.method} {request.url.path} failed after {elapsed:.2f}ms: {e}",
                exc_info=True
            )
            raise

        elapsed = (time.perf_counter() - started) * 1000
        log = logger.warning if response.status_code >= 400 else logger.info
        log(f"[RESPONSE] {request.method} {request.url.path} - Status: {response.status_code} - {elapsed:.2f}ms")

        response.headers["X-Process-Time"] = f"{elapsed:.2f}ms"
        return response


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """429 for terminals submitting reports too fast"""
    logger.warning(f"[RATE_LIMIT] {_client(request)} exceeded {exc.detail} on {request.url.path}")
    return JSONResponse(
        status_code=429,
        content={
            "error": "Rate limit exceeded",
            "message": f"Too many requests ({exc.detail}). Wait a moment and submit again.",
            "path": request.url.path
        }
    )
