"""
FastAPI application for godown stock checking.

To run: uvicorn stockcheck.main:app --reload
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError

from stockcheck.core.config import settings
from stockcheck.core.database import init_db, close_db, check_db_connection
from stockcheck.api import api_router
from stockcheck.error_handlers import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    sqlalchemy_exception_handler,
    generic_exception_handler
)
from stockcheck.logging_config import setup_logging, get_logger
from stockcheck.middleware import limiter, RequestLoggingMiddleware, rate_limit_exceeded_handler

logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    """
    setup_logging(settings.log_level)
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")

    if settings.auto_create_tables:
        init_db()

    logger.info("Application startup complete")

    yield

    logger.info("Shutting down application...")
    close_db()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Godown stock checking - barcode scan sessions and reports",
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    lifespan=lifespan
)

app.state.limiter = limiter

app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Exception handlers
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(SQLAlchemyError, sqlalchemy_exception_handler)
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
app.add_exception_handler(Exception, generic_exception_handler)

app.include_router(api_router)


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "app": settings.app_name,
        "version": settings.app_version,
        "status": "running",
        "docs": "/docs" if settings.debug else "disabled",
        "api": "/api"
    }


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy" if check_db_connection() else "degraded",
        "version": settings.app_version
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "stockcheck.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug
    )
