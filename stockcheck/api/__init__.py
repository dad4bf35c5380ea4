"""API Router."""
from fastapi import APIRouter

from stockcheck.api import godowns, stock_check, scan_sessions

api_router = APIRouter(prefix="/api")

# Include all route modules
api_router.include_router(godowns.router)
api_router.include_router(stock_check.router)
api_router.include_router(scan_sessions.router)

__all__ = ["api_router"]
