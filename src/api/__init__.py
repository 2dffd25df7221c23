"""API router aggregation."""

from fastapi import APIRouter

from src.api.auth import router as auth_router
from src.api.bid_requests import router as bid_requests_router
from src.api.commissions import router as commissions_router
from src.api.health import router as health_router

api_router = APIRouter(prefix="/api")

api_router.include_router(health_router)
api_router.include_router(auth_router)
api_router.include_router(bid_requests_router)
api_router.include_router(commissions_router)

__all__ = ["api_router"]
