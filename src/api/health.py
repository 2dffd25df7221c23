"""
Health check endpoints.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.db import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])

SERVICE_NAME = "leadmarket-commissions"


@router.get("")
async def health_check():
    """Returns 200 while the process is up."""
    return {"status": "healthy", "service": SERVICE_NAME}


@router.get("/ready")
async def readiness_check(db: AsyncSession = Depends(get_db)):
    """
    Readiness check with database connectivity.

    Commission intake writes to the database, so the service is not
    ready without it.
    """
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning(f"Readiness check failed: {e}")
        return {"status": "not_ready", "database": f"error: {e}"}

    return {"status": "ready", "database": "connected"}


@router.get("/live")
async def liveness_check():
    return {"status": "alive"}
