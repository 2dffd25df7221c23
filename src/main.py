"""
Lead marketplace commission service.

FastAPI application with:
- Public bid request intake that books commissions
- Commission ledger, adjustments, payments and analytics
- Role-based authentication (admin/salesperson)
- Periodic settlement of unpaid commissions
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.api import api_router
from src.auth.middleware import AuthMiddleware
from src.config import settings
from src.db import get_db_context
from src.models import User, UserRole
from src.scheduler.jobs import scheduler, setup_scheduler
from src.services.rate_sheet import count_service_categories, seed_rate_sheet
from src.utils.password import hash_password

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


async def ensure_admin_account(db: AsyncSession) -> User:
    """Create the configured administrator when no admin exists yet."""
    result = await db.execute(
        select(User).where(User.role == UserRole.ADMIN).order_by(User.id).limit(1)
    )
    admin = result.scalar_one_or_none()
    if admin:
        return admin

    logger.info("Creating admin account...")
    admin = User(
        username=settings.admin_username,
        password_hash=hash_password(settings.admin_password),
        email=settings.admin_email,
        full_name="Administrator",
        role=UserRole.ADMIN,
        is_active=True,
    )
    db.add(admin)
    await db.commit()
    logger.info(f"Admin account created: {settings.admin_username}")
    return admin


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup:
    - Creates the admin account if none exists
    - Seeds the default rate sheet into an empty table
    - Starts the settlement scheduler

    Shutdown:
    - Stops the scheduler
    """
    logger.info("Starting commission service...")

    async with get_db_context() as db:
        await ensure_admin_account(db)

        if settings.seed_rate_sheet and not await count_service_categories(db):
            created, _ = await seed_rate_sheet(db)
            logger.info(f"Seeded {created} service categories")

    setup_scheduler()
    scheduler.start()

    logger.info("Commission service started")

    yield

    logger.info("Shutting down commission service...")
    scheduler.shutdown(wait=False)


app = FastAPI(
    title="Lead Marketplace Commissions",
    description="Commission attribution and ledger for bid requests",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if not settings.is_production else None,
    redoc_url="/redoc" if not settings.is_production else None,
)

app.add_middleware(AuthMiddleware)

app.include_router(api_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.main:app",
        host="0.0.0.0",
        port=8000,
        reload=not settings.is_production,
    )
