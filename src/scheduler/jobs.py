"""
Background job definitions using APScheduler.

Jobs:
- Commission settlement: pays out records still marked unpaid, such as
  ones written outside the commission engine (imports, manual inserts)
"""

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from src.config import settings
from src.db import get_db_context
from src.services.commission_payments import settle_unpaid_commissions

logger = logging.getLogger(__name__)

scheduler = AsyncIOScheduler()


async def commission_settlement_job():
    """Settle commission records still marked unpaid."""
    logger.debug("Running commission settlement job")
    try:
        async with get_db_context() as db:
            settled = await settle_unpaid_commissions(db)
            if settled:
                logger.info(f"Commission settlement job: settled {settled} records")
    except Exception as e:
        logger.error(f"Commission settlement job error: {e}")


def setup_scheduler():
    """
    Configure and add all scheduled jobs.

    Called during application startup.
    """
    scheduler.add_job(
        commission_settlement_job,
        trigger=IntervalTrigger(minutes=settings.settlement_interval_minutes),
        id="commission_settlement",
        name="Settle unpaid commissions",
        replace_existing=True,
    )

    logger.info("Scheduler configured with jobs")
