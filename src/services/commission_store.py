"""
Narrow persistence interface used by the commission services.

Every method only adds/flushes; committing or rolling back is left to
the calling service so one commission event can span several writes.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional, Sequence

from sqlalchemy import and_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.config import settings
from src.models import (
    BidRequest,
    CommissionAdjustment,
    CommissionPayment,
    CommissionPaymentStatus,
    CommissionRecord,
    Salesperson,
    ServiceCategory,
    User,
    UserRole,
)

logger = logging.getLogger(__name__)


class CommissionStore:
    """Record store for rate sheet, ledger and recipient lookups."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ── Rate sheet ────────────────────────────────────────

    async def get_active_service_categories(self) -> Sequence[ServiceCategory]:
        result = await self.db.execute(
            select(ServiceCategory)
            .where(ServiceCategory.is_active == True)
            .order_by(ServiceCategory.id)
        )
        return result.scalars().all()

    async def get_all_service_categories(self) -> Sequence[ServiceCategory]:
        result = await self.db.execute(
            select(ServiceCategory).order_by(ServiceCategory.name)
        )
        return result.scalars().all()

    async def get_service_category(self, category_id: int) -> Optional[ServiceCategory]:
        return await self.db.get(ServiceCategory, category_id)

    # ── People ────────────────────────────────────────────

    async def get_user(self, user_id: int) -> Optional[User]:
        return await self.db.get(User, user_id)

    async def get_salesperson(self, salesperson_id: int) -> Optional[Salesperson]:
        return await self.db.get(Salesperson, salesperson_id)

    async def get_salesperson_by_profile_url(self, profile_url: str) -> Optional[Salesperson]:
        result = await self.db.execute(
            select(Salesperson).where(
                Salesperson.profile_url == profile_url,
                Salesperson.is_active == True,
            )
        )
        return result.scalar_one_or_none()

    async def get_salesperson_by_user(self, user_id: int) -> Optional[Salesperson]:
        result = await self.db.execute(select(Salesperson).where(Salesperson.user_id == user_id))
        return result.scalar_one_or_none()

    async def get_admin_users(self) -> Sequence[User]:
        """Active administrators, lowest id first."""
        result = await self.db.execute(
            select(User)
            .where(
                and_(
                    User.role == UserRole.ADMIN,
                    User.is_active == True,
                )
            )
            .order_by(User.id)
        )
        return result.scalars().all()

    async def get_default_recipient(self) -> Optional[User]:
        """
        Administrator who receives unattributed commissions and the
        corporate share.

        Uses settings.default_commission_recipient_id when it names an
        active administrator, otherwise the lowest-id active administrator.
        """
        configured_id = settings.default_commission_recipient_id
        if configured_id is not None:
            user = await self.get_user(configured_id)
            if user and user.role == UserRole.ADMIN and user.is_active:
                return user
            logger.warning(
                f"Configured commission recipient {configured_id} is not an "
                f"active admin, falling back to first admin"
            )

        admins = await self.get_admin_users()
        return admins[0] if admins else None

    async def increment_commissions(self, salesperson_id: int, delta: Decimal) -> bool:
        """
        Add delta to a salesperson's cumulative total in one statement.

        Returns:
            True if the salesperson row exists and was updated
        """
        result = await self.db.execute(
            update(Salesperson)
            .where(Salesperson.id == salesperson_id)
            .values(commissions=Salesperson.commissions + delta)
        )
        return result.rowcount > 0

    # ── Commission records ────────────────────────────────

    async def create_commission_record(self, **fields) -> CommissionRecord:
        record = CommissionRecord(**fields)
        self.db.add(record)
        await self.db.flush()
        return record

    async def get_commission_record(self, record_id: int) -> Optional[CommissionRecord]:
        return await self.db.get(CommissionRecord, record_id)

    async def get_commission_records_by_bid_request(
        self, bid_request_id: int
    ) -> Sequence[CommissionRecord]:
        result = await self.db.execute(
            select(CommissionRecord)
            .where(CommissionRecord.bid_request_id == bid_request_id)
            .order_by(CommissionRecord.id)
        )
        return result.scalars().all()

    async def get_commission_records_by_salesperson(
        self, salesperson_id: int
    ) -> Sequence[CommissionRecord]:
        result = await self.db.execute(
            select(CommissionRecord)
            .where(
                CommissionRecord.salesperson_id == salesperson_id,
                CommissionRecord.is_admin_commission == False,
            )
            .order_by(CommissionRecord.created_at.desc(), CommissionRecord.id.desc())
        )
        return result.scalars().all()

    async def get_commission_records_by_date_range(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> Sequence[CommissionRecord]:
        query = select(CommissionRecord)
        if start_date is not None:
            query = query.where(CommissionRecord.created_at >= start_date)
        if end_date is not None:
            query = query.where(CommissionRecord.created_at < end_date)

        result = await self.db.execute(
            query.order_by(CommissionRecord.created_at.desc(), CommissionRecord.id.desc())
        )
        return result.scalars().all()

    async def get_unpaid_commission_records(self, limit: int = 50) -> Sequence[CommissionRecord]:
        result = await self.db.execute(
            select(CommissionRecord)
            .where(CommissionRecord.payment_status == CommissionPaymentStatus.UNPAID)
            .order_by(CommissionRecord.id)
            .limit(limit)
        )
        return result.scalars().all()

    # ── Adjustments ───────────────────────────────────────

    async def create_commission_adjustment(self, **fields) -> CommissionAdjustment:
        adjustment = CommissionAdjustment(**fields)
        self.db.add(adjustment)
        await self.db.flush()
        return adjustment

    async def get_adjustments_by_record(
        self, record_id: int
    ) -> Sequence[CommissionAdjustment]:
        result = await self.db.execute(
            select(CommissionAdjustment)
            .where(CommissionAdjustment.commission_record_id == record_id)
            .order_by(CommissionAdjustment.id)
        )
        return result.scalars().all()

    # ── Payments ──────────────────────────────────────────

    async def create_commission_payment(self, **fields) -> CommissionPayment:
        payment = CommissionPayment(**fields)
        self.db.add(payment)
        await self.db.flush()
        return payment

    async def get_commission_payment(self, payment_id: int) -> Optional[CommissionPayment]:
        return await self.db.get(CommissionPayment, payment_id)

    async def get_payments_by_recipient(self, recipient_id: int) -> Sequence[CommissionPayment]:
        result = await self.db.execute(
            select(CommissionPayment)
            .where(CommissionPayment.recipient_id == recipient_id)
            .order_by(CommissionPayment.id.desc())
        )
        return result.scalars().all()

    # ── Bid requests ──────────────────────────────────────

    async def get_bid_request(self, bid_request_id: int) -> Optional[BidRequest]:
        return await self.db.get(BidRequest, bid_request_id)
