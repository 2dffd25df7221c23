"""
Read-only commission rollups for dashboards.

Every call recomputes from the ledger tables; commission events are
low volume so there is no caching. Date windows are half-open
[start_date, end_date).
"""

import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.models import (
    CommissionPaymentStatus,
    CommissionRecord,
    Salesperson,
    User,
)
from src.schemas.commission import (
    BidRequestDetails,
    CommissionAnalyticsResponse,
    CommissionRecordListItem,
    CommissionRecordResponse,
    SalespersonCommissionSummary,
    TopEarnerResponse,
)
from src.services.commission_store import CommissionStore

logger = logging.getLogger(__name__)

RECENT_RECORDS_LIMIT = 10
DEFAULT_LIST_WINDOW = timedelta(days=30)


def _apply_window(query, start_date: Optional[datetime], end_date: Optional[datetime]):
    if start_date:
        query = query.where(CommissionRecord.created_at >= start_date)
    if end_date:
        query = query.where(CommissionRecord.created_at < end_date)
    return query


async def get_recipient_name(
    db: AsyncSession,
    recipient_id: int,
    is_admin_commission: bool,
) -> str:
    """Display name of a commission recipient."""
    if is_admin_commission:
        user = await db.get(User, recipient_id)
        return user.full_name if user else "Unknown"

    name = await db.scalar(
        select(User.full_name)
        .join(Salesperson, Salesperson.user_id == User.id)
        .where(Salesperson.id == recipient_id)
    )
    return name or "Unknown"


async def get_salesperson_commission_summary(
    db: AsyncSession,
    salesperson_id: int,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
) -> SalespersonCommissionSummary:
    """
    Earned, pending and paid totals for one salesperson.

    Without a window the 10 most recent records are attached; with a
    window every record inside it is.
    """
    owned = (
        CommissionRecord.salesperson_id == salesperson_id,
        CommissionRecord.is_admin_commission == False,
    )

    totals_query = _apply_window(
        select(
            func.coalesce(func.sum(CommissionRecord.salesman_amount), Decimal("0")).label("total_earned"),
            func.coalesce(
                func.sum(
                    case(
                        (
                            CommissionRecord.payment_status == CommissionPaymentStatus.UNPAID,
                            CommissionRecord.salesman_amount,
                        ),
                        else_=Decimal("0"),
                    )
                ),
                Decimal("0"),
            ).label("pending"),
            func.coalesce(
                func.sum(
                    case(
                        (
                            CommissionRecord.payment_status == CommissionPaymentStatus.PAID,
                            CommissionRecord.salesman_amount,
                        ),
                        else_=Decimal("0"),
                    )
                ),
                Decimal("0"),
            ).label("paid"),
            func.count(CommissionRecord.id).label("total_records"),
        ).where(*owned),
        start_date,
        end_date,
    )
    totals = (await db.execute(totals_query)).one()

    records_query = _apply_window(
        select(CommissionRecord).where(*owned),
        start_date,
        end_date,
    ).order_by(CommissionRecord.created_at.desc(), CommissionRecord.id.desc())

    if not (start_date or end_date):
        records_query = records_query.limit(RECENT_RECORDS_LIMIT)

    records = (await db.execute(records_query)).scalars().all()

    return SalespersonCommissionSummary(
        salesperson_id=salesperson_id,
        total_earned=totals.total_earned,
        pending_commissions=totals.pending,
        paid_commissions=totals.paid,
        total_records=totals.total_records,
        recent_commissions=[CommissionRecordResponse.model_validate(r) for r in records],
    )


async def get_top_earners(
    db: AsyncSession,
    limit: int = 10,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
) -> List[TopEarnerResponse]:
    """
    Recipients ranked by total salesperson share earned.

    Admin-redirected commissions are ranked under the admin's user id,
    separately from salesperson ids.
    """
    total_earned = func.sum(CommissionRecord.salesman_amount).label("total_earned")
    query = _apply_window(
        select(
            CommissionRecord.salesperson_id,
            CommissionRecord.is_admin_commission,
            total_earned,
            func.count(CommissionRecord.id).label("commission_count"),
        ),
        start_date,
        end_date,
    )
    query = (
        query.group_by(CommissionRecord.salesperson_id, CommissionRecord.is_admin_commission)
        .order_by(total_earned.desc(), CommissionRecord.salesperson_id)
        .limit(limit)
    )

    rows = (await db.execute(query)).all()

    earners = []
    for row in rows:
        earners.append(
            TopEarnerResponse(
                salesperson_id=row.salesperson_id,
                is_admin_commission=row.is_admin_commission,
                name=await get_recipient_name(db, row.salesperson_id, row.is_admin_commission),
                total_earned=row.total_earned or Decimal("0"),
                commission_count=row.commission_count,
            )
        )
    return earners


async def get_commission_analytics(
    db: AsyncSession,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    top_earners_limit: int = 10,
) -> CommissionAnalyticsResponse:
    """Global commission totals with the top earners attached."""
    query = _apply_window(
        select(
            func.coalesce(func.sum(CommissionRecord.total_commission), Decimal("0")).label("total_commissions"),
            func.coalesce(func.sum(CommissionRecord.salesman_amount), Decimal("0")).label("salesman_total"),
            func.coalesce(func.sum(CommissionRecord.override_amount), Decimal("0")).label("override_total"),
            func.coalesce(func.sum(CommissionRecord.corp_amount), Decimal("0")).label("corp_total"),
            func.count(CommissionRecord.id).label("total_records"),
        ),
        start_date,
        end_date,
    )
    totals = (await db.execute(query)).one()

    return CommissionAnalyticsResponse(
        total_commissions=totals.total_commissions,
        salesman_total=totals.salesman_total,
        override_total=totals.override_total,
        corp_total=totals.corp_total,
        total_records=totals.total_records,
        top_earners=await get_top_earners(db, top_earners_limit, start_date, end_date),
    )


async def list_commission_records(
    db: AsyncSession,
    salesperson_id: Optional[int] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    status: Optional[str] = None,
    payment_status: Optional[str] = None,
) -> List[CommissionRecordListItem]:
    """
    Commission records for the admin list, enriched with names.

    Selection: a salesperson's records, else the given window (either
    bound may be open), else the last 30 days. Status filters apply on top.
    """
    store = CommissionStore(db)

    if salesperson_id is not None:
        records = await store.get_commission_records_by_salesperson(salesperson_id)
    elif start_date or end_date:
        records = await store.get_commission_records_by_date_range(start_date, end_date)
    else:
        since = datetime.now(timezone.utc) - DEFAULT_LIST_WINDOW
        records = await store.get_commission_records_by_date_range(since)

    if status:
        records = [r for r in records if r.status == status]
    if payment_status:
        records = [r for r in records if r.payment_status == payment_status]

    items = []
    for record in records:
        bid_request = await store.get_bid_request(record.bid_request_id)
        details = None
        if bid_request:
            details = BidRequestDetails(
                full_name=bid_request.full_name,
                email=bid_request.email,
                service_requested=bid_request.service_requested,
            )

        item = CommissionRecordListItem.model_validate(record)
        item.salesperson_name = await get_recipient_name(
            db, record.salesperson_id, record.is_admin_commission
        )
        item.bid_request_details = details
        items.append(item)

    return items
