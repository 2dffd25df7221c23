"""
Manual commission adjustments.

Each adjustment appends an audit row (previous amount, new amount,
signed delta, reason) and flags the record as adjusted. The new amount
is also applied: the record's salesman_amount is replaced and, for
salesperson-owned records, the cumulative total moves by the delta.
"""

import logging
from decimal import Decimal
from typing import Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from src.models import CommissionAdjustment, CommissionStatus
from src.services.commission_store import CommissionStore
from src.services.exceptions import CommissionValidationError, RecordNotFound

logger = logging.getLogger(__name__)


async def create_commission_adjustment(
    db: AsyncSession,
    commission_record_id: int,
    adjusted_by: int,
    new_amount: Decimal,
    reason: str,
    notes: Optional[str] = None,
) -> CommissionAdjustment:
    """
    Record and apply a manual correction of a record's salesperson amount.

    Args:
        db: Database session
        commission_record_id: Record being corrected
        adjusted_by: User id of the administrator making the change
        new_amount: Corrected salesperson amount (>= 0)
        reason: Why the amount changed
        notes: Optional free-form notes

    Returns:
        The appended CommissionAdjustment

    Raises:
        RecordNotFound: if the commission record does not exist
        CommissionValidationError: negative amount or blank reason
    """
    new_amount = Decimal(str(new_amount))
    if new_amount < 0:
        raise CommissionValidationError("Adjusted amount cannot be negative")
    if not reason or not reason.strip():
        raise CommissionValidationError("Adjustment reason is required")

    store = CommissionStore(db)
    record = await store.get_commission_record(commission_record_id)
    if record is None:
        raise RecordNotFound("Commission record", commission_record_id)

    previous_amount = record.salesman_amount
    adjustment_amount = new_amount - previous_amount

    try:
        adjustment = await store.create_commission_adjustment(
            commission_record_id=commission_record_id,
            adjusted_by=adjusted_by,
            previous_amount=previous_amount,
            new_amount=new_amount,
            adjustment_amount=adjustment_amount,
            reason=reason.strip(),
            notes=notes,
        )

        record.status = CommissionStatus.ADJUSTED
        record.salesman_amount = new_amount

        if adjustment_amount and not record.is_admin_commission:
            await store.increment_commissions(record.salesperson_id, adjustment_amount)

        await db.commit()
    except Exception:
        await db.rollback()
        raise

    sign = "+" if adjustment_amount > 0 else ""
    logger.info(
        f"Commission adjustment created for record {commission_record_id}: "
        f"{sign}{adjustment_amount} by user {adjusted_by}"
    )
    return adjustment


async def list_adjustments_for_record(
    db: AsyncSession,
    commission_record_id: int,
) -> Sequence[CommissionAdjustment]:
    """
    Adjustment history of a record, oldest first.

    Raises:
        RecordNotFound: if the commission record does not exist
    """
    store = CommissionStore(db)
    if await store.get_commission_record(commission_record_id) is None:
        raise RecordNotFound("Commission record", commission_record_id)
    return await store.get_adjustments_by_record(commission_record_id)
