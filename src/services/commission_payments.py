"""
Commission payment settlement.

A commission record fans out into one payment row per recipient:
- salesperson (always)
- override manager (when set and the override share is positive)
- corporate share to the default admin recipient (when positive)

Settling marks ledger rows only; no money moves.
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from src.config import settings
from src.models import (
    CommissionPayment,
    CommissionPaymentStatus,
    CommissionRecord,
    PaymentStatus,
    RecipientType,
)
from src.services.commission_store import CommissionStore
from src.services.exceptions import RecordNotFound

logger = logging.getLogger(__name__)


async def build_payment_recipients(
    store: CommissionStore,
    record: CommissionRecord,
) -> list[tuple[int, RecipientType, Decimal]]:
    """
    List (recipient_id, recipient_type, amount) entries for a record.
    """
    recipients = [
        (record.salesperson_id, RecipientType.SALESPERSON, record.salesman_amount),
    ]

    if record.override_manager_id and record.override_amount > 0:
        recipients.append(
            (record.override_manager_id, RecipientType.OVERRIDE, record.override_amount)
        )

    if record.corp_amount > 0:
        corp_recipient = await store.get_default_recipient()
        if corp_recipient is not None:
            recipients.append((corp_recipient.id, RecipientType.CORP, record.corp_amount))
        else:
            logger.warning(f"No admin for corp share of commission record {record.id}")

    return recipients


async def settle_commission_record(
    store: CommissionStore,
    record: CommissionRecord,
) -> List[CommissionPayment]:
    """
    Mark a record paid and create its completed payment rows.

    Flushes only; the caller owns the transaction.
    """
    now = datetime.now(timezone.utc)
    record.payment_status = CommissionPaymentStatus.PAID
    record.paid_at = now

    payments = []
    for recipient_id, recipient_type, amount in await build_payment_recipients(store, record):
        payment = await store.create_commission_payment(
            recipient_id=recipient_id,
            recipient_type=recipient_type,
            total_amount=amount,
            commission_record_ids=[record.id],
            payment_method=settings.commission_payment_method,
            status=PaymentStatus.COMPLETED,
            scheduled_date=now,
            processed_at=now,
        )
        payments.append(payment)

    logger.info(
        f"Commission payment processed for record {record.id}: {len(payments)} payment(s)"
    )
    return payments


async def process_commission_payment(
    db: AsyncSession,
    commission_record_id: int,
) -> List[CommissionPayment]:
    """
    Settle a single commission record in its own transaction.

    Missing or already paid records are a no-op. Errors are logged and
    rolled back, never raised.

    Returns:
        Payment rows created (empty on no-op or failure)
    """
    store = CommissionStore(db)
    try:
        record = await store.get_commission_record(commission_record_id)
        if record is None:
            logger.debug(f"Commission record {commission_record_id} not found, nothing to settle")
            return []
        if record.payment_status == CommissionPaymentStatus.PAID:
            logger.debug(f"Commission record {commission_record_id} already paid")
            return []

        payments = await settle_commission_record(store, record)
        await db.commit()
        return payments
    except Exception:
        await db.rollback()
        logger.exception(f"Error processing commission payment for record {commission_record_id}")
        return []


async def settle_unpaid_commissions(db: AsyncSession, limit: int = 50) -> int:
    """
    Settle commission records left unpaid.

    Called periodically by the scheduler.

    Returns:
        Number of records settled
    """
    store = CommissionStore(db)
    record_ids = [record.id for record in await store.get_unpaid_commission_records(limit)]

    settled = 0
    for record_id in record_ids:
        if await process_commission_payment(db, record_id):
            settled += 1

    if settled:
        logger.info(f"Settled {settled} unpaid commission records")
    return settled


async def process_payment(db: AsyncSession, payment_id: int) -> CommissionPayment:
    """
    Mark a payment row completed (manual admin transition).

    Raises:
        RecordNotFound: if the payment does not exist
    """
    store = CommissionStore(db)
    payment = await store.get_commission_payment(payment_id)
    if payment is None:
        raise RecordNotFound("Commission payment", payment_id)

    payment.status = PaymentStatus.COMPLETED
    if payment.processed_at is None:
        payment.processed_at = datetime.now(timezone.utc)
    await db.commit()

    logger.info(f"Commission payment {payment_id} marked completed")
    return payment


async def list_payments_for_recipient(
    db: AsyncSession,
    recipient_id: int,
) -> Sequence[CommissionPayment]:
    """All payments for a recipient id, newest first."""
    return await CommissionStore(db).get_payments_by_recipient(recipient_id)
