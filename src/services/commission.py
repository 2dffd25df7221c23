"""
Commission engine: bid request -> rate sheet match -> commission record.

Rules:
- Amounts are copied 1:1 from the matched service category
- No salesperson attribution: commission goes to the default admin
  recipient and no salesperson total is touched
- Every commission is settled immediately after creation

Creation is best-effort: failures are logged and never reach the
bid request workflow that triggered them.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from src.models import (
    BidRequest,
    CommissionPaymentStatus,
    CommissionRecord,
    CommissionStatus,
    ServiceCategory,
)
from src.services.commission_payments import settle_commission_record
from src.services.commission_store import CommissionStore
from src.services.exceptions import NoEligibleRecipient, NoMatchingRate
from src.services.service_matcher import match_service_category

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


@dataclass(frozen=True)
class CommissionAmounts:
    total_commission: Decimal
    salesman_amount: Decimal
    override_amount: Decimal
    corp_amount: Decimal


@dataclass(frozen=True)
class CommissionRecipient:
    recipient_id: int
    is_admin_commission: bool


def calculate_commission_amounts(category: ServiceCategory) -> CommissionAmounts:
    """Copy the four rate sheet amounts; missing values count as zero."""
    return CommissionAmounts(
        total_commission=category.base_cost or ZERO,
        salesman_amount=category.salesman_commission or ZERO,
        override_amount=category.override_commission or ZERO,
        corp_amount=category.corp_commission or ZERO,
    )


async def resolve_service_category(
    store: CommissionStore,
    service_requested: str,
) -> ServiceCategory:
    """
    Match requested service text against the active rate sheet.

    Raises:
        NoMatchingRate: if no matching strategy finds a category
    """
    categories = await store.get_active_service_categories()
    category = match_service_category(service_requested, categories)
    if category is None:
        logger.warning(
            f"No commission rates found for service '{service_requested}'. "
            f"Available categories: {', '.join(c.name for c in categories)}"
        )
        raise NoMatchingRate(service_requested)

    logger.info(f"Matched service '{service_requested}' to category '{category.name}'")
    return category


async def resolve_recipient(
    store: CommissionStore,
    salesperson_id: Optional[int],
) -> CommissionRecipient:
    """
    Decide who earns the salesperson share.

    Raises:
        NoEligibleRecipient: unknown or inactive salesperson, or no
            salesperson given and no admin available
    """
    if salesperson_id:
        salesperson = await store.get_salesperson(salesperson_id)
        if salesperson is None or not salesperson.is_active:
            raise NoEligibleRecipient(f"Salesperson {salesperson_id} not found or inactive")
        return CommissionRecipient(salesperson_id, is_admin_commission=False)

    admin = await store.get_default_recipient()
    if admin is None:
        raise NoEligibleRecipient("No salesperson attribution and no administrator available")

    logger.info(f"No salesperson reference - assigning commission to admin (id={admin.id})")
    return CommissionRecipient(admin.id, is_admin_commission=True)


async def resolve_override_manager(
    store: CommissionStore,
    override_manager_id: Optional[int],
) -> Optional[int]:
    """Override manager id if it names an active user, else None."""
    if not override_manager_id:
        return None

    manager = await store.get_user(override_manager_id)
    if manager is None or not manager.is_active:
        logger.warning(f"Override manager {override_manager_id} not found or inactive - override share not paid")
        return None
    return manager.id


async def create_commission_for_bid_request(
    db: AsyncSession,
    bid_request: BidRequest,
    salesperson_id: Optional[int],
    override_manager_id: Optional[int] = None,
) -> Optional[CommissionRecord]:
    """
    Create, book and settle the commission for a bid request.

    Record creation, the salesperson total update and the payment
    fan-out commit together; on any failure all three are rolled back.
    The caller must commit its own pending work (the bid request)
    before calling, and must call at most once per bid request: a
    second call creates a second record.

    Args:
        db: Database session
        bid_request: The bid request that earned the commission
        salesperson_id: Attributed salesperson, or None for unattributed leads
        override_manager_id: Optional override manager earning a slice;
            ignored unless it names an active user

    Returns:
        The settled CommissionRecord, or None if nothing was created
    """
    # Captured up front: a rollback expires the instance
    bid_request_id = bid_request.id
    service_requested = bid_request.service_requested
    store = CommissionStore(db)

    try:
        category = await resolve_service_category(store, service_requested)
        recipient = await resolve_recipient(store, salesperson_id)
        override_manager_id = await resolve_override_manager(store, override_manager_id)
        amounts = calculate_commission_amounts(category)

        record = await store.create_commission_record(
            bid_request_id=bid_request_id,
            salesperson_id=recipient.recipient_id,
            is_admin_commission=recipient.is_admin_commission,
            override_manager_id=override_manager_id,
            service_category=service_requested,
            total_commission=amounts.total_commission,
            salesman_amount=amounts.salesman_amount,
            override_amount=amounts.override_amount,
            corp_amount=amounts.corp_amount,
            status=CommissionStatus.PENDING,
            payment_status=CommissionPaymentStatus.UNPAID,
        )

        if recipient.is_admin_commission:
            logger.info(
                f"Admin commission earned: {amounts.salesman_amount} "
                f"from unattributed bid request {bid_request_id}"
            )
        else:
            updated = await store.increment_commissions(
                recipient.recipient_id, amounts.salesman_amount
            )
            if not updated:
                raise NoEligibleRecipient(f"Salesperson {recipient.recipient_id} not found")

        await settle_commission_record(store, record)
        await db.commit()

    except NoMatchingRate:
        return None
    except NoEligibleRecipient:
        await db.rollback()
        logger.warning(
            f"No valid recipient for bid request {bid_request_id} - skipping commission creation"
        )
        return None
    except Exception:
        await db.rollback()
        logger.exception(f"Error creating commission for bid request {bid_request_id}")
        return None

    logger.info(
        f"Commission created for bid request {bid_request_id}: "
        f"{amounts.salesman_amount} to recipient {recipient.recipient_id}"
    )
    return record
