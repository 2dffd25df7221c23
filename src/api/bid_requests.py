"""
Bid request intake and pipeline endpoints.

Intake is public. Each new bid request gets exactly one commission
attempt, made after the request itself is committed.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth.dependencies import require_admin
from src.db import get_db
from src.models import AuditAction, BidRequest, Salesperson, User
from src.schemas.bid_request import (
    BidRequestCreate,
    BidRequestCreated,
    BidRequestResponse,
    BidRequestStatusUpdate,
)
from src.services.commission import create_commission_for_bid_request
from src.services.commission_store import CommissionStore
from src.utils.audit import get_client_ip, log_action

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bid-requests", tags=["Bid Requests"])


async def resolve_attribution(
    store: CommissionStore,
    data: BidRequestCreate,
) -> Optional[Salesperson]:
    """Active salesperson referenced by id or profile slug, if any."""
    if data.salesperson_id:
        salesperson = await store.get_salesperson(data.salesperson_id)
        if salesperson and salesperson.is_active:
            return salesperson
        logger.warning(f"Unknown or inactive salesperson {data.salesperson_id} on bid request")
        return None

    if data.salesperson_profile_url:
        salesperson = await store.get_salesperson_by_profile_url(data.salesperson_profile_url)
        if salesperson is None:
            logger.warning(f"Unknown salesperson profile '{data.salesperson_profile_url}' on bid request")
        return salesperson

    return None


@router.post("", response_model=BidRequestCreated, status_code=status.HTTP_201_CREATED)
async def create_bid_request(
    data: BidRequestCreate,
    db: AsyncSession = Depends(get_db),
):
    """Take in a homeowner request and book its commission."""
    store = CommissionStore(db)
    salesperson = await resolve_attribution(store, data)
    salesperson_id = salesperson.id if salesperson else None

    bid_request = BidRequest(
        full_name=data.full_name,
        email=data.email,
        phone=data.phone,
        address=data.address,
        service_requested=data.service_requested,
        description=data.description,
        budget=data.budget,
        salesperson_id=salesperson_id,
    )
    db.add(bid_request)

    if salesperson is not None:
        salesperson.total_leads = Salesperson.total_leads + 1

    await db.commit()
    await db.refresh(bid_request)
    logger.info(f"Bid request {bid_request.id} received for '{bid_request.service_requested}'")

    record = await create_commission_for_bid_request(db, bid_request, salesperson_id)

    await db.refresh(bid_request)
    return BidRequestCreated(
        bid_request=BidRequestResponse.model_validate(bid_request),
        commission_record_id=record.id if record else None,
    )


@router.get("/{bid_request_id}", response_model=BidRequestResponse)
async def get_bid_request(
    bid_request_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    bid_request = await db.get(BidRequest, bid_request_id)
    if not bid_request:
        raise HTTPException(status_code=404, detail="Bid request not found")
    return BidRequestResponse.model_validate(bid_request)


@router.patch("/{bid_request_id}/status", response_model=BidRequestResponse)
async def update_bid_request_status(
    bid_request_id: int,
    data: BidRequestStatusUpdate,
    request: Request,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """
    Move a bid request through the pipeline.

    Status changes never create or touch commission records.
    """
    bid_request = await db.get(BidRequest, bid_request_id)
    if not bid_request:
        raise HTTPException(status_code=404, detail="Bid request not found")

    old_status = bid_request.status
    bid_request.status = data.status

    await log_action(
        db=db,
        user_id=current_user.id,
        action=AuditAction.UPDATE_BID_REQUEST,
        target_type="bid_request",
        target_id=bid_request_id,
        action_metadata={"old_status": old_status.value, "new_status": data.status.value},
        ip_address=get_client_ip(request),
    )

    await db.commit()
    await db.refresh(bid_request)
    return BidRequestResponse.model_validate(bid_request)
