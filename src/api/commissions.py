"""
Commission ledger API.

Salespeople read their own numbers; administrators read everything,
adjust records, process payments and maintain the rate sheet.
"""

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth.dependencies import (
    ensure_salesperson_access,
    get_current_user,
    get_own_salesperson,
    require_admin,
    require_salesperson_or_admin,
)
from src.db import get_db
from src.models import (
    AuditAction,
    CommissionPaymentStatus,
    CommissionStatus,
    RecipientType,
    User,
    UserRole,
)
from src.schemas.commission import (
    CommissionAdjustmentCreate,
    CommissionAdjustmentResponse,
    CommissionAnalyticsResponse,
    CommissionPaymentResponse,
    CommissionRecordListResponse,
    RateUpdateRequest,
    SalespersonCommissionSummary,
    ServiceRateResponse,
    TopEarnerResponse,
)
from src.services import commission_analytics, commission_payments, rate_sheet
from src.services.commission_adjustments import (
    create_commission_adjustment,
    list_adjustments_for_record,
)
from src.services.exceptions import CommissionValidationError, RecordNotFound
from src.utils.audit import get_client_ip, log_action

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/commissions", tags=["Commissions"])


def _check_window(start_date: Optional[datetime], end_date: Optional[datetime]) -> None:
    if start_date and end_date and start_date >= end_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="start_date must be before end_date",
        )


@router.get("/salesperson/{salesperson_id}", response_model=SalespersonCommissionSummary)
async def get_salesperson_commissions(
    salesperson_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_salesperson_or_admin),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
):
    """Earned, pending and paid totals for one salesperson."""
    await ensure_salesperson_access(db, current_user, salesperson_id)
    _check_window(start_date, end_date)
    return await commission_analytics.get_salesperson_commission_summary(
        db, salesperson_id, start_date, end_date
    )


@router.get("/analytics", response_model=CommissionAnalyticsResponse)
async def get_analytics(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
):
    _check_window(start_date, end_date)
    return await commission_analytics.get_commission_analytics(db, start_date, end_date)


@router.get("/top-earners", response_model=List[TopEarnerResponse])
async def get_top_earners(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
    limit: int = Query(10, ge=1, le=100),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
):
    _check_window(start_date, end_date)
    return await commission_analytics.get_top_earners(db, limit, start_date, end_date)


@router.get("/records", response_model=CommissionRecordListResponse)
async def list_records(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_salesperson_or_admin),
    salesperson_id: Optional[int] = Query(None),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    record_status: Optional[CommissionStatus] = Query(None, alias="status"),
    payment_status: Optional[CommissionPaymentStatus] = Query(None),
):
    """
    Commission records, newest first.

    Salespeople always get their own records regardless of the
    salesperson_id filter.
    """
    if current_user.role != UserRole.ADMIN:
        own = await get_own_salesperson(db, current_user)
        if own is None:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
        salesperson_id = own.id

    _check_window(start_date, end_date)
    records = await commission_analytics.list_commission_records(
        db,
        salesperson_id=salesperson_id,
        start_date=start_date,
        end_date=end_date,
        status=record_status.value if record_status else None,
        payment_status=payment_status.value if payment_status else None,
    )
    return CommissionRecordListResponse(records=records)


@router.post(
    "/adjustments",
    response_model=CommissionAdjustmentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def adjust_commission(
    data: CommissionAdjustmentCreate,
    request: Request,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """Correct a record's salesperson amount."""
    try:
        adjustment = await create_commission_adjustment(
            db,
            commission_record_id=data.commission_record_id,
            adjusted_by=current_user.id,
            new_amount=data.new_amount,
            reason=data.reason,
            notes=data.notes,
        )
    except RecordNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except CommissionValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    await db.refresh(adjustment)
    await log_action(
        db=db,
        user_id=current_user.id,
        action=AuditAction.ADJUST_COMMISSION,
        target_type="commission_record",
        target_id=data.commission_record_id,
        action_metadata={
            "previous_amount": str(adjustment.previous_amount),
            "new_amount": str(adjustment.new_amount),
            "reason": adjustment.reason,
        },
        ip_address=get_client_ip(request),
    )
    await db.commit()
    return CommissionAdjustmentResponse.model_validate(adjustment)


@router.get("/adjustments/{record_id}", response_model=List[CommissionAdjustmentResponse])
async def get_adjustments(
    record_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    try:
        adjustments = await list_adjustments_for_record(db, record_id)
    except RecordNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return [CommissionAdjustmentResponse.model_validate(a) for a in adjustments]


@router.get("/payments/{user_id}", response_model=List[CommissionPaymentResponse])
async def get_payments(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_salesperson_or_admin),
):
    """
    Payments addressed to a recipient id.

    Salespeople may only query their own salesperson id and never see
    corporate-share rows.
    """
    await ensure_salesperson_access(db, current_user, user_id)
    payments = await commission_payments.list_payments_for_recipient(db, user_id)
    if current_user.role != UserRole.ADMIN:
        payments = [p for p in payments if p.recipient_type != RecipientType.CORP]
    return [CommissionPaymentResponse.model_validate(p) for p in payments]


@router.post("/payments/{payment_id}/process", response_model=CommissionPaymentResponse)
async def process_payment(
    payment_id: int,
    request: Request,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    try:
        payment = await commission_payments.process_payment(db, payment_id)
    except RecordNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    await log_action(
        db=db,
        user_id=current_user.id,
        action=AuditAction.PROCESS_PAYMENT,
        target_type="commission_payment",
        target_id=payment_id,
        ip_address=get_client_ip(request),
    )
    await db.commit()
    return CommissionPaymentResponse.model_validate(payment)


@router.get("/rates", response_model=List[ServiceRateResponse])
async def get_rates(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Rate sheet, by service name."""
    categories = await rate_sheet.list_service_rates(db)
    return [ServiceRateResponse.model_validate(c) for c in categories]


@router.put("/rates", response_model=ServiceRateResponse)
async def update_rates(
    data: RateUpdateRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """
    Replace a service's commission amounts.

    Only commissions created afterwards use the new amounts.
    """
    try:
        category = await rate_sheet.update_service_rates(
            db,
            service_id=data.service_id,
            base_cost=data.base_cost,
            salesman_commission=data.salesman_commission,
            override_commission=data.override_commission,
            corp_commission=data.corp_commission,
        )
    except RecordNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except CommissionValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    await log_action(
        db=db,
        user_id=current_user.id,
        action=AuditAction.UPDATE_RATES,
        target_type="service_category",
        target_id=data.service_id,
        action_metadata={
            "base_cost": str(data.base_cost),
            "salesman_commission": str(data.salesman_commission),
            "override_commission": str(data.override_commission),
            "corp_commission": str(data.corp_commission),
        },
        ip_address=get_client_ip(request),
    )
    await db.commit()
    return ServiceRateResponse.model_validate(category)
