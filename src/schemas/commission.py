"""Commission ledger, rate sheet and analytics schemas."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from src.models.ledger import (
    CommissionPaymentStatus,
    CommissionStatus,
    PaymentStatus,
    RecipientType,
)


# ── Rate sheet ────────────────────────────────────────────


class ServiceRateResponse(BaseModel):
    """One rate sheet row."""

    id: int
    service: str = Field(validation_alias="name")
    base_cost: Decimal
    salesman_commission: Decimal
    override_commission: Decimal
    corp_commission: Decimal
    is_active: bool

    model_config = {"from_attributes": True, "populate_by_name": True}


class RateUpdateRequest(BaseModel):
    """Replace the four amounts of a rate sheet row."""

    service_id: int
    base_cost: Decimal = Field(..., ge=0)
    salesman_commission: Decimal = Field(..., ge=0)
    override_commission: Decimal = Field(..., ge=0)
    corp_commission: Decimal = Field(..., ge=0)


# ── Ledger ────────────────────────────────────────────────


class CommissionRecordResponse(BaseModel):
    """Commission record as stored."""

    id: int
    bid_request_id: int
    salesperson_id: int
    is_admin_commission: bool
    override_manager_id: Optional[int]
    service_category: str
    total_commission: Decimal
    salesman_amount: Decimal
    override_amount: Decimal
    corp_amount: Decimal
    status: CommissionStatus
    payment_status: CommissionPaymentStatus
    paid_at: Optional[datetime]
    created_at: datetime

    model_config = {"from_attributes": True}


class BidRequestDetails(BaseModel):
    """Homeowner details shown next to a commission record."""

    full_name: str
    email: str
    service_requested: str


class CommissionRecordListItem(CommissionRecordResponse):
    """Commission record enriched for the admin list."""

    salesperson_name: str = "Unknown"
    bid_request_details: Optional[BidRequestDetails] = None


class CommissionRecordListResponse(BaseModel):
    records: List[CommissionRecordListItem]


class CommissionAdjustmentCreate(BaseModel):
    """Manual adjustment of a record's salesperson amount."""

    commission_record_id: int
    new_amount: Decimal = Field(..., ge=0)
    reason: str = Field(..., min_length=1, max_length=500)
    notes: Optional[str] = Field(None, max_length=2000)

    @field_validator("reason")
    @classmethod
    def reason_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("reason must not be blank")
        return v.strip()


class CommissionAdjustmentResponse(BaseModel):
    """Appended adjustment row."""

    id: int
    commission_record_id: int
    adjusted_by: int
    previous_amount: Decimal
    new_amount: Decimal
    adjustment_amount: Decimal
    reason: str
    notes: Optional[str]
    created_at: datetime

    model_config = {"from_attributes": True}


class CommissionPaymentResponse(BaseModel):
    """Settled slice of a commission."""

    id: int
    recipient_id: int
    recipient_type: RecipientType
    total_amount: Decimal
    commission_record_ids: List[int]
    payment_method: str
    status: PaymentStatus
    scheduled_date: datetime
    processed_at: Optional[datetime]

    model_config = {"from_attributes": True}


# ── Analytics ─────────────────────────────────────────────


class SalespersonCommissionSummary(BaseModel):
    """Per-salesperson totals plus recent records."""

    salesperson_id: int
    total_earned: Decimal = Decimal("0.00")
    pending_commissions: Decimal = Decimal("0.00")
    paid_commissions: Decimal = Decimal("0.00")
    total_records: int = 0
    recent_commissions: List[CommissionRecordResponse] = Field(default_factory=list)


class TopEarnerResponse(BaseModel):
    """One row of the top earners leaderboard."""

    salesperson_id: int
    is_admin_commission: bool = False
    name: str
    total_earned: Decimal
    commission_count: int


class CommissionAnalyticsResponse(BaseModel):
    """Global commission totals."""

    total_commissions: Decimal = Decimal("0.00")
    salesman_total: Decimal = Decimal("0.00")
    override_total: Decimal = Decimal("0.00")
    corp_total: Decimal = Decimal("0.00")
    total_records: int = 0
    top_earners: List[TopEarnerResponse] = Field(default_factory=list)
