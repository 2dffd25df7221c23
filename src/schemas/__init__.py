"""Pydantic schemas for request/response validation."""

from src.schemas.auth import LoginRequest, LoginResponse
from src.schemas.bid_request import (
    BidRequestCreate,
    BidRequestCreated,
    BidRequestResponse,
    BidRequestStatusUpdate,
)
from src.schemas.commission import (
    CommissionAdjustmentCreate,
    CommissionAdjustmentResponse,
    CommissionAnalyticsResponse,
    CommissionPaymentResponse,
    CommissionRecordListItem,
    CommissionRecordListResponse,
    CommissionRecordResponse,
    RateUpdateRequest,
    SalespersonCommissionSummary,
    ServiceRateResponse,
    TopEarnerResponse,
)

__all__ = [
    # Auth
    "LoginRequest",
    "LoginResponse",
    # Bid requests
    "BidRequestCreate",
    "BidRequestCreated",
    "BidRequestResponse",
    "BidRequestStatusUpdate",
    # Rate sheet
    "ServiceRateResponse",
    "RateUpdateRequest",
    # Ledger
    "CommissionRecordResponse",
    "CommissionRecordListItem",
    "CommissionRecordListResponse",
    "CommissionAdjustmentCreate",
    "CommissionAdjustmentResponse",
    "CommissionPaymentResponse",
    # Analytics
    "SalespersonCommissionSummary",
    "TopEarnerResponse",
    "CommissionAnalyticsResponse",
]
