"""Bid request schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from src.models.bid_request import BidRequestStatus


class BidRequestCreate(BaseModel):
    """Public intake form."""

    full_name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = Field(None, max_length=500)
    service_requested: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    budget: Optional[Decimal] = Field(None, ge=0)

    # Referral attribution: either the salesperson id or their profile slug
    salesperson_id: Optional[int] = Field(None, gt=0)
    salesperson_profile_url: Optional[str] = Field(None, max_length=255)

    @field_validator("service_requested")
    @classmethod
    def service_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("service_requested must not be blank")
        return v.strip()


class BidRequestResponse(BaseModel):
    """Bid request as stored."""

    id: int
    full_name: str
    email: str
    phone: Optional[str]
    address: Optional[str]
    service_requested: str
    description: Optional[str]
    budget: Optional[Decimal]
    status: BidRequestStatus
    salesperson_id: Optional[int]
    contractor_id: Optional[int]
    created_at: datetime

    model_config = {"from_attributes": True}


class BidRequestCreated(BaseModel):
    """Intake result with the commission booked for it, if any."""

    bid_request: BidRequestResponse
    commission_record_id: Optional[int] = None


class BidRequestStatusUpdate(BaseModel):
    """Move a bid request through the pipeline."""

    status: BidRequestStatus
