"""
Database models.

All models are exported here for convenient imports:
    from src.models import User, CommissionRecord, ServiceCategory, etc.
"""

from src.models.audit import AuditAction, AuditLog
from src.models.base import Base, TimestampMixin
from src.models.bid_request import BidRequest, BidRequestStatus
from src.models.ledger import (
    CommissionAdjustment,
    CommissionPayment,
    CommissionPaymentStatus,
    CommissionRecord,
    CommissionStatus,
    PaymentStatus,
    RecipientType,
)
from src.models.service_category import ServiceCategory
from src.models.user import Salesperson, User, UserRole

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    # User
    "User",
    "UserRole",
    "Salesperson",
    # Rate sheet
    "ServiceCategory",
    # Bid requests
    "BidRequest",
    "BidRequestStatus",
    # Ledger
    "CommissionRecord",
    "CommissionStatus",
    "CommissionPaymentStatus",
    "CommissionAdjustment",
    "CommissionPayment",
    "RecipientType",
    "PaymentStatus",
    # Audit
    "AuditLog",
    "AuditAction",
]
