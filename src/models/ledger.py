"""
Commission ledger models: records, adjustments and payments.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    false,
    func,
)
from sqlalchemy import Enum as SQLAlchemyEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models.base import Base


class CommissionStatus(str, Enum):
    """Lifecycle status of a commission record."""
    PENDING = "pending"
    ADJUSTED = "adjusted"


class CommissionPaymentStatus(str, Enum):
    """Settlement status of a commission record."""
    UNPAID = "unpaid"
    PAID = "paid"


class RecipientType(str, Enum):
    """Which slice of a commission a payment carries."""
    SALESPERSON = "salesperson"
    OVERRIDE = "override"
    CORP = "corp"


class PaymentStatus(str, Enum):
    """Status of a single commission payment row."""
    PENDING = "pending"
    COMPLETED = "completed"


class CommissionRecord(Base):
    """
    Ledger entry created once per monetized bid request.

    salesperson_id is the effective recipient. It holds a salesperson id,
    or an administrator's user id when is_admin_commission is set (the
    lead had no salesperson attribution).

    salesman_amount + override_amount + corp_amount need not equal
    total_commission: the latter mirrors the rate sheet's base cost.
    """

    __tablename__ = "commission_records"

    id: Mapped[int] = mapped_column(primary_key=True)
    bid_request_id: Mapped[int] = mapped_column(
        ForeignKey("bid_requests.id"),
        nullable=False,
        index=True,
    )
    salesperson_id: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        index=True,
    )
    is_admin_commission: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        server_default=false(),
        nullable=False,
        comment="Recipient is an administrator user id, not a salesperson id",
    )
    override_manager_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
    )
    service_category: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Service text as requested, kept for audit",
    )
    total_commission: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
    )
    salesman_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
    )
    override_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
    )
    corp_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
    )
    status: Mapped[CommissionStatus] = mapped_column(
        SQLAlchemyEnum(
            CommissionStatus,
            values_callable=lambda x: [e.value for e in x],
        ),
        default=CommissionStatus.PENDING,
        nullable=False,
        index=True,
    )
    payment_status: Mapped[CommissionPaymentStatus] = mapped_column(
        SQLAlchemyEnum(
            CommissionPaymentStatus,
            values_callable=lambda x: [e.value for e in x],
        ),
        default=CommissionPaymentStatus.UNPAID,
        nullable=False,
        index=True,
    )
    paid_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True,
    )

    adjustments: Mapped[List["CommissionAdjustment"]] = relationship(
        "CommissionAdjustment",
        back_populates="commission_record",
        order_by="CommissionAdjustment.id",
    )

    def __repr__(self) -> str:
        return (
            f"<CommissionRecord(id={self.id}, bid_request_id={self.bid_request_id}, "
            f"salesman_amount={self.salesman_amount})>"
        )


class CommissionAdjustment(Base):
    """
    Append-only audit row for a manual correction of salesman_amount.

    Rows are never updated or deleted.
    """

    __tablename__ = "commission_adjustments"

    id: Mapped[int] = mapped_column(primary_key=True)
    commission_record_id: Mapped[int] = mapped_column(
        ForeignKey("commission_records.id"),
        nullable=False,
        index=True,
    )
    adjusted_by: Mapped[int] = mapped_column(
        ForeignKey("users.id"),
        nullable=False,
    )
    previous_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
    )
    new_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
    )
    adjustment_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        comment="new_amount - previous_amount (signed)",
    )
    reason: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
    )
    notes: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    commission_record: Mapped["CommissionRecord"] = relationship(
        "CommissionRecord",
        back_populates="adjustments",
    )

    def __repr__(self) -> str:
        return (
            f"<CommissionAdjustment(id={self.id}, record={self.commission_record_id}, "
            f"delta={self.adjustment_amount})>"
        )


class CommissionPayment(Base):
    """
    One settled slice of a commission, per recipient.

    commission_record_ids is a list so several records can be batched
    into a single payout; the settler always writes a singleton list.
    """

    __tablename__ = "commission_payments"

    id: Mapped[int] = mapped_column(primary_key=True)
    recipient_id: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        index=True,
    )
    recipient_type: Mapped[RecipientType] = mapped_column(
        SQLAlchemyEnum(
            RecipientType,
            values_callable=lambda x: [e.value for e in x],
        ),
        nullable=False,
    )
    total_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
    )
    commission_record_ids: Mapped[list] = mapped_column(
        JSON,
        nullable=False,
        default=list,
    )
    payment_method: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default="system",
    )
    status: Mapped[PaymentStatus] = mapped_column(
        SQLAlchemyEnum(
            PaymentStatus,
            values_callable=lambda x: [e.value for e in x],
        ),
        default=PaymentStatus.PENDING,
        nullable=False,
    )
    scheduled_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    processed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return (
            f"<CommissionPayment(id={self.id}, recipient={self.recipient_type}:{self.recipient_id}, "
            f"amount={self.total_amount})>"
        )
