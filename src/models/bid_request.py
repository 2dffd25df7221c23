"""
BidRequest model: a homeowner's service inquiry.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional

from sqlalchemy import ForeignKey, Integer, Numeric, String, Text
from sqlalchemy import Enum as SQLAlchemyEnum
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, TimestampMixin


class BidRequestStatus(str, Enum):
    """Status of a bid request in the sales pipeline."""
    PENDING = "pending"
    CONTACTED = "contacted"
    BID_SENT = "bid_sent"
    WON = "won"
    LOST = "lost"
    DELETED = "deleted"


class BidRequest(Base, TimestampMixin):
    """
    A homeowner's service inquiry, optionally attributed to a salesperson.

    Commission is created once per bid request at intake. Nothing in the
    schema prevents a second commission record for the same request;
    the intake endpoint is the only caller of the commission engine.
    """

    __tablename__ = "bid_requests"

    id: Mapped[int] = mapped_column(primary_key=True)
    full_name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
    )
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    phone: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
    )
    address: Mapped[Optional[str]] = mapped_column(
        String(500),
        nullable=True,
    )
    service_requested: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    budget: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(12, 2),
        nullable=True,
    )
    status: Mapped[BidRequestStatus] = mapped_column(
        SQLAlchemyEnum(
            BidRequestStatus,
            values_callable=lambda x: [e.value for e in x],
        ),
        default=BidRequestStatus.PENDING,
        nullable=False,
        index=True,
    )
    salesperson_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("salespersons.id"),
        nullable=True,
        index=True,
    )
    contractor_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        comment="Contractor the request is routed to",
    )

    def __repr__(self) -> str:
        return f"<BidRequest(id={self.id}, service='{self.service_requested}', status={self.status})>"
