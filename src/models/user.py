"""
User and salesperson models for authentication and attribution.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy import Enum as SQLAlchemyEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from src.models.audit import AuditLog


class UserRole(str, Enum):
    """User roles for access control."""
    HOMEOWNER = "homeowner"
    CONTRACTOR = "contractor"
    SALESPERSON = "salesperson"
    ADMIN = "admin"


class User(Base, TimestampMixin):
    """
    User account model.

    - admin: rate sheet, analytics, adjustments; receives unattributed
      commissions and the corporate share
    - salesperson: sees own commission summary and payments
    - homeowner / contractor: no access to commission data
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    username: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        index=True,
        nullable=False,
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
    )
    full_name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
    )
    phone: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
    )
    role: Mapped[UserRole] = mapped_column(
        SQLAlchemyEnum(
            UserRole,
            values_callable=lambda x: [e.value for e in x],
        ),
        nullable=False,
        default=UserRole.HOMEOWNER,
        index=True,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )
    last_active_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    # Relationships
    salesperson: Mapped[Optional["Salesperson"]] = relationship(
        "Salesperson",
        back_populates="user",
        uselist=False,
    )
    audit_logs: Mapped[List["AuditLog"]] = relationship(
        "AuditLog",
        back_populates="user",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}', role={self.role})>"


class Salesperson(Base, TimestampMixin):
    """
    Sales representative profile.

    `commissions` is the cumulative running total of earned salesperson
    shares. It is only ever changed through a single
    ``commissions = commissions + delta`` statement
    (see CommissionStore.increment_commissions).
    """

    __tablename__ = "salespersons"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"),
        nullable=False,
        unique=True,
        index=True,
    )
    profile_url: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )
    total_leads: Mapped[int] = mapped_column(
        Integer,
        default=0,
        server_default="0",
        nullable=False,
    )
    commissions: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        default=Decimal("0"),
        server_default="0",
        nullable=False,
        comment="Cumulative salesperson commission total",
    )

    user: Mapped["User"] = relationship(
        "User",
        back_populates="salesperson",
    )

    def __repr__(self) -> str:
        return f"<Salesperson(id={self.id}, user_id={self.user_id}, commissions={self.commissions})>"
