"""
ServiceCategory model: the admin-curated commission rate sheet.
"""

from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, CheckConstraint, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, TimestampMixin


class ServiceCategory(Base, TimestampMixin):
    """
    One row of the rate sheet.

    The four monetary fields are flat amounts, not percentages:
    base_cost is the audit total, the other three are the splits.
    """

    __tablename__ = "service_categories"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(
        String(200),
        unique=True,
        nullable=False,
        index=True,
    )
    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    base_cost: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        default=Decimal("0"),
        nullable=False,
    )
    salesman_commission: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        default=Decimal("0"),
        nullable=False,
    )
    override_commission: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        default=Decimal("0"),
        nullable=False,
    )
    corp_commission: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        default=Decimal("0"),
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    __table_args__ = (
        CheckConstraint("base_cost >= 0", name="ck_service_categories_base_cost"),
        CheckConstraint("salesman_commission >= 0", name="ck_service_categories_salesman"),
        CheckConstraint("override_commission >= 0", name="ck_service_categories_override"),
        CheckConstraint("corp_commission >= 0", name="ck_service_categories_corp"),
    )

    def __repr__(self) -> str:
        return f"<ServiceCategory(id={self.id}, name='{self.name}', base_cost={self.base_cost})>"
