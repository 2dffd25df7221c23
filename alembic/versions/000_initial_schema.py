"""Initial commission schema

Revision ID: 000_initial_schema
Revises:
Create Date: 2026-10-19

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "000_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create users, rate sheet, bid requests and the commission ledger."""

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), unique=True, nullable=False),
        sa.Column("full_name", sa.String(200), nullable=False),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column(
            "role",
            sa.Enum("homeowner", "contractor", "salesperson", "admin", name="userrole"),
            nullable=False,
        ),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("last_active_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)
    op.create_index("ix_users_role", "users", ["role"])

    op.create_table(
        "salespersons",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("profile_url", sa.String(255), unique=True, nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("total_leads", sa.Integer(), server_default="0", nullable=False),
        sa.Column(
            "commissions",
            sa.Numeric(12, 2),
            server_default="0",
            nullable=False,
            comment="Cumulative salesperson commission total",
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_salespersons_user_id", "salespersons", ["user_id"], unique=True)

    op.create_table(
        "service_categories",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("base_cost", sa.Numeric(12, 2), nullable=False),
        sa.Column("salesman_commission", sa.Numeric(12, 2), nullable=False),
        sa.Column("override_commission", sa.Numeric(12, 2), nullable=False),
        sa.Column("corp_commission", sa.Numeric(12, 2), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("base_cost >= 0", name="ck_service_categories_base_cost"),
        sa.CheckConstraint("salesman_commission >= 0", name="ck_service_categories_salesman"),
        sa.CheckConstraint("override_commission >= 0", name="ck_service_categories_override"),
        sa.CheckConstraint("corp_commission >= 0", name="ck_service_categories_corp"),
    )
    op.create_index("ix_service_categories_name", "service_categories", ["name"], unique=True)

    op.create_table(
        "bid_requests",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("full_name", sa.String(200), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("address", sa.String(500), nullable=True),
        sa.Column("service_requested", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("budget", sa.Numeric(12, 2), nullable=True),
        sa.Column(
            "status",
            sa.Enum(
                "pending", "contacted", "bid_sent", "won", "lost", "deleted",
                name="bidrequeststatus",
            ),
            nullable=False,
        ),
        sa.Column("salesperson_id", sa.Integer(), sa.ForeignKey("salespersons.id"), nullable=True),
        sa.Column("contractor_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_bid_requests_status", "bid_requests", ["status"])
    op.create_index("ix_bid_requests_salesperson_id", "bid_requests", ["salesperson_id"])

    op.create_table(
        "commission_records",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("bid_request_id", sa.Integer(), sa.ForeignKey("bid_requests.id"), nullable=False),
        sa.Column("salesperson_id", sa.Integer(), nullable=False),
        sa.Column("is_admin_commission", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("override_manager_id", sa.Integer(), nullable=True),
        sa.Column("service_category", sa.String(255), nullable=False),
        sa.Column("total_commission", sa.Numeric(12, 2), nullable=False),
        sa.Column("salesman_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("override_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("corp_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column(
            "status",
            sa.Enum("pending", "adjusted", name="commissionstatus"),
            nullable=False,
        ),
        sa.Column(
            "payment_status",
            sa.Enum("unpaid", "paid", name="commissionpaymentstatus"),
            nullable=False,
        ),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_commission_records_bid_request_id", "commission_records", ["bid_request_id"])
    op.create_index("ix_commission_records_salesperson_id", "commission_records", ["salesperson_id"])
    op.create_index("ix_commission_records_status", "commission_records", ["status"])
    op.create_index("ix_commission_records_payment_status", "commission_records", ["payment_status"])
    op.create_index("ix_commission_records_created_at", "commission_records", ["created_at"])

    op.create_table(
        "commission_adjustments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "commission_record_id",
            sa.Integer(),
            sa.ForeignKey("commission_records.id"),
            nullable=False,
        ),
        sa.Column("adjusted_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("previous_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("new_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("adjustment_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("reason", sa.String(500), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index(
        "ix_commission_adjustments_commission_record_id",
        "commission_adjustments",
        ["commission_record_id"],
    )

    op.create_table(
        "commission_payments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("recipient_id", sa.Integer(), nullable=False),
        sa.Column(
            "recipient_type",
            sa.Enum("salesperson", "override", "corp", name="recipienttype"),
            nullable=False,
        ),
        sa.Column("total_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("commission_record_ids", sa.JSON(), nullable=False),
        sa.Column("payment_method", sa.String(50), nullable=False),
        sa.Column(
            "status",
            sa.Enum("pending", "completed", name="paymentstatus"),
            nullable=False,
        ),
        sa.Column("scheduled_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("processed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_commission_payments_recipient_id", "commission_payments", ["recipient_id"])

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column(
            "action",
            sa.Enum(
                "login", "logout", "update_bid_request", "adjust_commission",
                "process_payment", "update_rates",
                name="auditaction",
            ),
            nullable=False,
        ),
        sa.Column("target_type", sa.String(50), nullable=True),
        sa.Column("target_id", sa.Integer(), nullable=True),
        sa.Column("action_metadata", sa.JSON(), nullable=True),
        sa.Column("ip_address", sa.String(45), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_audit_logs_user_id", "audit_logs", ["user_id"])
    op.create_index("ix_audit_logs_action", "audit_logs", ["action"])
    op.create_index("ix_audit_logs_created_at", "audit_logs", ["created_at"])


def downgrade() -> None:
    """Drop all tables and enum types."""
    op.drop_table("audit_logs")
    op.drop_table("commission_payments")
    op.drop_table("commission_adjustments")
    op.drop_table("commission_records")
    op.drop_table("bid_requests")
    op.drop_table("service_categories")
    op.drop_table("salespersons")
    op.drop_table("users")

    for enum_name in (
        "auditaction",
        "paymentstatus",
        "recipienttype",
        "commissionpaymentstatus",
        "commissionstatus",
        "bidrequeststatus",
        "userrole",
    ):
        sa.Enum(name=enum_name).drop(op.get_bind(), checkfirst=True)
