"""
Tests for commission analytics.

Covers:
- per-salesperson summary (earned / pending / paid)
- top earners ranking and naming
- global totals and half-open date windows
- enriched record listing
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from src.models import (
    BidRequest,
    CommissionPaymentStatus,
    CommissionRecord,
    CommissionStatus,
    Salesperson,
    User,
    UserRole,
)
from src.services.commission_analytics import (
    get_commission_analytics,
    get_recipient_name,
    get_salesperson_commission_summary,
    get_top_earners,
    list_commission_records,
)

JAN_10 = datetime(2026, 1, 10, tzinfo=timezone.utc)
FEB_10 = datetime(2026, 2, 10, tzinfo=timezone.utc)
MAR_10 = datetime(2026, 3, 10, tzinfo=timezone.utc)


@pytest.fixture
def add_record(db_session):
    """Factory: persist a commission record with explicit amounts and timestamp."""

    async def _add(
        salesperson_id,
        salesman_amount,
        created_at=None,
        is_admin_commission=False,
        paid=False,
        status=CommissionStatus.PENDING,
        service="Plumbing",
    ):
        bid_request = BidRequest(
            full_name="Pat Homeowner",
            email="pat@homeowners.net",
            service_requested=service,
        )
        db_session.add(bid_request)
        await db_session.flush()

        fields = {}
        if created_at is not None:
            fields["created_at"] = created_at
        record = CommissionRecord(
            bid_request_id=bid_request.id,
            salesperson_id=salesperson_id,
            is_admin_commission=is_admin_commission,
            service_category=service,
            total_commission=salesman_amount * 2,
            salesman_amount=salesman_amount,
            override_amount=Decimal("10.00"),
            corp_amount=Decimal("20.00"),
            status=status,
            payment_status=CommissionPaymentStatus.PAID if paid else CommissionPaymentStatus.UNPAID,
            **fields,
        )
        db_session.add(record)
        await db_session.commit()
        return record

    return _add


@pytest.fixture
def second_salesperson(db_session):
    async def _create():
        user = User(
            username="sam",
            password_hash="x",
            email="sam@example.com",
            full_name="Sam Closer",
            role=UserRole.SALESPERSON,
            is_active=True,
        )
        db_session.add(user)
        await db_session.flush()
        profile = Salesperson(user_id=user.id, profile_url="sam-closer", is_active=True)
        db_session.add(profile)
        await db_session.commit()
        return profile

    return _create


# ── Salesperson summary ───────────────────────────────────


class TestSalespersonSummary:
    @pytest.mark.asyncio
    async def test_earned_pending_paid(self, db_session, salesperson, add_record):
        await add_record(salesperson.id, Decimal("100.00"), paid=True)
        await add_record(salesperson.id, Decimal("40.00"))
        await add_record(salesperson.id, Decimal("60.00"), paid=True)

        summary = await get_salesperson_commission_summary(db_session, salesperson.id)

        assert summary.salesperson_id == salesperson.id
        assert summary.total_earned == Decimal("200.00")
        assert summary.pending_commissions == Decimal("40.00")
        assert summary.paid_commissions == Decimal("160.00")
        assert summary.total_records == 3
        assert len(summary.recent_commissions) == 3

    @pytest.mark.asyncio
    async def test_admin_records_with_same_id_excluded(
        self, db_session, salesperson, add_record
    ):
        await add_record(salesperson.id, Decimal("100.00"))
        await add_record(salesperson.id, Decimal("999.00"), is_admin_commission=True)

        summary = await get_salesperson_commission_summary(db_session, salesperson.id)

        assert summary.total_earned == Decimal("100.00")
        assert summary.total_records == 1

    @pytest.mark.asyncio
    async def test_no_records(self, db_session, salesperson):
        summary = await get_salesperson_commission_summary(db_session, salesperson.id)
        assert summary.total_earned == Decimal("0")
        assert summary.total_records == 0
        assert summary.recent_commissions == []

    @pytest.mark.asyncio
    async def test_recent_limited_without_window(self, db_session, salesperson, add_record):
        for day in range(12):
            await add_record(salesperson.id, Decimal("1.00"), created_at=JAN_10 + timedelta(days=day))

        summary = await get_salesperson_commission_summary(db_session, salesperson.id)

        assert summary.total_records == 12
        assert len(summary.recent_commissions) == 10
        assert summary.recent_commissions[0].created_at.day == 21

    @pytest.mark.asyncio
    async def test_window_is_half_open(self, db_session, salesperson, add_record):
        await add_record(salesperson.id, Decimal("10.00"), created_at=JAN_10)
        await add_record(salesperson.id, Decimal("20.00"), created_at=FEB_10)
        await add_record(salesperson.id, Decimal("40.00"), created_at=MAR_10)

        summary = await get_salesperson_commission_summary(
            db_session, salesperson.id, start_date=FEB_10, end_date=MAR_10
        )

        assert summary.total_earned == Decimal("20.00")
        assert summary.total_records == 1


# ── Top earners ───────────────────────────────────────────


class TestTopEarners:
    @pytest.mark.asyncio
    async def test_ranked_by_total(
        self, db_session, admin_user, salesperson, second_salesperson, add_record
    ):
        sam = await second_salesperson()
        await add_record(salesperson.id, Decimal("50.00"))
        await add_record(salesperson.id, Decimal("50.00"))
        await add_record(sam.id, Decimal("300.00"))

        earners = await get_top_earners(db_session)

        assert [(e.name, e.total_earned, e.commission_count) for e in earners] == [
            ("Sam Closer", Decimal("300.00"), 1),
            ("Jane Seller", Decimal("100.00"), 2),
        ]

    @pytest.mark.asyncio
    async def test_admin_commissions_ranked_separately(
        self, db_session, admin_user, salesperson, add_record
    ):
        await add_record(salesperson.id, Decimal("30.00"))
        await add_record(admin_user.id, Decimal("75.00"), is_admin_commission=True)

        earners = await get_top_earners(db_session)

        assert len(earners) == 2
        assert earners[0].is_admin_commission is True
        assert earners[0].name == "Site Admin"
        assert earners[1].name == "Jane Seller"

    @pytest.mark.asyncio
    async def test_limit(self, db_session, salesperson, second_salesperson, add_record):
        sam = await second_salesperson()
        await add_record(salesperson.id, Decimal("10.00"))
        await add_record(sam.id, Decimal("20.00"))

        earners = await get_top_earners(db_session, limit=1)

        assert len(earners) == 1
        assert earners[0].salesperson_id == sam.id


class TestRecipientName:
    @pytest.mark.asyncio
    async def test_unknown_ids(self, db_session):
        assert await get_recipient_name(db_session, 404, False) == "Unknown"
        assert await get_recipient_name(db_session, 404, True) == "Unknown"


# ── Global analytics ──────────────────────────────────────


class TestCommissionAnalytics:
    @pytest.mark.asyncio
    async def test_totals(self, db_session, admin_user, salesperson, add_record):
        await add_record(salesperson.id, Decimal("100.00"))
        await add_record(admin_user.id, Decimal("50.00"), is_admin_commission=True)

        analytics = await get_commission_analytics(db_session)

        assert analytics.total_records == 2
        assert analytics.total_commissions == Decimal("300.00")
        assert analytics.salesman_total == Decimal("150.00")
        assert analytics.override_total == Decimal("20.00")
        assert analytics.corp_total == Decimal("40.00")
        assert len(analytics.top_earners) == 2

    @pytest.mark.asyncio
    async def test_empty_window(self, db_session, salesperson, add_record):
        await add_record(salesperson.id, Decimal("100.00"), created_at=JAN_10)

        analytics = await get_commission_analytics(db_session, start_date=FEB_10, end_date=MAR_10)

        assert analytics.total_records == 0
        assert analytics.total_commissions == Decimal("0")
        assert analytics.top_earners == []

    @pytest.mark.asyncio
    async def test_start_bound_inclusive(self, db_session, salesperson, add_record):
        await add_record(salesperson.id, Decimal("100.00"), created_at=FEB_10)

        analytics = await get_commission_analytics(db_session, start_date=FEB_10)

        assert analytics.total_records == 1


# ── Record listing ────────────────────────────────────────


class TestListCommissionRecords:
    @pytest.mark.asyncio
    async def test_default_window_is_last_30_days(self, db_session, salesperson, add_record):
        now = datetime.now(timezone.utc)
        await add_record(salesperson.id, Decimal("10.00"), created_at=now - timedelta(days=2))
        await add_record(salesperson.id, Decimal("20.00"), created_at=now - timedelta(days=45))

        records = await list_commission_records(db_session)

        assert [r.salesman_amount for r in records] == [Decimal("10.00")]

    @pytest.mark.asyncio
    async def test_lone_bound_is_applied(self, db_session, salesperson, add_record):
        await add_record(salesperson.id, Decimal("10.00"), created_at=JAN_10)
        await add_record(salesperson.id, Decimal("20.00"), created_at=FEB_10)

        from_feb = await list_commission_records(db_session, start_date=FEB_10)
        before_feb = await list_commission_records(db_session, end_date=FEB_10)

        assert [r.salesman_amount for r in from_feb] == [Decimal("20.00")]
        assert [r.salesman_amount for r in before_feb] == [Decimal("10.00")]

    @pytest.mark.asyncio
    async def test_enriched_with_names(self, db_session, admin_user, salesperson, add_record):
        now = datetime.now(timezone.utc)
        await add_record(salesperson.id, Decimal("10.00"), created_at=now - timedelta(days=1))
        await add_record(
            admin_user.id,
            Decimal("5.00"),
            created_at=now - timedelta(days=2),
            is_admin_commission=True,
        )

        records = await list_commission_records(db_session)

        assert [r.salesperson_name for r in records] == ["Jane Seller", "Site Admin"]
        assert records[0].bid_request_details.email == "pat@homeowners.net"
        assert records[0].bid_request_details.service_requested == "Plumbing"

    @pytest.mark.asyncio
    async def test_by_salesperson_ignores_window(self, db_session, salesperson, add_record):
        await add_record(salesperson.id, Decimal("10.00"), created_at=JAN_10)

        records = await list_commission_records(db_session, salesperson_id=salesperson.id)

        assert len(records) == 1

    @pytest.mark.asyncio
    async def test_explicit_window(self, db_session, salesperson, add_record):
        await add_record(salesperson.id, Decimal("10.00"), created_at=JAN_10)
        await add_record(salesperson.id, Decimal("20.00"), created_at=FEB_10)

        records = await list_commission_records(db_session, start_date=JAN_10, end_date=FEB_10)

        assert [r.salesman_amount for r in records] == [Decimal("10.00")]

    @pytest.mark.asyncio
    async def test_status_filters(self, db_session, salesperson, add_record):
        await add_record(salesperson.id, Decimal("10.00"), paid=True)
        await add_record(salesperson.id, Decimal("20.00"), status=CommissionStatus.ADJUSTED)

        adjusted = await list_commission_records(
            db_session, salesperson_id=salesperson.id, status="adjusted"
        )
        paid = await list_commission_records(
            db_session, salesperson_id=salesperson.id, payment_status="paid"
        )

        assert [r.salesman_amount for r in adjusted] == [Decimal("20.00")]
        assert [r.salesman_amount for r in paid] == [Decimal("10.00")]
