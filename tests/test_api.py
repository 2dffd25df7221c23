"""
Tests for the HTTP surface.

Covers:
- bid request intake booking commissions
- authentication and role checks on the commission API
- audit rows for administrative changes
"""

from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select

from src.auth.jwt import COOKIE_NAME, create_access_token
from src.db import get_db
from src.main import app
from src.models import (
    AuditAction,
    AuditLog,
    CommissionPayment,
    CommissionRecord,
    RecipientType,
    Salesperson,
)
from src.utils.password import hash_password


@pytest_asyncio.fixture
async def client(db_session):
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def _login(client, user_id, role):
    client.cookies.set(COOKIE_NAME, create_access_token(user_id, role))


async def _count(db, column):
    return await db.scalar(select(func.count(column)))


INTAKE = {
    "full_name": "Pat Homeowner",
    "email": "pat@homeowners.net",
    "service_requested": "Kitchen Remodeling",
}


class TestHealth:
    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/api/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_ready(self, client):
        response = await client.get("/api/health/ready")
        assert response.json()["status"] == "ready"


class TestLogin:
    @pytest.mark.asyncio
    async def test_login_returns_role_and_sets_cookie(self, client, db_session, admin_user):
        admin_user.password_hash = hash_password("correct-horse")
        await db_session.commit()

        response = await client.post(
            "/api/auth/login", json={"username": "admin", "password": "correct-horse"}
        )

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Login successful", "role": "admin"}
        assert COOKIE_NAME in response.cookies

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, client, db_session, admin_user):
        admin_user.password_hash = hash_password("correct-horse")
        await db_session.commit()

        response = await client.post(
            "/api/auth/login", json={"username": "admin", "password": "wrong"}
        )
        assert response.status_code == 401


class TestBidRequestIntake:
    @pytest.mark.asyncio
    async def test_referral_by_profile_url(
        self, client, db_session, admin_user, salesperson, rate_sheet
    ):
        salesperson_id = salesperson.id
        response = await client.post(
            "/api/bid-requests",
            json={**INTAKE, "salesperson_profile_url": "jane-seller"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["bid_request"]["salesperson_id"] == salesperson_id
        assert body["commission_record_id"] is not None

        total = await db_session.scalar(
            select(Salesperson.commissions).where(Salesperson.id == salesperson_id)
        )
        assert total == Decimal("200.00")

    @pytest.mark.asyncio
    async def test_unmatched_service_creates_no_commission(
        self, client, db_session, admin_user, rate_sheet
    ):
        response = await client.post(
            "/api/bid-requests",
            json={**INTAKE, "service_requested": "Dog walking"},
        )

        assert response.status_code == 201
        assert response.json()["commission_record_id"] is None
        assert await _count(db_session, CommissionRecord.id) == 0

    @pytest.mark.asyncio
    async def test_unknown_salesperson_becomes_admin_commission(
        self, client, db_session, admin_user, rate_sheet
    ):
        response = await client.post(
            "/api/bid-requests",
            json={**INTAKE, "salesperson_id": 999},
        )

        record_id = response.json()["commission_record_id"]
        record = await db_session.get(CommissionRecord, record_id)
        assert record.is_admin_commission is True

    @pytest.mark.asyncio
    async def test_intake_cannot_name_override_manager(
        self, client, db_session, admin_user, salesperson, rate_sheet
    ):
        salesperson_id = salesperson.id
        response = await client.post(
            "/api/bid-requests",
            json={**INTAKE, "salesperson_id": salesperson_id, "override_manager_id": 424242},
        )

        assert response.status_code == 201
        record = await db_session.get(CommissionRecord, response.json()["commission_record_id"])
        assert record.override_manager_id is None

        result = await db_session.execute(
            select(CommissionPayment.recipient_type, CommissionPayment.recipient_id)
            .order_by(CommissionPayment.id)
        )
        assert result.all() == [
            (RecipientType.SALESPERSON, salesperson_id),
            (RecipientType.CORP, admin_user.id),
        ]

    @pytest.mark.asyncio
    async def test_status_update_requires_admin(self, client, admin_user, salesperson, rate_sheet):
        created = await client.post("/api/bid-requests", json=INTAKE)
        bid_request_id = created.json()["bid_request"]["id"]

        _login(client, salesperson.user_id, "salesperson")
        response = await client.patch(
            f"/api/bid-requests/{bid_request_id}/status", json={"status": "won"}
        )
        assert response.status_code == 403

        _login(client, admin_user.id, "admin")
        response = await client.patch(
            f"/api/bid-requests/{bid_request_id}/status", json={"status": "won"}
        )
        assert response.status_code == 200
        assert response.json()["status"] == "won"


class TestCommissionAccess:
    @pytest.mark.asyncio
    async def test_anonymous_rejected(self, client):
        response = await client.get("/api/commissions/analytics")
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_salesperson_cannot_read_analytics(self, client, salesperson):
        _login(client, salesperson.user_id, "salesperson")
        response = await client.get("/api/commissions/analytics")
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_salesperson_reads_own_summary_only(self, client, salesperson):
        _login(client, salesperson.user_id, "salesperson")

        own = await client.get(f"/api/commissions/salesperson/{salesperson.id}")
        other = await client.get(f"/api/commissions/salesperson/{salesperson.id + 1}")

        assert own.status_code == 200
        assert Decimal(own.json()["total_earned"]) == Decimal("0")
        assert other.status_code == 403

    @pytest.mark.asyncio
    async def test_admin_reads_analytics(self, client, admin_user, salesperson, rate_sheet):
        await client.post("/api/bid-requests", json={**INTAKE, "salesperson_id": salesperson.id})

        _login(client, admin_user.id, "admin")
        response = await client.get("/api/commissions/analytics")

        assert response.status_code == 200
        body = response.json()
        assert body["total_records"] == 1
        assert Decimal(body["salesman_total"]) == Decimal("200")
        assert body["top_earners"][0]["name"] == "Jane Seller"

    @pytest.mark.asyncio
    async def test_inverted_window_rejected(self, client, admin_user):
        _login(client, admin_user.id, "admin")
        response = await client.get(
            "/api/commissions/analytics",
            params={"start_date": "2026-03-01T00:00:00Z", "end_date": "2026-02-01T00:00:00Z"},
        )
        assert response.status_code == 400


class TestAdminActions:
    @pytest.mark.asyncio
    async def test_adjustment_is_audited(
        self, client, db_session, admin_user, salesperson, rate_sheet
    ):
        created = await client.post(
            "/api/bid-requests", json={**INTAKE, "salesperson_id": salesperson.id}
        )
        record_id = created.json()["commission_record_id"]

        _login(client, admin_user.id, "admin")
        response = await client.post(
            "/api/commissions/adjustments",
            json={"commission_record_id": record_id, "new_amount": "150.00", "reason": "Refund"},
        )

        assert response.status_code == 201
        assert Decimal(response.json()["adjustment_amount"]) == Decimal("-50")

        history = await client.get(f"/api/commissions/adjustments/{record_id}")
        assert len(history.json()) == 1

        audited = await db_session.scalar(
            select(func.count(AuditLog.id)).where(AuditLog.action == AuditAction.ADJUST_COMMISSION)
        )
        assert audited == 1

    @pytest.mark.asyncio
    async def test_adjustment_of_missing_record(self, client, admin_user):
        _login(client, admin_user.id, "admin")
        response = await client.post(
            "/api/commissions/adjustments",
            json={"commission_record_id": 404, "new_amount": "1", "reason": "x"},
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_rate_update(self, client, db_session, admin_user, rate_sheet):
        plumbing = next(c for c in rate_sheet if c.name == "Plumbing")
        _login(client, admin_user.id, "admin")

        response = await client.put(
            "/api/commissions/rates",
            json={
                "service_id": plumbing.id,
                "base_cost": "180",
                "salesman_commission": "90",
                "override_commission": "18",
                "corp_commission": "72",
            },
        )

        assert response.status_code == 200
        assert response.json()["service"] == "Plumbing"
        assert Decimal(response.json()["salesman_commission"]) == Decimal("90")

        rates = await client.get("/api/commissions/rates")
        assert len(rates.json()) == len(rate_sheet)

    @pytest.mark.asyncio
    async def test_salesperson_sees_own_payments_without_corp(
        self, client, admin_user, salesperson, rate_sheet
    ):
        await client.post("/api/bid-requests", json={**INTAKE, "salesperson_id": salesperson.id})

        _login(client, salesperson.user_id, "salesperson")
        response = await client.get(f"/api/commissions/payments/{salesperson.id}")

        assert response.status_code == 200
        assert [p["recipient_type"] for p in response.json()] == ["salesperson"]

    @pytest.mark.asyncio
    async def test_salesperson_records_forced_to_own(
        self, client, admin_user, salesperson, rate_sheet
    ):
        await client.post("/api/bid-requests", json={**INTAKE, "salesperson_id": salesperson.id})
        await client.post("/api/bid-requests", json=INTAKE)

        _login(client, salesperson.user_id, "salesperson")
        response = await client.get("/api/commissions/records")

        records = response.json()["records"]
        assert len(records) == 1
        assert records[0]["salesperson_name"] == "Jane Seller"
