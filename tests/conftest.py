"""
Pytest configuration and fixtures.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret")

from decimal import Decimal

import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from src.models import Base, BidRequest, Salesperson, ServiceCategory, User, UserRole


# Test database URL (use SQLite for tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# (name, base, salesman, override, corp)
TEST_RATES = [
    ("Kitchen Remodeling", "400.00", "200.00", "40.00", "160.00"),
    ("Plumbing", "150.00", "75.00", "15.00", "60.00"),
    ("Heating & Cooling", "200.00", "100.00", "20.00", "80.00"),
    ("Decks & Porches", "200.00", "100.00", "20.00", "80.00"),
    ("Swimming Pools", "300.00", "150.00", "30.00", "120.00"),
    ("House cleaning", "77.00", "38.50", "0.00", "0.00"),
]


@pytest_asyncio.fixture
async def db_engine():
    """Create test database engine."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    """Create test database session."""
    async_session = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session


@pytest_asyncio.fixture
async def admin_user(db_session):
    admin = User(
        username="admin",
        password_hash="x",
        email="admin@example.com",
        full_name="Site Admin",
        role=UserRole.ADMIN,
        is_active=True,
    )
    db_session.add(admin)
    await db_session.commit()
    return admin


@pytest_asyncio.fixture
async def salesperson(db_session):
    user = User(
        username="jane",
        password_hash="x",
        email="jane@example.com",
        full_name="Jane Seller",
        role=UserRole.SALESPERSON,
        is_active=True,
    )
    db_session.add(user)
    await db_session.flush()

    profile = Salesperson(
        user_id=user.id,
        profile_url="jane-seller",
        is_active=True,
        total_leads=0,
        commissions=Decimal("0"),
    )
    db_session.add(profile)
    await db_session.commit()
    return profile


@pytest_asyncio.fixture
async def rate_sheet(db_session):
    categories = []
    for name, base, salesman, override, corp in TEST_RATES:
        category = ServiceCategory(
            name=name,
            base_cost=Decimal(base),
            salesman_commission=Decimal(salesman),
            override_commission=Decimal(override),
            corp_commission=Decimal(corp),
            is_active=True,
        )
        db_session.add(category)
        categories.append(category)
    await db_session.commit()
    return categories


@pytest_asyncio.fixture
async def make_bid_request(db_session):
    """Factory: persist and return a bid request for the given service text."""

    async def _make(service_requested="Kitchen Remodeling", salesperson_id=None):
        bid_request = BidRequest(
            full_name="Home Owner",
            email="owner@example.com",
            service_requested=service_requested,
            salesperson_id=salesperson_id,
        )
        db_session.add(bid_request)
        await db_session.commit()
        return bid_request

    return _make

