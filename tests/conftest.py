"""
YaraCheck - Test Configuration

Pytest fixtures and configuration.
"""

import os

# Settings are read at import time
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-yaracheck")
os.environ["DATABASE_URL_ASYNC"] = "sqlite+aiosqlite:///:memory:"
os.environ["APP_ENV"] = "testing"
os.environ["DEBUG"] = "false"
os.environ["STRIPE_SECRET_KEY"] = ""
os.environ["PAYSTACK_SECRET_KEY"] = ""
os.environ["PAYSTACK_WEBHOOK_SECRET"] = ""
os.environ["FLUTTERWAVE_SECRET_KEY"] = ""
os.environ["SUPER_ADMIN_EMAIL"] = ""
os.environ["SUPER_ADMIN_PASSWORD"] = ""

from datetime import date
from typing import AsyncGenerator, Dict

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

import yaracheck.models  # noqa: F401
from yaracheck.database import Base, get_async_session
from yaracheck.models.geography import Country, Province
from yaracheck.models.profile import AdminRole, Profile, UserRole
from yaracheck.utils.security import create_access_token, get_password_hash
from main import app


TEST_PASSWORD = "TestPassword123!"


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh in-memory database and session for each test."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    TestSessionLocal = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()

    await test_engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with database session override."""

    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_async_session] = override_get_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


def auth_headers_for(profile: Profile) -> Dict[str, str]:
    """Bearer header for a profile."""
    token = create_access_token({"sub": str(profile.id)})
    return {"Authorization": f"Bearer {token}"}


# ===========================================
# GEOGRAPHY
# ===========================================

@pytest_asyncio.fixture
async def nigeria(db_session: AsyncSession) -> Country:
    country = Country(name="Nigeria", code="NG")
    db_session.add(country)
    await db_session.commit()
    await db_session.refresh(country)
    return country


@pytest_asyncio.fixture
async def ghana(db_session: AsyncSession) -> Country:
    country = Country(name="Ghana", code="GH")
    db_session.add(country)
    await db_session.commit()
    await db_session.refresh(country)
    return country


@pytest_asyncio.fixture
async def lagos(db_session: AsyncSession, nigeria: Country) -> Province:
    province = Province(name="Lagos", country_id=nigeria.id)
    db_session.add(province)
    await db_session.commit()
    await db_session.refresh(province)
    return province


# ===========================================
# PROFILES
# ===========================================

async def _create_profile(db_session: AsyncSession, **kwargs) -> Profile:
    profile = Profile(hashed_password=get_password_hash(TEST_PASSWORD), is_active=True, **kwargs)
    db_session.add(profile)
    await db_session.commit()
    await db_session.refresh(profile)
    return profile


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> Profile:
    """A plain report submitter."""
    return await _create_profile(
        db_session,
        email="reporter@example.com",
        first_name="Ada",
        last_name="Obi",
        role=UserRole.USER,
    )


@pytest_asyncio.fixture
async def super_admin(db_session: AsyncSession) -> Profile:
    return await _create_profile(
        db_session,
        email="root@yaracheck.test",
        first_name="Super",
        last_name="Admin",
        role=UserRole.SUPER_ADMIN,
        admin_role=AdminRole.SUPER_ADMIN,
    )


@pytest_asyncio.fixture
async def director(db_session: AsyncSession) -> Profile:
    return await _create_profile(
        db_session,
        email="director@yaracheck.test",
        role=UserRole.ADMIN,
        admin_role=AdminRole.DIRECTOR,
        permissions={"can_view_reports": True},
    )


@pytest_asyncio.fixture
async def country_rep(db_session: AsyncSession, nigeria: Country) -> Profile:
    return await _create_profile(
        db_session,
        email="rep@yaracheck.test",
        role=UserRole.ADMIN,
        admin_role=AdminRole.COUNTRY_REP,
        country_id=nigeria.id,
        permissions={"can_view_reports": True, "can_view_analytics": True},
    )


@pytest_asyncio.fixture
async def province_manager(db_session: AsyncSession, lagos: Province) -> Profile:
    return await _create_profile(
        db_session,
        email="manager@yaracheck.test",
        role=UserRole.ADMIN,
        admin_role=AdminRole.PROVINCE_MANAGER,
        province_id=lagos.id,
        permissions={"can_view_reports": True},
    )


@pytest_asyncio.fixture
async def shareholder(db_session: AsyncSession) -> Profile:
    return await _create_profile(
        db_session,
        email="shareholder@yaracheck.test",
        first_name="Share",
        last_name="Holder",
        role=UserRole.ADMIN,
        admin_role=AdminRole.SHAREHOLDER,
    )


@pytest_asyncio.fixture
async def other_shareholder(db_session: AsyncSession) -> Profile:
    return await _create_profile(
        db_session,
        email="other.holder@yaracheck.test",
        role=UserRole.ADMIN,
        admin_role=AdminRole.SHAREHOLDER,
    )


@pytest_asyncio.fixture
async def support_agent(db_session: AsyncSession) -> Profile:
    return await _create_profile(
        db_session,
        email="support@yaracheck.test",
        first_name="Kemi",
        last_name="Support",
        role=UserRole.ADMIN,
        admin_role=AdminRole.CUSTOMER_SUPPORT_EXECUTIVE,
        permissions={"can_view_support_tickets": True, "can_respond_to_live_chat": True},
    )


@pytest.fixture
def user_headers(test_user: Profile) -> Dict[str, str]:
    return auth_headers_for(test_user)


@pytest.fixture
def super_admin_headers(super_admin: Profile) -> Dict[str, str]:
    return auth_headers_for(super_admin)


# ===========================================
# REPORT PAYLOADS
# ===========================================

@pytest.fixture
def child_payload() -> dict:
    """A missing child aged 5: free to submit."""
    return {
        "name": "Chidi Okafor",
        "age": 5,
        "gender": "male",
        "location": "Yaba, Lagos",
        "date_missing": date(2026, 10, 1).isoformat(),
        "reporter_name": "Ngozi Okafor",
        "reporter_email": "ngozi@example.com",
    }


@pytest.fixture
def iphone_payload() -> dict:
    """A 2022 iPhone: $5.00."""
    return {
        "type": "mobile_phone",
        "brand": "Apple iPhone",
        "model": "14 Pro",
        "color": "black",
        "location": "Ikeja, Lagos",
        "imei": "356938035643809",
        "year": 2022,
        "reporter_name": "Ada Obi",
        "reporter_email": "reporter@example.com",
        "reporter_phone": "+2348012345678",
    }
