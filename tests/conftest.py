"""Pytest configuration and shared fixtures for all tests."""

import os
import sys
from pathlib import Path

# Minimal environment for settings validation
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_FILE", "logs/test.log")

# Add project root to PYTHONPATH
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import itertools
from collections.abc import AsyncGenerator
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.models import Affiliate, AffiliateStatus, Base


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def mock_session():
    """Mock AsyncSession for tests without a database."""
    session = AsyncMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.flush = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    session.refresh = AsyncMock()
    return session


@pytest_asyncio.fixture(scope="function")
async def async_engine():
    """In-memory SQLite engine with all tables created."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(async_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create database session for tests."""
    async_session = async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()


@pytest.fixture
def make_affiliate(db_session: AsyncSession):
    """
    Factory creating committed affiliates.

    Defaults to an approved bronze affiliate with no sponsor and no
    activity; any column can be overridden.
    """
    counter = itertools.count(1)

    async def factory(sponsor: Affiliate | None = None, **fields) -> Affiliate:
        n = next(counter)
        data = {
            "user_id": f"user-{n}",
            "referral_code": f"SKY-T{n:05d}",
            "sponsor_id": sponsor.id if sponsor else None,
            "status": AffiliateStatus.APPROVED.value,
            "tier": "bronze",
            "commission_rate": Decimal("10"),
            "direct_referrals_count": 0,
            "direct_sales_volume": Decimal("0"),
            "team_sales_volume": Decimal("0"),
            "points": 0,
            "total_earnings": Decimal("0"),
            "team_earnings": Decimal("0"),
            "available_balance": Decimal("0"),
            "withdrawn_balance": Decimal("0"),
        }
        data.update(fields)
        affiliate = Affiliate(**data)
        db_session.add(affiliate)
        await db_session.commit()
        await db_session.refresh(affiliate)
        return affiliate

    return factory
