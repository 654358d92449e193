"""Shared fixtures: an in-memory SQLite database and entity factories."""

import uuid
from decimal import Decimal
from typing import AsyncGenerator, Optional

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.pool import StaticPool

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def test_engine():
    """Create a fresh in-memory database with every table for each test."""
    from agrilink.core.database import Base
    from agrilink.core.database import entities  # noqa: F401

    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(name="session")
async def session_fixture(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a new session for each test."""
    async_session_maker = sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)

    async with async_session_maker() as session:  # type: ignore[attr-defined]
        yield session


@pytest.fixture
def make_user(session: AsyncSession):
    """Persist a user holding ``roles`` and return it."""
    from agrilink.core.database.entities import User
    from agrilink.server.security import hash_password

    async def _make(email: Optional[str] = None, roles: str = "CUSTOMER", password: str = "secret123") -> User:
        user = User(
            email=email or f"user-{uuid.uuid4().hex[:8]}@example.com",
            password_hash=hash_password(password),
            roles=roles,
        )
        session.add(user)
        await session.commit()
        return user

    return _make


@pytest.fixture
def make_device(session: AsyncSession):
    """Persist an ACTIVE device owned by ``farmer_id``."""
    from agrilink.core.database.entities import Device
    from agrilink.core.models.domain.enums import DeviceStatus, DeviceType

    async def _make(farmer_id: uuid.UUID, name: str = "Field Sensor", status: DeviceStatus = DeviceStatus.ACTIVE):
        device = Device(farmer_id=farmer_id, device_name=name, device_type=DeviceType.SOIL_SENSOR, status=status)
        session.add(device)
        await session.commit()
        return device

    return _make


@pytest.fixture
def make_listing(session: AsyncSession):
    """Persist a listing of ``seller_id``; ACTIVE unless told otherwise."""
    from agrilink.core.database.entities import Listing
    from agrilink.core.models.domain.enums import ListingStatus

    async def _make(
        seller_id: uuid.UUID,
        title: str = "Organic Tomatoes",
        price: str = "100",
        quantity: str = "50",
        status: ListingStatus = ListingStatus.ACTIVE,
        crop_type: str = "Tomato",
    ):
        listing = Listing(
            seller_id=seller_id,
            title=title,
            crop_type=crop_type,
            quantity=Decimal(quantity),
            price_per_unit=Decimal(price),
            status=status,
        )
        session.add(listing)
        await session.commit()
        return listing

    return _make
