"""Test configuration and fixtures"""

from datetime import date, datetime, time

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.api.deps import get_clock
from app.database import Base, get_db
from app.models.reservation import Reservation
from app.models.table import RestaurantTable
from app.services.store import SqlAlchemyStore


# Test database URL (use in-memory SQLite for tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Monday noon; the day after is a Tuesday
NOW = datetime(2030, 1, 7, 12, 0)
MONDAY = date(2030, 1, 7)
TUESDAY = date(2030, 1, 8)
WEDNESDAY = date(2030, 1, 9)
LAST_SUNDAY = date(2030, 1, 6)


def frozen_clock() -> datetime:
    return NOW


def reservation_fields(**overrides):
    """A valid reservation body for next Wednesday at 18:00"""
    fields = {
        "first_name": "Ann",
        "last_name": "Lee",
        "mobile_number": "800-555-0100",
        "reservation_date": WEDNESDAY.isoformat(),
        "reservation_time": "18:00",
        "people": 4,
    }
    fields.update(overrides)
    return fields


@pytest.fixture
async def test_db():
    """Create test database"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    
    async with session_factory() as session:
        yield session
    
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    
    await engine.dispose()


@pytest.fixture
async def store(test_db):
    return SqlAlchemyStore(test_db)


@pytest.fixture
async def booked_reservation(test_db):
    """A booked party of four next Wednesday"""
    reservation = Reservation(
        first_name="Ann",
        last_name="Lee",
        mobile_number="800-555-0100",
        reservation_date=WEDNESDAY,
        reservation_time=time(18, 0),
        people=4,
        status="booked",
    )
    test_db.add(reservation)
    await test_db.commit()
    return reservation


@pytest.fixture
async def test_tables(test_db):
    """A two-top and a six-top"""
    tables = [
        RestaurantTable(table_name="T1", capacity=2),
        RestaurantTable(table_name="T2", capacity=6),
    ]
    for table in tables:
        test_db.add(table)
    await test_db.commit()
    return tables


@pytest.fixture
async def client(test_db):
    """Create test client with overridden database and clock"""
    async def override_get_db():
        yield test_db
    
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: frozen_clock
    
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    
    app.dependency_overrides.clear()
