"""Shared fixtures: an in-memory database per test and a client bound to it."""

from datetime import date, timedelta

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import fixsewa.models  # noqa: F401
from fixsewa.database import Base, get_db
from fixsewa.main import app
from fixsewa.models.user import UserRole
from fixsewa.principal import Principal
from fixsewa.schemas.booking import BookingCreate
from fixsewa.schemas.user import SignupRequest
from fixsewa.services.booking_service import BookingService
from fixsewa.services.identity_service import IdentityService

PASSWORD = "secret123"


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    """Create an account and return its Principal."""

    async def _make(role=UserRole.CUSTOMER, email=None, name=None, service="plumbing"):
        name = name or f"{role.value.title()} User"
        email = email or f"{name.lower().replace(' ', '.')}@fixsewa.com.np"
        data = SignupRequest(
            email=email,
            password=PASSWORD,
            role=role,
            name=name,
            phone="9800000000",
            service=service if role == UserRole.WORKER else None,
            experience="5 years" if role == UserRole.WORKER else None,
        )
        user = await IdentityService(db).create_user(data)
        return Principal.from_user(user)

    return _make


@pytest.fixture
async def customer(make_user):
    return await make_user(UserRole.CUSTOMER, name="Sita Sharma")


@pytest.fixture
async def worker(make_user):
    return await make_user(UserRole.WORKER, name="Ram Thapa")


@pytest.fixture
async def other_worker(make_user):
    return await make_user(UserRole.WORKER, name="Hari Gurung", service="electrical")


@pytest.fixture
def booking_data():
    return BookingCreate(
        location="kathmandu",
        work="plumbing",
        date=date.today() + timedelta(days=2),
    )


@pytest.fixture
async def booking(db, customer, booking_data):
    return await BookingService(db).create_booking(customer, booking_data)
