"""
Pytest fixtures: a throwaway SQLite database per test, ledger helpers that
mimic one request/transaction per call, and an HTTP client wired to the app.

SQLite runs with BEGIN IMMEDIATE (see bookmyseat.db.session), so concurrent
sessions against the same file serialize the way row locks do in
PostgreSQL.
"""

import os
from datetime import datetime, timezone, timedelta
from decimal import Decimal
from typing import AsyncGenerator

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./bookmyseat_test.db")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import func, select
from sqlalchemy.pool import NullPool

from bookmyseat.core.config import get_settings
from bookmyseat.core.security import create_access_token
from bookmyseat.db.base import Base
from bookmyseat.db.session import build_engine, build_sessionmaker, get_db
from bookmyseat.domain.state_machine import TicketStatus
from bookmyseat.main import app
from bookmyseat.models.booking import Booking
from bookmyseat.models.ticket import Ticket
from bookmyseat.models.user import User, UserRole
from bookmyseat.services.booking_ledger import BookingLedger
from bookmyseat.services.catalog_service import CatalogService
from bookmyseat.stores.sql_store import SqlBookingStore, SqlTicketStore


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    """Fresh schema in a file-backed SQLite database, dropped with tmp_path."""
    engine = build_engine(
        get_settings(),
        url=f"sqlite+aiosqlite:///{tmp_path / 'bookmyseat.db'}",
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield build_sessionmaker(engine)

    await engine.dispose()


@pytest_asyncio.fixture
async def in_ledger(session_factory):
    """
    Run `operation(ledger)` in its own session and transaction, committing
    on success and rolling back on error, like one HTTP request would.
    """

    async def run(operation, admission=None):
        async with session_factory() as session:
            ledger = BookingLedger(SqlTicketStore(session), SqlBookingStore(session), admission)
            try:
                result = await operation(ledger)
                await session.commit()
                return result
            except Exception:
                await session.rollback()
                raise

    return run


@pytest_asyncio.fixture
async def in_catalog(session_factory):
    async def run(operation, admission=None):
        async with session_factory() as session:
            catalog = CatalogService(SqlTicketStore(session), SqlBookingStore(session), admission)
            try:
                result = await operation(catalog)
                await session.commit()
                return result
            except Exception:
                await session.rollback()
                raise

    return run


@pytest_asyncio.fixture
async def inspect_db(session_factory):
    """Direct store inspection, bypassing the services."""

    class Inspector:
        async def ticket(self, ticket_id: str) -> Ticket:
            async with session_factory() as session:
                return await session.get(Ticket, ticket_id)

        async def booking(self, booking_id: str) -> Booking:
            async with session_factory() as session:
                return await session.get(Booking, booking_id)

        async def booking_count(self, ticket_id: str) -> int:
            async with session_factory() as session:
                result = await session.execute(
                    select(func.count()).select_from(Booking).where(Booking.ticket_id == ticket_id)
                )
                return result.scalar_one()

    return Inspector()


@pytest_asyncio.fixture
async def make_ticket(session_factory):
    async def create(
        quantity: int = 5,
        status: TicketStatus = TicketStatus.APPROVED,
        departure: datetime | None = None,
        price: str = "450.00",
    ) -> Ticket:
        async with session_factory() as session:
            ticket = Ticket(
                title="Dhaka to Chattogram Express",
                from_location="Dhaka",
                to_location="Chattogram",
                transport_type="bus",
                vendor_email="vendor@example.com",
                price=Decimal(price),
                quantity=quantity,
                approved_quantity=quantity,
                status=status.value,
                departure=departure or datetime.now(timezone.utc) + timedelta(days=7),
            )
            session.add(ticket)
            await session.commit()
            await session.refresh(ticket)
            return ticket

    return create


@pytest_asyncio.fixture
async def approved_ticket(make_ticket) -> Ticket:
    """Approved ticket with 5 units left."""
    return await make_ticket(quantity=5)


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client whose requests each get a session from the test database."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


def _headers(email: str, role: UserRole) -> dict:
    token = create_access_token(data={"sub": email, "role": role.value})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def customer_headers() -> dict:
    return _headers("a@x.com", UserRole.CUSTOMER)


@pytest.fixture
def other_customer_headers() -> dict:
    return _headers("b@x.com", UserRole.CUSTOMER)


@pytest.fixture
def vendor_headers() -> dict:
    return _headers("vendor@example.com", UserRole.VENDOR)


@pytest.fixture
def admin_headers() -> dict:
    return _headers("admin@example.com", UserRole.ADMIN)


@pytest.fixture
def payments_headers() -> dict:
    return _headers("payments@example.com", UserRole.PAYMENTS)


@pytest_asyncio.fixture
async def admin_user(session_factory) -> User:
    async with session_factory() as session:
        user = User(email="admin@example.com", name="Admin", role=UserRole.ADMIN.value)
        session.add(user)
        await session.commit()
        await session.refresh(user)
        return user
