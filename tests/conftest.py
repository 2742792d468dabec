"""
Shared test fixtures.

Uses an in-memory SQLite database (via aiosqlite) so tests run without
Docker / PostgreSQL / Redis.  The notification model only uses portable
column types, so the production metadata is created as-is.
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from driverdesk.domain.enums import DocumentKind, VehicleType
from driverdesk.domain.ledger import BalanceLedger
from driverdesk.domain.session import DriverSession
from driverdesk.infrastructure.database import (
    Base,
    build_engine,
    build_session_factory,
)
from driverdesk.infrastructure.dispatch_feed import SEED_OFFERS, trip_from_payload
from driverdesk.infrastructure.notifications import PaymentNotifier

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"


# ── Domain helpers ────────────────────────────────────────────────────


def verify(session: DriverSession) -> DriverSession:
    """Walk a session through onboarding with instant verification."""
    gate = session.gate
    gate.choose_vehicle(VehicleType.CAR)
    for kind in DocumentKind:
        gate.submit_document(kind, f"{kind.value}.jpg", b"\xff\xd8scan")
    gate.set_vehicle_details("B 1234 CD", "Toyota", "Avanza")
    gate.complete_onboarding()
    return session


def seed_trips() -> list:
    return [trip_from_payload(o) for o in SEED_OFFERS]


@pytest.fixture
def driver() -> DriverSession:
    """A verified, online driver with TR-1001 and TR-1002 pending and Rp 150,000."""
    session = verify(DriverSession(driver_id="driver-1", ledger=BalanceLedger(150_000)))
    session.go_online()
    for trip in seed_trips():
        session.queue.offer(trip)
    return session


# ── Test DB (SQLite in-memory) ────────────────────────────────────────


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Create tables, yield a session factory, then drop everything."""
    engine = build_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield build_session_factory(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def notifier(session_factory) -> PaymentNotifier:
    return PaymentNotifier(session_factory)


# ── API ───────────────────────────────────────────────────────────────


@pytest_asyncio.fixture
async def app(notifier):
    from driverdesk.api.app import create_app

    app = create_app()
    app.state.notifier = notifier
    yield app
    await app.state.scheduler.shutdown()


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """AsyncClient backed by the app with a SQLite notification store."""
    from driverdesk.api.middleware import limiter

    limiter.reset()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
