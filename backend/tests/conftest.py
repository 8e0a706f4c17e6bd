"""
Pytest fixtures for the test database, the request store, the HTTP client,
and a small event/booth/user graph to hang requests on.

Each test gets a fresh SQLite file with foreign keys enforced.
"""

from datetime import datetime, timezone, timedelta
from typing import AsyncGenerator

import pytest
import pytest_asyncio
import structlog
from structlog.testing import LogCapture
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from booth_api.main import app
from booth_api.api.deps import get_request_store
from booth_api.core.security import create_access_token
from booth_api.db.base import Base
from booth_api.db.session import build_session_factory
from booth_api.models import User, Event, EventBooth, Request, RequestStatus
from booth_api.services.request_store import RequestStore


@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """Fresh schema in a throwaway SQLite file."""
    test_engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'booths.db'}", echo=False)

    @event.listens_for(test_engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield test_engine

    await test_engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return build_session_factory(engine)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Session for seeding rows directly, outside the store."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def store(session_factory) -> RequestStore:
    return RequestStore(session_factory, isolation_level="SERIALIZABLE")


@pytest_asyncio.fixture
async def client(store: RequestStore) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client wired to the test store."""
    app.dependency_overrides[get_request_store] = lambda: store

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def _add(session: AsyncSession, obj):
    session.add(obj)
    await session.commit()
    await session.refresh(obj)
    return obj


@pytest_asyncio.fixture
async def creator(db_session: AsyncSession) -> User:
    return await _add(db_session, User(email="creator@example.com", name="Event Creator"))


@pytest_asyncio.fixture
async def other_creator(db_session: AsyncSession) -> User:
    return await _add(db_session, User(email="other@example.com", name="Other Creator"))


@pytest_asyncio.fixture
async def applicants(db_session: AsyncSession) -> list[User]:
    return [
        await _add(db_session, User(email=f"applicant{i}@example.com", name=f"Applicant {i}"))
        for i in range(1, 4)
    ]


@pytest_asyncio.fixture
async def test_event(db_session: AsyncSession, creator: User) -> Event:
    return await _add(
        db_session,
        Event(
            name="Street Food Fair",
            date=datetime.now(timezone.utc) + timedelta(days=30),
            local="Harbour Square",
            description="Two days of food stalls",
            creator_id=creator.id,
        ),
    )


@pytest_asyncio.fixture
async def other_event(db_session: AsyncSession, other_creator: User) -> Event:
    return await _add(
        db_session,
        Event(
            name="Vintage Market",
            date=datetime.now(timezone.utc) + timedelta(days=60),
            local="Old Station",
            description=None,
            creator_id=other_creator.id,
        ),
    )


@pytest_asyncio.fixture
async def booth(db_session: AsyncSession, test_event: Event) -> EventBooth:
    return await _add(db_session, EventBooth(event_id=test_event.id, name="B1"))


@pytest_asyncio.fixture
async def second_booth(db_session: AsyncSession, test_event: Event) -> EventBooth:
    return await _add(db_session, EventBooth(event_id=test_event.id, name="B2"))


@pytest_asyncio.fixture
async def other_event_booth(db_session: AsyncSession, other_event: Event) -> EventBooth:
    return await _add(db_session, EventBooth(event_id=other_event.id, name="V1"))


@pytest_asyncio.fixture
async def booth_requests(
    db_session: AsyncSession, booth: EventBooth, second_booth: EventBooth, applicants: list[User]
) -> dict[str, Request]:
    """
    B1: R1 open, R2 open, R3 declined.
    B2: R4 open.
    """
    r1 = await _add(db_session, Request(event_booth_id=booth.id, applicant_id=applicants[0].id, status=RequestStatus.OPEN))
    r2 = await _add(db_session, Request(event_booth_id=booth.id, applicant_id=applicants[1].id, status=RequestStatus.OPEN))
    r3 = await _add(db_session, Request(event_booth_id=booth.id, applicant_id=applicants[2].id, status=RequestStatus.DECLINED))
    r4 = await _add(db_session, Request(event_booth_id=second_booth.id, applicant_id=applicants[0].id, status=RequestStatus.OPEN))
    return {"R1": r1, "R2": r2, "R3": r3, "R4": r4}


@pytest.fixture
def auth_headers_for():
    """Build Authorization headers with a Bearer token for a given user."""

    def _headers(user: User) -> dict:
        token = create_access_token(data={"sub": str(user.id)})
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def captured_logs():
    """Structlog event dicts emitted during the test, with contextvars merged in."""
    capture = LogCapture()
    structlog.configure(processors=[structlog.contextvars.merge_contextvars, capture])
    yield capture.entries
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
