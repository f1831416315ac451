"""
Pytest fixtures for test database, client, and seeded events.

Uses an in-memory SQLite database, recreated for every test, shared by the
HTTP client and the fixtures through a single connection.
"""

from datetime import datetime, timezone, timedelta
from typing import AsyncGenerator

import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from eventgroups.main import app
from eventgroups.db.base import Base
from eventgroups.db.session import get_db
from eventgroups.client.api import EventGroupsClient
from eventgroups.models.event import Event
from eventgroups.models.group import Group, GroupMember

TEST_DATABASE_URL = "sqlite+aiosqlite://"

test_engine = create_async_engine(
    TEST_DATABASE_URL,
    echo=False,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create tables, yield session, then drop tables for isolation."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client that overrides the DB dependency with the test session."""

    async def override_get_db():
        try:
            yield db_session
            await db_session.commit()
        except Exception:
            await db_session.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def api(client: AsyncClient) -> AsyncGenerator[EventGroupsClient, None]:
    """Typed API client talking to the app in-process."""
    async with EventGroupsClient("http://test/api", transport=ASGITransport(app=app)) as api_client:
        yield api_client


async def _make_event(db_session: AsyncSession, **overrides) -> Event:
    fields = {
        "name": "Hack Night",
        "date_time": datetime.now(timezone.utc) + timedelta(days=30),
        "location": "Main Hall",
        "group_size_limit": 3,
        "max_participants": 10,
    }
    fields.update(overrides)
    event = Event(**fields)
    db_session.add(event)
    await db_session.commit()
    await db_session.refresh(event)
    # Detached, so a rollback inside a request never expires the fixture
    db_session.expunge(event)
    return event


@pytest_asyncio.fixture
async def test_event(db_session: AsyncSession) -> Event:
    """Event with group_size_limit=3 and max_participants=10."""
    return await _make_event(db_session)


@pytest_asyncio.fixture
async def small_event(db_session: AsyncSession) -> Event:
    """Event with room for a single group of two."""
    return await _make_event(db_session, name="Workshop", group_size_limit=2, max_participants=2)


@pytest_asyncio.fixture
async def make_group(db_session: AsyncSession):
    """Factory that inserts a group with `size` members directly."""

    async def factory(
        event: Event,
        size: int = 2,
        group_name: str = "Team Alpha",
        creator_name: str = "Alice",
        accepts_others: bool = False,
        project_description: str = None,
    ) -> Group:
        group = Group(
            event_id=event.id,
            creator_name=creator_name,
            creator_email=f"{creator_name.lower()}@example.com",
            group_name=group_name,
            accepts_others=accepts_others,
            project_description=project_description,
            members=[GroupMember(name=f"Member {i + 1}") for i in range(size)],
        )
        db_session.add(group)
        await db_session.commit()
        await db_session.refresh(group)
        db_session.expunge(group)
        return group

    return factory


def group_payload(event_id: str, size: int = 2, **overrides) -> dict:
    payload = {
        "event_id": event_id,
        "creator_name": "Alice",
        "creator_email": "alice@example.com",
        "group_name": "Team Alpha",
        "accepts_others": False,
        "project_description": "Building a robot",
        "members": [{"name": f"Member {i + 1}", "email": ""} for i in range(size)],
    }
    payload.update(overrides)
    return payload
