"""
Pytest fixtures for stores, the upload authorizer and the HTTP client.

The API is exercised through httpx against create_app() with an in-memory
store injected, so no database or network is needed. Store backends are
tested separately on sqlite (aiosqlite) and fakeredis.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator

import fakeredis
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from events_api.core.config import Settings
from events_api.infrastructure.redis_store import RedisEventStore
from events_api.infrastructure.sql_store import SqlEventStore
from events_api.main import create_app
from events_api.services.interfaces.store import EventRecord, EventStore
from events_api.services.interfaces.upload import UploadAuthorizer, UploadGrant
from events_api.services.memory_store import InMemoryEventStore


class FakeUploadAuthorizer(UploadAuthorizer):
    """Records every grant and returns a predictable URL."""

    def __init__(self, expires_in: int = 300):
        self.expires_in = expires_in
        self.calls: list[tuple[str, str]] = []

    async def authorize(self, key: str, content_type: str) -> UploadGrant:
        self.calls.append((key, content_type))
        return UploadGrant(
            url=f"https://uploads.test/{key}?signature=fake",
            key=key,
            content_type=content_type,
            expires_in=self.expires_in,
        )


@pytest.fixture
def settings() -> Settings:
    return Settings(STORE_BACKEND="memory", ENVIRONMENT="test", EVENTS_BUCKET="events-test")


@pytest.fixture
def memory_store() -> InMemoryEventStore:
    return InMemoryEventStore()


@pytest.fixture
def upload_authorizer() -> FakeUploadAuthorizer:
    return FakeUploadAuthorizer()


@pytest.fixture
def app(settings, memory_store, upload_authorizer):
    return create_app(settings=settings, store=memory_store, upload_authorizer=upload_authorizer)


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def test_event(memory_store: InMemoryEventStore) -> EventRecord:
    """An existing event stored directly, bypassing the API."""
    record = EventRecord(
        event_id="7b0c3f52-4c1e-4c43-9a57-2f6a1d0f9e11",
        title="Test Concert",
        date="2026-03-14T20:00:00Z",
        location="Test Venue",
        description="A test event",
        created_at="2026-01-01T00:00:00.000Z",
        updated_at="2026-01-01T00:00:00.000Z",
    )
    await memory_store.put(record)
    return record


@asynccontextmanager
async def open_store(backend: str) -> AsyncIterator[EventStore]:
    if backend == "memory":
        yield InMemoryEventStore()
        return

    if backend == "sql":
        engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool)
        store = SqlEventStore(engine)
        await store.create_schema()
    else:
        store = RedisEventStore(fakeredis.FakeAsyncRedis(server=fakeredis.FakeServer(), decode_responses=True))

    try:
        yield store
    finally:
        await store.close()


@pytest_asyncio.fixture
async def sql_store() -> AsyncGenerator[SqlEventStore, None]:
    async with open_store("sql") as store:
        yield store


@pytest_asyncio.fixture
async def redis_store() -> AsyncGenerator[RedisEventStore, None]:
    async with open_store("redis") as store:
        yield store


@pytest_asyncio.fixture(params=["memory", "sql", "redis"])
async def any_store(request) -> AsyncGenerator[EventStore, None]:
    """Each store backend in turn, for contract tests."""
    async with open_store(request.param) as store:
        yield store
