"""
Tests for startup wiring: collaborator factory and lifespan.
"""

import pytest

from events_api.core.config import Settings
from events_api.infrastructure.s3_uploads import S3UploadAuthorizer
from events_api.infrastructure.sql_store import SqlEventStore
from events_api.main import create_app
from events_api.services.memory_store import InMemoryEventStore
from events_api.services.store_factory import build_store, build_upload_authorizer


@pytest.mark.asyncio
async def test_build_memory_store():
    store = await build_store(Settings(STORE_BACKEND="memory"))
    assert isinstance(store, InMemoryEventStore)


@pytest.mark.asyncio
async def test_build_sql_store_creates_schema():
    settings = Settings(
        STORE_BACKEND="sql",
        DATABASE_URL="sqlite+aiosqlite:///:memory:",
        DB_CREATE_SCHEMA=True,
    )
    store = await build_store(settings)
    try:
        assert isinstance(store, SqlEventStore)
        result = await store.scan(10)
        assert result.value == []
    finally:
        await store.close()


@pytest.mark.asyncio
async def test_build_unknown_store():
    with pytest.raises(ValueError):
        await build_store(Settings(STORE_BACKEND="dynamo"))


def test_no_bucket_means_no_authorizer():
    assert build_upload_authorizer(Settings(EVENTS_BUCKET=None)) is None


def test_bucket_builds_s3_authorizer():
    settings = Settings(EVENTS_BUCKET="events-bucket", AWS_REGION="eu-west-3", UPLOAD_URL_EXPIRES_SECONDS=120)
    authorizer = build_upload_authorizer(settings)
    assert isinstance(authorizer, S3UploadAuthorizer)
    assert authorizer.bucket == "events-bucket"
    assert authorizer.expires_in == 120


@pytest.mark.asyncio
async def test_lifespan_builds_configured_store():
    app = create_app(settings=Settings(STORE_BACKEND="memory", ENVIRONMENT="test"))
    assert app.state.store is None

    async with app.router.lifespan_context(app):
        assert isinstance(app.state.store, InMemoryEventStore)
        assert app.state.upload_authorizer is None


@pytest.mark.asyncio
async def test_lifespan_keeps_injected_store():
    store = InMemoryEventStore()
    app = create_app(settings=Settings(STORE_BACKEND="sql"), store=store)

    async with app.router.lifespan_context(app):
        assert app.state.store is store
