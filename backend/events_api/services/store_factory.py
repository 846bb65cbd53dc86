"""
Collaborator factory.
Builds the configured event store and upload authorizer at startup.
"""

from typing import Optional

from events_api.core.config import Settings
from events_api.core.logging import get_logger
from events_api.services.interfaces.store import EventStore
from events_api.services.interfaces.upload import UploadAuthorizer
from events_api.services.memory_store import InMemoryEventStore

logger = get_logger(__name__)

STORE_BACKENDS = ("memory", "sql", "redis")


async def build_store(settings: Settings) -> EventStore:
    """
    Get the configured event store.

    Backend selection via STORE_BACKEND:
    - memory: process-local dict, data lost on restart
    - sql: SQLAlchemy async engine on DATABASE_URL
    - redis: JSON documents on REDIS_URL
    """
    backend = settings.STORE_BACKEND.lower()

    if backend == "memory":
        return InMemoryEventStore()

    if backend == "sql":
        from events_api.db.session import create_engine
        from events_api.infrastructure.sql_store import SqlEventStore

        store = SqlEventStore(create_engine(settings))
        if settings.DB_CREATE_SCHEMA:
            await store.create_schema()
        return store

    if backend == "redis":
        from events_api.infrastructure.redis_store import RedisEventStore

        return RedisEventStore.from_url(settings.REDIS_URL, key_prefix=settings.REDIS_KEY_PREFIX)

    raise ValueError(f"Unknown STORE_BACKEND {settings.STORE_BACKEND!r}; expected one of {STORE_BACKENDS}")


def build_upload_authorizer(settings: Settings) -> Optional[UploadAuthorizer]:
    """Return an S3 authorizer, or None when no bucket is configured."""
    if not settings.EVENTS_BUCKET:
        logger.warning("upload_authorizer_unavailable", message="EVENTS_BUCKET is not set")
        return None

    from events_api.infrastructure.s3_uploads import S3UploadAuthorizer

    return S3UploadAuthorizer(
        bucket=settings.EVENTS_BUCKET,
        expires_in=settings.UPLOAD_URL_EXPIRES_SECONDS,
        region=settings.AWS_REGION,
        endpoint_url=settings.S3_ENDPOINT_URL,
    )
