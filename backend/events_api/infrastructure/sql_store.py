"""
SQLAlchemy-backed event store.

Each operation runs in its own short transaction. Existence checks are folded
into the write statements themselves:

  - put:    INSERT; a primary-key IntegrityError means the id already exists
  - update: UPDATE ... WHERE event_id = :id; rowcount == 0 means not found
  - delete: DELETE ... WHERE event_id = :id; missing rows are not an error

Driver errors are returned as Failure so the request handler never has to
know SQLAlchemy exception types.
"""

from typing import Any, Optional

from sqlalchemy import select, update, delete
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from events_api.core.logging import get_logger
from events_api.db.base import Base
from events_api.db.session import create_session_factory
from events_api.models.event import Event
from events_api.services.interfaces.store import (
    EventRecord,
    EventStore,
    StoreResult,
    Ok,
    NotFound,
    Conflict,
    Failure,
    check_changes,
)

logger = get_logger(__name__)


class SqlEventStore(EventStore):
    backend = "sql"

    def __init__(
        self,
        engine: AsyncEngine,
        session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
    ):
        self._engine = engine
        self._session_factory = session_factory or create_session_factory(engine)

    async def create_schema(self) -> None:
        """Create tables directly. Production schemas come from Alembic."""
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("event_schema_created")

    async def put(self, record: EventRecord) -> StoreResult[EventRecord]:
        try:
            async with self._session_factory.begin() as session:
                session.add(Event.from_record(record))
        except IntegrityError:
            return Conflict(record.event_id, reason="already_exists")
        except SQLAlchemyError as e:
            return Failure(f"put failed: {e}", e)
        return Ok(record)

    async def get(self, event_id: str) -> StoreResult[EventRecord]:
        try:
            async with self._session_factory() as session:
                row = await session.get(Event, event_id)
                if row is None:
                    return NotFound(event_id)
                return Ok(row.to_record())
        except SQLAlchemyError as e:
            return Failure(f"get failed: {e}", e)

    async def scan(self, limit: int) -> StoreResult[list[EventRecord]]:
        query = select(Event).order_by(Event.created_at.asc(), Event.event_id.asc()).limit(limit)
        try:
            async with self._session_factory() as session:
                result = await session.execute(query)
                return Ok([row.to_record() for row in result.scalars().all()])
        except SQLAlchemyError as e:
            return Failure(f"scan failed: {e}", e)

    async def update(self, event_id: str, changes: dict[str, Any]) -> StoreResult[EventRecord]:
        check_changes(changes)
        try:
            async with self._session_factory.begin() as session:
                result = await session.execute(
                    update(Event)
                    .where(Event.event_id == event_id)
                    .values(**changes)
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount == 0:
                    return NotFound(event_id)

                refreshed = await session.execute(
                    select(Event)
                    .where(Event.event_id == event_id)
                    .execution_options(populate_existing=True)
                )
                return Ok(refreshed.scalar_one().to_record())
        except SQLAlchemyError as e:
            return Failure(f"update failed: {e}", e)

    async def delete(self, event_id: str) -> StoreResult[None]:
        try:
            async with self._session_factory.begin() as session:
                await session.execute(delete(Event).where(Event.event_id == event_id))
        except SQLAlchemyError as e:
            return Failure(f"delete failed: {e}", e)
        return Ok(None)

    async def close(self) -> None:
        await self._engine.dispose()
