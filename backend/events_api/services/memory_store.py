"""
In-process event store.
Used by the test suite and for running the API without external services.
"""

import asyncio
from typing import Any

from events_api.services.interfaces.store import (
    EventRecord,
    EventStore,
    StoreResult,
    Ok,
    NotFound,
    Conflict,
    check_changes,
)


class InMemoryEventStore(EventStore):
    """
    Dict-backed store. A single asyncio.Lock serializes writes, which gives
    the per-key atomicity the interface promises.
    """

    backend = "memory"

    def __init__(self):
        self._items: dict[str, EventRecord] = {}
        self._lock = asyncio.Lock()

    async def put(self, record: EventRecord) -> StoreResult[EventRecord]:
        async with self._lock:
            if record.event_id in self._items:
                return Conflict(record.event_id, reason="already_exists")
            self._items[record.event_id] = record
            return Ok(record)

    async def get(self, event_id: str) -> StoreResult[EventRecord]:
        record = self._items.get(event_id)
        if record is None:
            return NotFound(event_id)
        return Ok(record)

    async def scan(self, limit: int) -> StoreResult[list[EventRecord]]:
        ordered = sorted(self._items.values(), key=lambda r: (r.created_at, r.event_id))
        return Ok(ordered[:limit])

    async def update(self, event_id: str, changes: dict[str, Any]) -> StoreResult[EventRecord]:
        check_changes(changes)
        async with self._lock:
            current = self._items.get(event_id)
            if current is None:
                return NotFound(event_id)
            updated = current.apply(changes)
            self._items[event_id] = updated
            return Ok(updated)

    async def delete(self, event_id: str) -> StoreResult[None]:
        async with self._lock:
            self._items.pop(event_id, None)
        return Ok(None)

    def __len__(self) -> int:
        return len(self._items)
