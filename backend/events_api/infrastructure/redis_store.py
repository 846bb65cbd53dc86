"""
Redis-backed event store.

LAYOUT
======

  EVENT#{event_id}     JSON document of the event record
  EVENT#__index__      sorted set of event ids scored by creation time (ms)

Creation uses SET NX so an existing id is never overwritten.

UPDATE STRATEGY: Optimistic WATCH/MULTI with Retry
==================================================

  1. WATCH the event key
  2. GET the current document; missing key -> NotFound
  3. MULTI / SET merged document / EXEC
  4. If EXEC aborts (WatchError), another writer touched the key -> retry

After MAX_RETRY_ATTEMPTS lost races the update returns Conflict. The retry
belongs to the store; callers never retry.
"""

import json
from datetime import datetime
from typing import Any, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError, WatchError

from events_api.core.logging import get_logger
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

MAX_RETRY_ATTEMPTS = 3


def _created_score(record: EventRecord) -> float:
    created = datetime.fromisoformat(record.created_at.replace("Z", "+00:00"))
    return created.timestamp() * 1000


class RedisEventStore(EventStore):
    backend = "redis"

    def __init__(self, client: redis.Redis, key_prefix: str = "EVENT#"):
        self._redis = client
        self._prefix = key_prefix
        self._index_key = f"{key_prefix}__index__"

    @classmethod
    def from_url(cls, url: str, key_prefix: str = "EVENT#") -> "RedisEventStore":
        client = redis.from_url(
            url,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
            retry_on_timeout=True,
        )
        return cls(client, key_prefix=key_prefix)

    def _key(self, event_id: str) -> str:
        return f"{self._prefix}{event_id}"

    @staticmethod
    def _decode(raw: Optional[str]) -> Optional[EventRecord]:
        if raw is None:
            return None
        return EventRecord.from_dict(json.loads(raw))

    async def put(self, record: EventRecord) -> StoreResult[EventRecord]:
        try:
            async with self._redis.pipeline(transaction=True) as pipe:
                pipe.set(self._key(record.event_id), json.dumps(record.to_dict()), nx=True)
                pipe.zadd(self._index_key, {record.event_id: _created_score(record)}, nx=True)
                created, _ = await pipe.execute()
        except RedisError as e:
            return Failure(f"put failed: {e}", e)

        if not created:
            return Conflict(record.event_id, reason="already_exists")
        return Ok(record)

    async def get(self, event_id: str) -> StoreResult[EventRecord]:
        try:
            record = self._decode(await self._redis.get(self._key(event_id)))
        except RedisError as e:
            return Failure(f"get failed: {e}", e)

        if record is None:
            return NotFound(event_id)
        return Ok(record)

    async def scan(self, limit: int) -> StoreResult[list[EventRecord]]:
        if limit <= 0:
            return Ok([])
        try:
            ids = await self._redis.zrange(self._index_key, 0, limit - 1)
            if not ids:
                return Ok([])
            raws = await self._redis.mget([self._key(event_id) for event_id in ids])
        except RedisError as e:
            return Failure(f"scan failed: {e}", e)

        # Documents deleted between ZRANGE and MGET come back as None
        records = [self._decode(raw) for raw in raws]
        return Ok([r for r in records if r is not None])

    async def update(self, event_id: str, changes: dict[str, Any]) -> StoreResult[EventRecord]:
        check_changes(changes)
        key = self._key(event_id)

        try:
            async with self._redis.pipeline(transaction=True) as pipe:
                for attempt in range(1, MAX_RETRY_ATTEMPTS + 1):
                    try:
                        await pipe.watch(key)
                        current = self._decode(await pipe.get(key))
                        if current is None:
                            await pipe.unwatch()
                            return NotFound(event_id)

                        updated = current.apply(changes)
                        pipe.multi()
                        pipe.set(key, json.dumps(updated.to_dict()))
                        await pipe.execute()
                        return Ok(updated)
                    except WatchError:
                        logger.info(
                            "event_update_retry",
                            event_id=event_id,
                            attempt=attempt,
                            reason="watch_conflict",
                        )
                        await pipe.reset()
        except RedisError as e:
            return Failure(f"update failed: {e}", e)

        return Conflict(event_id, reason="contention")

    async def delete(self, event_id: str) -> StoreResult[None]:
        try:
            async with self._redis.pipeline(transaction=True) as pipe:
                pipe.delete(self._key(event_id))
                pipe.zrem(self._index_key, event_id)
                await pipe.execute()
        except RedisError as e:
            return Failure(f"delete failed: {e}", e)
        return Ok(None)

    async def close(self) -> None:
        await self._redis.aclose()
