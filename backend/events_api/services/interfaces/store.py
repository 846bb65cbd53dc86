"""
Event store interface.

Every operation returns a tagged result instead of raising, so callers
branch on the result type:

    Ok(value)            the operation succeeded
    NotFound(key)        the targeted event does not exist
    Conflict(key, ...)   the write collided (duplicate id, lost contention)
    Failure(detail, ...) the backend failed; detail is for the logs only

Implementations:
- InMemoryEventStore: dict guarded by an asyncio.Lock (tests, local runs)
- SqlEventStore: SQLAlchemy async ORM
- RedisEventStore: one JSON document per key, WATCH/MULTI updates
"""

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, replace
from typing import Any, Generic, Optional, TypeVar, Union

T = TypeVar("T")

# Attributes an update may change. event_id and created_at are immutable.
MUTABLE_FIELDS = frozenset(
    {"title", "date", "location", "description", "image_key", "updated_at"}
)


@dataclass(frozen=True)
class EventRecord:
    event_id: str
    title: str
    date: str
    created_at: str
    updated_at: str
    location: Optional[str] = None
    description: Optional[str] = None
    image_key: Optional[str] = None

    def apply(self, changes: dict[str, Any]) -> "EventRecord":
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EventRecord":
        return cls(**data)


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class NotFound:
    key: str


@dataclass(frozen=True)
class Conflict:
    key: str
    reason: str = "conflict"


@dataclass(frozen=True)
class Failure:
    detail: str
    error: Optional[BaseException] = None


StoreResult = Union[Ok[T], NotFound, Conflict, Failure]


def check_changes(changes: dict[str, Any]) -> None:
    unknown = set(changes) - MUTABLE_FIELDS
    if unknown:
        raise ValueError(f"Cannot update immutable or unknown fields: {sorted(unknown)}")


class EventStore(ABC):
    """
    Persistent key-value collaborator holding events keyed by event_id.

    Guarantees atomicity per key only; there are no cross-item transactions.
    """

    backend: str = "abstract"

    @abstractmethod
    async def put(self, record: EventRecord) -> StoreResult[EventRecord]:
        """
        Insert a new event.

        Returns:
            Ok(record) on success
            Conflict if an event with the same id already exists
        """

    @abstractmethod
    async def get(self, event_id: str) -> StoreResult[EventRecord]:
        """Returns Ok(record) or NotFound."""

    @abstractmethod
    async def scan(self, limit: int) -> StoreResult[list[EventRecord]]:
        """Return at most `limit` events, oldest first."""

    @abstractmethod
    async def update(self, event_id: str, changes: dict[str, Any]) -> StoreResult[EventRecord]:
        """
        Apply `changes` to an existing event. Never creates.

        Returns:
            Ok(updated record)
            NotFound if the event does not exist
        """

    @abstractmethod
    async def delete(self, event_id: str) -> StoreResult[None]:
        """Remove an event. Deleting a missing id still returns Ok(None)."""

    async def close(self) -> None:
        """Release connections held by the store."""
