"""
Event service handling CRUD operations and image upload authorization.

Payloads are fully validated before any store call is issued, so a rejected
request never leaves a partial write behind. Store results are unwrapped
here: NotFound and Conflict become API errors, Failure becomes an
InternalFailure that the request middleware logs and answers with a 500.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from events_api.core.errors import (
    ConfigurationError,
    ConflictError,
    InternalFailure,
    MalformedInputError,
    NotFoundError,
    ValidationError,
)
from events_api.core.logging import get_logger
from events_api.core.metrics import record_event_operation, record_upload_authorization
from events_api.services.event_validation import CREATE_RULES, UPDATE_RULES, validate_payload
from events_api.services.interfaces.store import (
    EventRecord,
    EventStore,
    StoreResult,
    Ok,
    NotFound,
    Conflict,
    Failure,
)
from events_api.services.interfaces.upload import UploadAuthorizer, UploadGrant

logger = get_logger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"
DEFAULT_ALLOWED_CONTENT_TYPES = ("image/jpeg", "image/png", "image/webp")


def utc_now() -> str:
    """Current UTC time as ISO 8601 with millisecond precision and a Z suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _unwrap(result: StoreResult, operation: str, event_id: Optional[str] = None):
    if isinstance(result, Ok):
        return result.value

    if isinstance(result, NotFound):
        record_event_operation(operation, "not_found")
        raise NotFoundError("Event not found", eventId=result.key)

    if isinstance(result, Conflict):
        record_event_operation(operation, "conflict")
        logger.warning("event_store_conflict", operation=operation, event_id=result.key, reason=result.reason)
        raise ConflictError("Event was modified concurrently or already exists", eventId=result.key)

    if isinstance(result, Failure):
        record_event_operation(operation, "failure")
        logger.error("event_store_failure", operation=operation, event_id=event_id, detail=result.detail)
        raise InternalFailure(
            f"{operation} failed for event {event_id}: {result.detail}", result.error
        ) from result.error

    raise TypeError(f"Unexpected store result: {result!r}")


async def list_events(store: EventStore, limit: int = 50) -> list[EventRecord]:
    """List up to `limit` events, oldest first. No further pagination."""
    records = _unwrap(await store.scan(limit), "list")
    record_event_operation("list")
    return records


async def create_event(store: EventStore, payload: dict[str, Any]) -> EventRecord:
    """Validate a create payload and persist a new event with a fresh id."""
    values = validate_payload(CREATE_RULES, payload)

    now = utc_now()
    record = EventRecord(
        event_id=str(uuid.uuid4()),
        title=values["title"],
        date=values["date"],
        location=values.get("location"),
        description=values.get("description"),
        image_key=None,
        created_at=now,
        updated_at=now,
    )

    created = _unwrap(await store.put(record), "create", record.event_id)
    record_event_operation("create")
    logger.info("event_created", event_id=created.event_id, title=created.title)
    return created


async def get_event(store: EventStore, event_id: str) -> EventRecord:
    record = _unwrap(await store.get(event_id), "get", event_id)
    record_event_operation("get")
    return record


async def update_event(store: EventStore, event_id: str, payload: dict[str, Any]) -> EventRecord:
    """
    Apply a partial update.

    Omitted fields stay untouched, null clears location/description, and
    updatedAt is refreshed. A missing event is a terminal 404.
    """
    changes: dict[str, Any] = validate_payload(UPDATE_RULES, payload)
    if not changes:
        raise MalformedInputError("No updatable fields provided")

    changes["updated_at"] = utc_now()
    updated = _unwrap(await store.update(event_id, changes), "update", event_id)

    record_event_operation("update")
    logger.info("event_updated", event_id=event_id, fields=sorted(k for k in changes if k != "updated_at"))
    return updated


async def delete_event(store: EventStore, event_id: str) -> None:
    """Delete an event. Succeeds whether or not the event existed."""
    _unwrap(await store.delete(event_id), "delete", event_id)
    record_event_operation("delete")
    logger.info("event_deleted", event_id=event_id)


def check_content_type(raw: Any, allowed: tuple[str, ...] = DEFAULT_ALLOWED_CONTENT_TYPES) -> str:
    content_type = DEFAULT_CONTENT_TYPE if raw is None else raw

    if not isinstance(content_type, str) or "/" not in content_type:
        raise ValidationError(
            "contentType",
            'Field "contentType" must be a valid MIME type (e.g. image/jpeg)',
            code="type",
        )

    if content_type not in allowed:
        raise ValidationError(
            "contentType",
            f"Unsupported contentType. Allowed: {', '.join(allowed)}",
            code="unsupported",
            received=content_type,
        )
    return content_type


async def authorize_upload(
    store: EventStore,
    authorizer: Optional[UploadAuthorizer],
    event_id: str,
    payload: dict[str, Any],
    allowed_content_types: tuple[str, ...] = DEFAULT_ALLOWED_CONTENT_TYPES,
) -> UploadGrant:
    """
    Record a fresh image key on the event and issue a presigned upload for it.

    The key is recorded before signing so a grant is never handed out for an
    event that does not exist.
    """
    content_type = check_content_type(payload.get("contentType"), allowed_content_types)

    if authorizer is None:
        raise ConfigurationError("Missing env var EVENTS_BUCKET")

    image_key = f"events/{event_id}/{uuid.uuid4()}"
    changes = {"image_key": image_key, "updated_at": utc_now()}
    _unwrap(await store.update(event_id, changes), "upload", event_id)

    grant = await authorizer.authorize(image_key, content_type)

    record_event_operation("upload")
    record_upload_authorization(content_type)
    logger.info("upload_authorized", event_id=event_id, image_key=image_key, content_type=content_type)
    return grant
