"""
Event endpoints: CRUD plus presigned image upload.
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends, Response, status

from events_api.api.deps import get_settings_dep, get_store, get_upload_authorizer, read_json_object
from events_api.core.config import Settings
from events_api.schemas.event import EventListResponse, EventResponse, UploadUrlResponse
from events_api.services import event_service
from events_api.services.interfaces.store import EventStore
from events_api.services.interfaces.upload import UploadAuthorizer

router = APIRouter(prefix="/events", tags=["Events"])


@router.get("", response_model=EventListResponse)
async def list_events_endpoint(
    store: EventStore = Depends(get_store),
    settings: Settings = Depends(get_settings_dep),
):
    """List events, capped at EVENTS_PAGE_SIZE. No cursor."""
    records = await event_service.list_events(store, settings.EVENTS_PAGE_SIZE)
    return EventListResponse(items=[EventResponse.model_validate(r) for r in records])


@router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event_endpoint(
    payload: dict[str, Any] = Depends(read_json_object),
    store: EventStore = Depends(get_store),
):
    record = await event_service.create_event(store, payload)
    return EventResponse.model_validate(record)


@router.get("/{event_id}", response_model=EventResponse)
async def get_event_endpoint(event_id: str, store: EventStore = Depends(get_store)):
    record = await event_service.get_event(store, event_id)
    return EventResponse.model_validate(record)


@router.put("/{event_id}", response_model=EventResponse)
async def update_event_endpoint(
    event_id: str,
    payload: dict[str, Any] = Depends(read_json_object),
    store: EventStore = Depends(get_store),
):
    """Partial update: any subset of title, date, location, description."""
    record = await event_service.update_event(store, event_id, payload)
    return EventResponse.model_validate(record)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event_endpoint(event_id: str, store: EventStore = Depends(get_store)):
    """Delete an event. Returns 204 even when the event did not exist."""
    await event_service.delete_event(store, event_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{event_id}/upload-url", response_model=UploadUrlResponse)
async def upload_url_endpoint(
    event_id: str,
    payload: dict[str, Any] = Depends(read_json_object),
    store: EventStore = Depends(get_store),
    authorizer: Optional[UploadAuthorizer] = Depends(get_upload_authorizer),
    settings: Settings = Depends(get_settings_dep),
):
    """
    Issue a presigned PUT URL for the event image.
    The new imageKey is stored on the event before the URL is returned.
    """
    grant = await event_service.authorize_upload(
        store,
        authorizer,
        event_id,
        payload,
        allowed_content_types=tuple(settings.ALLOWED_IMAGE_CONTENT_TYPES),
    )
    return UploadUrlResponse(
        event_id=event_id,
        image_key=grant.key,
        upload_url=grant.url,
        method=grant.method,
        expires_in=grant.expires_in,
        content_type=grant.content_type,
    )
