"""
Pydantic schemas for event responses.

Request bodies are not parsed into models: the handlers need to tell a
missing key from an explicit null, and report each field violation with its
own message, so payloads go through events_api.services.event_validation.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class EventResponse(CamelModel):
    event_id: str
    title: str
    date: str
    location: Optional[str] = None
    description: Optional[str] = None
    image_key: Optional[str] = None
    created_at: str
    updated_at: str


class EventListResponse(BaseModel):
    items: list[EventResponse]


class UploadUrlResponse(CamelModel):
    event_id: str
    image_key: str
    upload_url: str
    method: str = "PUT"
    expires_in: int
    content_type: str
