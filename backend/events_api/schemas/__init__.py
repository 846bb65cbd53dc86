from events_api.schemas.event import EventResponse, EventListResponse, UploadUrlResponse

__all__ = [
    "EventResponse", "EventListResponse", "UploadUrlResponse",
]
