"""
Event table.

Key design decisions:
- `event_id` is a UUID4 string generated by the API, never by the client
- `date` is kept as the normalized ISO 8601 text the client sent, so reads
  return exactly what was validated
- Timestamps are ISO 8601 UTC strings with millisecond precision
- Index on `created_at` backs the oldest-first listing
"""

from sqlalchemy import Column, String, Index, CheckConstraint

from events_api.core.validation import MAX_TITLE, MAX_LOCATION, MAX_DESCRIPTION
from events_api.db.base import Base
from events_api.services.interfaces.store import EventRecord


class Event(Base):
    __tablename__ = "events"

    event_id = Column(String(36), primary_key=True)
    title = Column(String(MAX_TITLE), nullable=False)
    date = Column(String(40), nullable=False)
    location = Column(String(MAX_LOCATION), nullable=True)
    description = Column(String(MAX_DESCRIPTION), nullable=True)
    image_key = Column(String(255), nullable=True)
    created_at = Column(String(32), nullable=False)
    updated_at = Column(String(32), nullable=False)

    __table_args__ = (
        CheckConstraint("length(title) > 0", name="check_event_title_not_empty"),
        # Oldest-first listing
        Index("ix_events_created_at", "created_at"),
    )

    @classmethod
    def from_record(cls, record: EventRecord) -> "Event":
        return cls(**record.to_dict())

    def to_record(self) -> EventRecord:
        return EventRecord(
            event_id=self.event_id,
            title=self.title,
            date=self.date,
            location=self.location,
            description=self.description,
            image_key=self.image_key,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    def __repr__(self) -> str:
        return f"<Event(event_id={self.event_id}, title={self.title})>"
