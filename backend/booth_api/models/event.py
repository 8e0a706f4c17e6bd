"""
Event and the booths offered within it.

Requests never reference an Event directly: they point at an EventBooth,
and the event is reached through EventBooth.event.
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Numeric, Index
from sqlalchemy.orm import relationship

from booth_api.db.base import Base, TimestampMixin


class Event(Base, TimestampMixin):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    date = Column(DateTime(timezone=True), nullable=False)
    local = Column(String(255), nullable=False)
    description = Column(String(1000), nullable=True)
    creator_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    creator = relationship("User", back_populates="events")
    booths = relationship("EventBooth", back_populates="event")

    __table_args__ = (
        # Inbox query filters on the creator
        Index("ix_events_creator_id", "creator_id"),
    )

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, name={self.name}, creator={self.creator_id})>"


class EventBooth(Base, TimestampMixin):
    __tablename__ = "event_booths"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    price = Column(Numeric(10, 2), nullable=True)

    event = relationship("Event", back_populates="booths")
    requests = relationship("Request", back_populates="event_booth")

    def __repr__(self) -> str:
        return f"<EventBooth(id={self.id}, event={self.event_id}, name={self.name})>"
