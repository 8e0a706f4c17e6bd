"""
Booth application request.

Key design decisions:
- status is stored as a one-character code ('O', 'A', 'D') but exposed as
  RequestStatus; unknown codes fail on load instead of passing through
- At most one ACCEPTED request per event_booth_id. This is not a database
  constraint, RequestStore.accept_and_decline_others maintains it
"""

import enum

from sqlalchemy import Column, Integer, ForeignKey, Enum
from sqlalchemy.orm import relationship

from booth_api.db.base import Base, TimestampMixin


class RequestStatus(str, enum.Enum):
    OPEN = "O"
    ACCEPTED = "A"
    DECLINED = "D"


class Request(Base, TimestampMixin):
    __tablename__ = "requests"

    id = Column(Integer, primary_key=True, index=True)
    event_booth_id = Column(Integer, ForeignKey("event_booths.id"), nullable=False, index=True)
    applicant_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    status = Column(
        Enum(
            RequestStatus,
            name="request_status",
            native_enum=False,
            length=1,
            create_constraint=True,
            validate_strings=True,
            values_callable=lambda x: [e.value for e in x],
        ),
        nullable=False,
        default=RequestStatus.OPEN,
    )

    event_booth = relationship("EventBooth", back_populates="requests")
    applicant = relationship("User", back_populates="requests")

    def __repr__(self) -> str:
        return f"<Request(id={self.id}, booth={self.event_booth_id}, applicant={self.applicant_id}, status={self.status})>"
