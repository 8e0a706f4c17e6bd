"""
User model. Users appear as applicants and as event creators.
"""

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from booth_api.db.base import Base, TimestampMixin


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)

    events = relationship("Event", back_populates="creator")
    requests = relationship("Request", back_populates="applicant")

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"
