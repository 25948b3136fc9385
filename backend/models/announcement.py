"""Announcement model definitions."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String

from backend.core.clock import utcnow
from backend.database import Base


class Announcement(Base):
    __tablename__ = "announcements"

    id = Column(Integer, primary_key=True)
    message = Column(String, nullable=False)
    active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
