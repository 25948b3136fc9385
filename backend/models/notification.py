"""Notification model definitions."""

from sqlalchemy import Boolean, Column, DateTime, Index, Integer, String, Text

from backend.core.clock import utcnow
from backend.database import Base


class Notification(Base):
    """A message for one recipient, e.g. a decision on their appointment."""
    __tablename__ = "notifications"
    __table_args__ = (Index('idx_notifications_recipient_read', 'to_user_id', 'read'),)

    id = Column(Integer, primary_key=True)
    to_user_id = Column(Integer, nullable=False)
    title = Column(String, nullable=False)
    body = Column(Text, nullable=False)
    read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
