"""Blocked slot model definitions."""

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, UniqueConstraint

from backend.core.clock import utcnow
from backend.database import Base


class BlockedSlot(Base):
    """A provider-declared unavailable slot."""
    __tablename__ = "blocked_slots"
    __table_args__ = (
        UniqueConstraint('faculty_id', 'date', 'time', name='uq_blocked_slots_faculty_slot'),
    )

    id = Column(Integer, primary_key=True)
    faculty_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    date = Column(Date, nullable=False)
    time = Column(String, nullable=False)
    reason = Column(String)
    created_at = Column(DateTime(timezone=True), default=utcnow)
