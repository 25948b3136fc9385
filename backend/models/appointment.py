"""Appointment model definitions."""

from sqlalchemy import Column, Date, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from backend.core.clock import utcnow
from backend.database import Base


class Appointment(Base):
    """A student's booking of one slot with a provider."""
    __tablename__ = "appointments"
    __table_args__ = (
        Index('idx_appointments_faculty_slot', 'faculty_id', 'date', 'time'),
        Index('idx_appointments_student_date', 'student_id', 'date'),
    )

    id = Column(Integer, primary_key=True)
    student_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    faculty_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    date = Column(Date, nullable=False)
    time = Column(String, nullable=False)  # slot label, e.g. "12:15 PM"
    category = Column(String, index=True)
    reason = Column(Text, default='')
    status = Column(String, nullable=False, default='WAITING', index=True)
    transcript_path = Column(String)
    payment_proof_path = Column(String)
    notes = Column(Text, default='')
    decided_by_id = Column(Integer)
    decided_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    student = relationship('User', foreign_keys=[student_id])
    faculty = relationship('User', foreign_keys=[faculty_id])
