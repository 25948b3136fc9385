"""User model definitions."""

from sqlalchemy import Column, DateTime, Integer, String

from backend.core.clock import utcnow
from backend.database import Base

PROVIDER_ROLES = {'faculty', 'staff'}
USER_ROLES = {'student', 'faculty', 'staff', 'admin'}


class User(Base):
    """Represents an application user (student, faculty, staff or admin)."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    name = Column(String)
    hashed_password = Column(String, nullable=False)
    role = Column(String, nullable=False, index=True)  # student/faculty/staff/admin
    staff_category = Column(String, index=True)  # e.g. Registration, Accounting, Advising
    created_at = Column(DateTime(timezone=True), default=utcnow)

    @property
    def display_name(self) -> str:
        return self.name or self.username
