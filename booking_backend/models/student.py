"""Student profile model definitions."""

from sqlalchemy import Column, DateTime, ForeignKey, String
from booking_backend.database import Base
from booking_backend.utils.dates import utc_now


class Student(Base):
    """Profile row created once at signup, keyed by the account id."""
    __tablename__ = "students"

    id = Column(String(36), ForeignKey("accounts.id", ondelete="CASCADE"), primary_key=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    phone = Column(String(32), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now)
