"""Consultation model definitions."""

from uuid import uuid4

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String
from booking_backend.database import Base
from booking_backend.utils.dates import utc_now


class Consultation(Base):
    """Represents a consultation booked by a student."""
    __tablename__ = "consultations"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id = Column(String(36), ForeignKey("accounts.id", ondelete="CASCADE"), index=True, nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    reason = Column(String(500), nullable=False)
    datetime = Column(DateTime(timezone=True), nullable=False)
    is_complete = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)
