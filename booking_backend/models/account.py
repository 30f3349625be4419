"""Identity model definitions."""

from uuid import uuid4

from sqlalchemy import Column, DateTime, ForeignKey, String
from booking_backend.database import Base
from booking_backend.utils.dates import utc_now


class Account(Base):
    """Represents a sign-in identity. Raw passwords are never stored."""
    __tablename__ = "accounts"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now)


class AuthSession(Base):
    """Represents an issued access token; the id is the token's jti claim."""
    __tablename__ = "auth_sessions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    account_id = Column(String(36), ForeignKey("accounts.id", ondelete="CASCADE"), index=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    revoked_at = Column(DateTime(timezone=True), nullable=True)
