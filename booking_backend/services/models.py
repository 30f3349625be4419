"""Records returned by the data service."""

from datetime import datetime

from pydantic import BaseModel, field_validator

from booking_backend.utils.dates import as_utc


class Identity(BaseModel):
    id: str
    email: str


class IssuedSession(BaseModel):
    access_token: str
    expires_at: datetime
    user: Identity


class StudentRecord(BaseModel):
    id: str
    first_name: str
    last_name: str
    phone: str

    class Config:
        from_attributes = True


class ConsultationRecord(BaseModel):
    id: str
    user_id: str
    first_name: str
    last_name: str
    reason: str
    datetime: datetime
    is_complete: bool = False
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

    @field_validator('datetime', 'created_at', 'updated_at')
    @classmethod
    def normalize_timezone(cls, value: datetime) -> datetime:
        return as_utc(value)
