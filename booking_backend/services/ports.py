from datetime import datetime
from typing import Protocol

from booking_backend.services.models import ConsultationRecord, Identity, IssuedSession, StudentRecord


class DataService(Protocol):
    """Identity and storage operations the action handlers depend on.

    Implementations raise ``AuthError``, ``StorageError`` or
    ``ConfigurationError`` and never leak driver exceptions.
    """

    def sign_up(self, email: str, password: str) -> Identity | None: ...
    def sign_in_with_password(self, email: str, password: str) -> IssuedSession: ...
    def issue_session(self, user: Identity) -> IssuedSession: ...
    def sign_out(self, access_token: str) -> None: ...
    def get_user(self, access_token: str | None) -> Identity | None: ...
    def delete_user(self, user_id: str) -> None: ...

    def insert_student(self, user_id: str, first_name: str, last_name: str, phone: str) -> StudentRecord: ...
    def get_student(self, user_id: str) -> StudentRecord | None: ...

    def insert_consultation(
        self,
        user_id: str,
        first_name: str,
        last_name: str,
        reason: str,
        scheduled_at: datetime,
    ) -> ConsultationRecord: ...

    def set_consultation_complete(self, consultation_id: str, owner_id: str, is_complete: bool) -> int:
        """Update the row matching both id and owner. Returns rows affected."""
        ...

    def list_consultations(self, owner_id: str) -> list[ConsultationRecord]: ...

    def close(self) -> None: ...
