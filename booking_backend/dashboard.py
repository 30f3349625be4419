"""Local list of the consultations shown on a student's dashboard.

Entries change only after the server confirms a create or toggle. Edits made
from other sessions are not picked up until the dashboard is loaded again.
"""

from booking_backend.actions.result import ActionResult
from booking_backend.services.models import ConsultationRecord


class ConsultationCache:
    def __init__(self, consultations: list[ConsultationRecord] | None = None) -> None:
        self._entries: dict[str, ConsultationRecord] = {
            consultation.id: consultation for consultation in consultations or []
        }

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, consultation_id: object) -> bool:
        return consultation_id in self._entries

    def get(self, consultation_id: str) -> ConsultationRecord | None:
        return self._entries.get(consultation_id)

    def apply_created(self, result: ActionResult) -> bool:
        if not result.ok or not isinstance(result.data, ConsultationRecord):
            return False
        self._entries[result.data.id] = result.data
        return True

    def apply_toggled(self, consultation_id: str, previous_is_complete: bool, result: ActionResult) -> bool:
        entry = self._entries.get(consultation_id)
        if entry is None or not result.ok:
            return False
        self._entries[consultation_id] = entry.model_copy(update={'is_complete': not previous_is_complete})
        return True

    def sorted(self) -> list[ConsultationRecord]:
        return sorted(self._entries.values(), key=lambda consultation: consultation.datetime)
