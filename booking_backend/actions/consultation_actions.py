import logging
from datetime import datetime

from pydantic import BaseModel

from booking_backend.actions.result import GENERIC_FAILURE_MESSAGE, ActionResult, ErrorKind, action_boundary
from booking_backend.auth.context import RequestContext
from booking_backend.core import config
from booking_backend.services.errors import ConfigurationError, DataServiceError
from booking_backend.services.models import ConsultationRecord
from booking_backend.utils.dates import parse_datetime
from booking_backend.validation.rules import CONSULTATION_CREATE_RULES, CONSULTATION_TOGGLE_RULES, validate

logger = logging.getLogger(__name__)

UNAUTHORIZED_MESSAGE = 'Unauthorized. Please sign in and try again.'
CREATE_FAILED_MESSAGE = 'Failed to create consultation'
UPDATE_FAILED_MESSAGE = 'Failed to update consultation'


class DashboardData(BaseModel):
    first_name: str
    last_name: str
    consultations: list[ConsultationRecord]


@action_boundary('create_consultation')
def create_consultation(
    context: RequestContext,
    first_name: str,
    last_name: str,
    reason: str,
    scheduled_at: str | datetime,
) -> ActionResult:
    payload = {
        'firstName': first_name,
        'lastName': last_name,
        'reason': reason,
        'datetime': scheduled_at,
    }
    validation = validate(CONSULTATION_CREATE_RULES, payload, now=context.clock())
    if not validation.ok:
        return ActionResult.invalid(validation.errors)

    try:
        caller = context.caller()
        if caller is None:
            return ActionResult.failure(ErrorKind.UNAUTHORIZED, UNAUTHORIZED_MESSAGE)

        consultation = context.data_service().insert_consultation(
            user_id=caller.id,
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            reason=reason.strip(),
            scheduled_at=parse_datetime(scheduled_at),
        )
    except ConfigurationError:
        return ActionResult.failure(ErrorKind.CONFIGURATION, GENERIC_FAILURE_MESSAGE)
    except DataServiceError:
        return ActionResult.failure(ErrorKind.STORAGE, CREATE_FAILED_MESSAGE)

    return ActionResult.success(consultation)


@action_boundary('toggle_consultation_complete')
def toggle_consultation_complete(context: RequestContext, consultation_id: str, is_complete: bool) -> ActionResult:
    """Flip the completion flag of one of the caller's consultations.

    ``is_complete`` is the state the caller last saw; the stored flag becomes its
    negation. Ids owned by someone else, or unknown ids, leave storage untouched
    and produce the same bare success so existence is never revealed.
    """
    validation = validate(
        CONSULTATION_TOGGLE_RULES,
        {'id': consultation_id, 'isComplete': is_complete},
        now=context.clock(),
    )
    if not validation.ok:
        return ActionResult.invalid(validation.errors)

    try:
        caller = context.caller()
        if caller is None:
            return ActionResult.failure(ErrorKind.UNAUTHORIZED, UNAUTHORIZED_MESSAGE)

        updated = context.data_service().set_consultation_complete(
            consultation_id=consultation_id,
            owner_id=caller.id,
            is_complete=not is_complete,
        )
    except ConfigurationError:
        return ActionResult.failure(ErrorKind.CONFIGURATION, GENERIC_FAILURE_MESSAGE)
    except DataServiceError:
        return ActionResult.failure(ErrorKind.STORAGE, UPDATE_FAILED_MESSAGE)

    if not updated:
        logger.info('Toggle by %s matched no consultation', caller.id)
    return ActionResult.success()


@action_boundary('load_dashboard')
def load_dashboard(context: RequestContext) -> ActionResult:
    try:
        caller = context.caller()
    except DataServiceError:
        return ActionResult.navigate(config.ERROR_PATH)

    if caller is None:
        return ActionResult.navigate(config.LOGIN_PATH)

    try:
        service = context.data_service()
        student = service.get_student(caller.id)
        if student is None:
            logger.warning('Account %s has no student record', caller.id)
            return ActionResult.navigate(config.ERROR_PATH)
        consultations = service.list_consultations(caller.id)
    except DataServiceError:
        return ActionResult.navigate(config.ERROR_PATH)

    return ActionResult.success(
        DashboardData(
            first_name=student.first_name,
            last_name=student.last_name,
            consultations=sorted(consultations, key=lambda consultation: consultation.datetime),
        )
    )
