import logging

from booking_backend.actions.result import GENERIC_FAILURE_MESSAGE, ActionResult, ErrorKind, action_boundary
from booking_backend.auth.context import RequestContext
from booking_backend.core import config
from booking_backend.services.errors import AuthError, ConfigurationError, DataServiceError
from booking_backend.validation.rules import LOGIN_RULES, SIGNUP_RULES, validate

logger = logging.getLogger(__name__)

USER_CREATION_FAILED_MESSAGE = 'Failed to create new user. Please try again later.'
STUDENT_RECORD_FAILED_MESSAGE = 'Failed to create student record'
SESSION_FAILED_MESSAGE = 'Your account was created but we could not sign you in. Please log in.'


@action_boundary('login')
def login(context: RequestContext, email: str, password: str) -> ActionResult:
    validation = validate(LOGIN_RULES, {'email': email, 'password': password}, now=context.clock())
    if not validation.ok:
        return ActionResult.invalid(validation.errors)

    try:
        session = context.data_service().sign_in_with_password(email, password)
    except ConfigurationError:
        return ActionResult.failure(ErrorKind.CONFIGURATION, GENERIC_FAILURE_MESSAGE)
    except AuthError as exc:
        return ActionResult.failure(ErrorKind.AUTHENTICATION, exc.message)
    except DataServiceError as exc:
        return ActionResult.failure(ErrorKind.STORAGE, exc.message)

    return ActionResult.navigate(config.DASHBOARD_PATH, session_token=session.access_token)


@action_boundary('signup')
def signup(
    context: RequestContext,
    email: str,
    password: str,
    confirm_password: str,
    first_name: str,
    last_name: str,
    phone: str,
) -> ActionResult:
    payload = {
        'firstName': first_name,
        'lastName': last_name,
        'email': email,
        'phone': phone,
        'password': password,
        'confirmPassword': confirm_password,
    }
    validation = validate(SIGNUP_RULES, payload, now=context.clock())
    if not validation.ok:
        return ActionResult.invalid(validation.errors)

    try:
        service = context.data_service()
        user = service.sign_up(email, password)
    except ConfigurationError:
        return ActionResult.failure(ErrorKind.CONFIGURATION, GENERIC_FAILURE_MESSAGE)
    except DataServiceError as exc:
        return ActionResult.failure(ErrorKind.AUTHENTICATION, exc.message)

    if user is None:
        return ActionResult.failure(ErrorKind.STORAGE, USER_CREATION_FAILED_MESSAGE)

    try:
        service.insert_student(user.id, first_name.strip(), last_name.strip(), phone.strip())
    except DataServiceError:
        _discard_orphaned_identity(context, user.id)
        return ActionResult.failure(ErrorKind.STORAGE, STUDENT_RECORD_FAILED_MESSAGE)

    try:
        session = service.issue_session(user)
    except DataServiceError:
        logger.warning('Account %s created but no session could be issued', user.id)
        return ActionResult.failure(ErrorKind.STORAGE, SESSION_FAILED_MESSAGE)

    return ActionResult.navigate(config.DASHBOARD_PATH, session_token=session.access_token)


def _discard_orphaned_identity(context: RequestContext, user_id: str) -> None:
    # An identity without a profile can never reach the dashboard.
    logger.warning('Student record insert failed for account %s; deleting the account', user_id)
    try:
        context.data_service().delete_user(user_id)
    except DataServiceError:
        logger.exception('Could not delete orphaned account %s', user_id)


def logout(context: RequestContext) -> ActionResult:
    """Sign out if possible; the caller is sent to the login page either way."""
    if context.access_token:
        try:
            context.data_service().sign_out(context.access_token)
        except DataServiceError as exc:
            logger.info('Sign-out did not complete: %s', exc.message)
        except Exception:
            logger.exception('Unhandled failure in logout')

    return ActionResult.navigate(config.LOGIN_PATH, clear_session=True)
