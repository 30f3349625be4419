import functools
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = 'Something went wrong. Please try again later.'


class ErrorKind(str, Enum):
    CONFIGURATION = 'configuration'
    VALIDATION = 'validation'
    AUTHENTICATION = 'authentication'
    UNAUTHORIZED = 'unauthorized'
    STORAGE = 'storage'


@dataclass(frozen=True)
class ActionResult:
    """Uniform outcome of an action handler.

    Exactly one of ``error``, ``data`` or ``redirect_to`` is meaningful; a
    result with none of them is a bare success.
    """

    error: str | None = None
    error_kind: ErrorKind | None = None
    field_errors: Mapping[str, str] = field(default_factory=dict)
    data: Any = None
    redirect_to: str | None = None
    session_token: str | None = None
    clear_session: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, data: Any = None) -> 'ActionResult':
        return cls(data=data)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> 'ActionResult':
        return cls(error=message, error_kind=kind)

    @classmethod
    def invalid(cls, field_errors: Mapping[str, str]) -> 'ActionResult':
        first_message = next(iter(field_errors.values()))
        return cls(error=first_message, error_kind=ErrorKind.VALIDATION, field_errors=dict(field_errors))

    @classmethod
    def navigate(cls, path: str, session_token: str | None = None, clear_session: bool = False) -> 'ActionResult':
        return cls(redirect_to=path, session_token=session_token, clear_session=clear_session)


def action_boundary(operation: str) -> Callable:
    """Turn anything a handler did not anticipate into a generic failure."""

    def decorator(handler: Callable[..., ActionResult]) -> Callable[..., ActionResult]:
        @functools.wraps(handler)
        def wrapper(*args, **kwargs) -> ActionResult:
            try:
                return handler(*args, **kwargs)
            except Exception:
                logger.exception('Unhandled failure in %s', operation)
                return ActionResult.failure(ErrorKind.CONFIGURATION, GENERIC_FAILURE_MESSAGE)

        return wrapper

    return decorator
