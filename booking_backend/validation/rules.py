"""Declarative constraint tables for every form and action payload.

Each payload type maps wire field names to an ordered tuple of constraints.
``validate`` checks every field and keeps the first failing message per field,
so a caller can report all violations at once. It never raises.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Mapping

from email_validator import EmailNotValidError, validate_email

from booking_backend.utils.dates import parse_datetime, utc_now

NAME_MAX_LENGTH = 100
REASON_MAX_LENGTH = 500
PASSWORD_MIN_LENGTH = 8

PHONE_PATTERN = re.compile(r'\+?[0-9\s\-()]{7,15}')
DIGIT_PATTERN = re.compile(r'[0-9]')
UPPERCASE_PATTERN = re.compile(r'[A-Z]')
LOWERCASE_PATTERN = re.compile(r'[a-z]')
SPECIAL_CHARACTER_PATTERN = re.compile(r"[@$!%*?&#^()_+\-=\[\]{};':\"\\|,.<>/~]")


@dataclass(frozen=True)
class Constraint:
    message: str
    check: Callable[[Any, Mapping[str, Any], datetime], bool]
    applies_to_missing: bool = False


@dataclass(frozen=True)
class ValidationResult:
    errors: Mapping[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


def is_missing(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def required(message: str) -> Constraint:
    return Constraint(message, lambda value, _payload, _now: not is_missing(value), applies_to_missing=True)


def max_length(limit: int, message: str) -> Constraint:
    return Constraint(message, lambda value, _payload, _now: len(str(value)) <= limit)


def min_length(limit: int, message: str) -> Constraint:
    return Constraint(message, lambda value, _payload, _now: len(str(value)) >= limit)


def contains(pattern: re.Pattern, message: str) -> Constraint:
    return Constraint(message, lambda value, _payload, _now: pattern.search(str(value)) is not None)


def excludes(pattern: re.Pattern, message: str) -> Constraint:
    return Constraint(message, lambda value, _payload, _now: pattern.search(str(value)) is None)


def full_match(pattern: re.Pattern, message: str) -> Constraint:
    return Constraint(message, lambda value, _payload, _now: pattern.fullmatch(str(value)) is not None)


def _is_email(value: Any) -> bool:
    try:
        validate_email(
            str(value).strip(),
            check_deliverability=False,
            globally_deliverable=False,
            test_environment=True,
        )
    except EmailNotValidError:
        return False
    return True


def email_address(message: str) -> Constraint:
    return Constraint(message, lambda value, _payload, _now: _is_email(value))


def matches_field(other: str, message: str) -> Constraint:
    return Constraint(message, lambda value, payload, _now: value == payload.get(other))


def _is_future(value: Any, now: datetime) -> bool:
    try:
        return parse_datetime(value) > now
    except (TypeError, ValueError):
        return False


def in_future(message: str) -> Constraint:
    return Constraint(message, lambda value, _payload, now: _is_future(value, now))


def boolean(message: str) -> Constraint:
    return Constraint(message, lambda value, _payload, _now: isinstance(value, bool), applies_to_missing=True)


def _person_name(label: str, *, allow_digits: bool) -> tuple[Constraint, ...]:
    constraints = [
        required(f'{label} is required'),
        max_length(NAME_MAX_LENGTH, f'{label} must be under {NAME_MAX_LENGTH} characters'),
    ]
    if not allow_digits:
        constraints.append(excludes(DIGIT_PATTERN, 'Must not contain numbers'))
    return tuple(constraints)


LOGIN_RULES: dict[str, tuple[Constraint, ...]] = {
    'email': (
        required('Email is required'),
        email_address('Invalid email address'),
    ),
    'password': (
        required('Password is required'),
    ),
}

SIGNUP_RULES: dict[str, tuple[Constraint, ...]] = {
    'firstName': _person_name('First name', allow_digits=False),
    'lastName': _person_name('Last name', allow_digits=False),
    'email': (
        required('Email is required'),
        email_address('Invalid email address'),
    ),
    'phone': (
        required('Phone number is required'),
        full_match(PHONE_PATTERN, 'Please enter a valid phone number'),
    ),
    'password': (
        required('Password is required'),
        min_length(PASSWORD_MIN_LENGTH, f'Password must be at least {PASSWORD_MIN_LENGTH} characters'),
        contains(UPPERCASE_PATTERN, 'Password must contain at least one uppercase letter'),
        contains(LOWERCASE_PATTERN, 'Password must contain at least one lowercase letter'),
        contains(DIGIT_PATTERN, 'Password must contain at least one number'),
        contains(SPECIAL_CHARACTER_PATTERN, 'Password must contain at least one special character'),
    ),
    'confirmPassword': (
        required('Please confirm your password'),
        matches_field('password', 'Passwords must match'),
    ),
}

CONSULTATION_CREATE_RULES: dict[str, tuple[Constraint, ...]] = {
    'firstName': _person_name('First name', allow_digits=True),
    'lastName': _person_name('Last name', allow_digits=True),
    'reason': (
        required('Reason for consultation is required'),
        max_length(REASON_MAX_LENGTH, f'Reason must be under {REASON_MAX_LENGTH} characters'),
    ),
    'datetime': (
        required('Date and time is required'),
        in_future('Date and time must be in the future'),
    ),
}

CONSULTATION_TOGGLE_RULES: dict[str, tuple[Constraint, ...]] = {
    'id': (
        required('Consultation id is required'),
    ),
    'isComplete': (
        boolean('Completion flag must be true or false'),
    ),
}


def validate(
    rules: Mapping[str, tuple[Constraint, ...]],
    payload: Mapping[str, Any],
    now: datetime | None = None,
) -> ValidationResult:
    checked_at = now or utc_now()
    errors: dict[str, str] = {}

    for field_name, constraints in rules.items():
        value = payload.get(field_name)
        missing = is_missing(value)
        for constraint in constraints:
            if missing and not constraint.applies_to_missing:
                continue
            if not constraint.check(value, payload, checked_at):
                errors[field_name] = constraint.message
                break

    return ValidationResult(errors=errors)
