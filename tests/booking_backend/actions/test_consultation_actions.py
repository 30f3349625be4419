from datetime import datetime, timedelta, timezone

import pytest

from booking_backend.actions import consultation_actions
from booking_backend.actions.result import ErrorKind
from booking_backend.models.consultation import Consultation
from booking_backend.services.errors import StorageError


def _in_days(days: int) -> datetime:
    return (datetime.now(timezone.utc) + timedelta(days=days)).replace(microsecond=0)


def _book(context, scheduled_at=None, **overrides):
    arguments = {
        'first_name': 'Jane',
        'last_name': 'Doe',
        'reason': 'Go over practice exam answers.',
        'scheduled_at': scheduled_at or _in_days(1),
    }
    arguments.update(overrides)
    return consultation_actions.create_consultation(context, **arguments)


def _snapshot(db_session, consultation_id: str) -> tuple:
    db_session.expire_all()
    row = db_session.query(Consultation).filter(Consultation.id == consultation_id).one()
    return (row.user_id, row.first_name, row.last_name, row.reason, row.datetime, row.is_complete, row.updated_at)


def test_create_consultation_returns_created_record(make_context, student_session, data_service) -> None:
    scheduled_at = _in_days(3)

    result = _book(make_context(access_token=student_session.access_token), scheduled_at=scheduled_at)

    record = result.data
    assert result.error is None
    assert record.id
    assert record.user_id == student_session.user.id
    assert (record.first_name, record.last_name, record.reason) == ('Jane', 'Doe', 'Go over practice exam answers.')
    assert record.datetime == scheduled_at
    assert record.is_complete is False
    assert record.created_at is not None
    assert record.updated_at is not None

    [stored] = data_service.list_consultations(student_session.user.id)
    assert stored == record


def test_create_consultation_accepts_iso_string(make_context, student_session) -> None:
    scheduled_at = _in_days(2)

    result = _book(
        make_context(access_token=student_session.access_token),
        scheduled_at=scheduled_at.strftime('%Y-%m-%dT%H:%M:%SZ'),
    )

    assert result.data.datetime == scheduled_at


def test_create_consultation_requires_authenticated_caller(make_context, db_session) -> None:
    result = _book(make_context())

    assert result.error.startswith('Unauthorized')
    assert result.error_kind is ErrorKind.UNAUTHORIZED
    assert db_session.query(Consultation).count() == 0


def test_create_consultation_rejects_past_datetime(make_context, student_session, service_calls, db_session) -> None:
    calls, _ = service_calls

    result = _book(make_context(access_token=student_session.access_token), scheduled_at=_in_days(-1))

    assert result.field_errors == {'datetime': 'Date and time must be in the future'}
    assert calls == []
    assert db_session.query(Consultation).count() == 0


def test_create_consultation_uses_context_clock(make_context, student_session) -> None:
    scheduled_at = _in_days(1)
    context = make_context(access_token=student_session.access_token, clock=lambda: scheduled_at)

    result = _book(context, scheduled_at=scheduled_at)

    assert result.field_errors == {'datetime': 'Date and time must be in the future'}


def test_create_consultation_reports_storage_failure(make_context, student_session, data_service, monkeypatch) -> None:
    def reject(**_kwargs):
        raise StorageError('Failed to create consultation')

    monkeypatch.setattr(data_service, 'insert_consultation', reject)

    result = _book(make_context(access_token=student_session.access_token))

    assert result.error == 'Failed to create consultation'
    assert result.error_kind is ErrorKind.STORAGE


def test_toggle_twice_restores_original_state(make_context, student_session, db_session) -> None:
    context = make_context(access_token=student_session.access_token)
    record = _book(context).data

    first = consultation_actions.toggle_consultation_complete(context, record.id, False)
    assert first.ok
    assert _snapshot(db_session, record.id)[5] is True

    second = consultation_actions.toggle_consultation_complete(context, record.id, True)
    assert second.ok
    assert _snapshot(db_session, record.id)[5] is False


def test_toggle_sets_negation_of_passed_state(make_context, student_session, db_session) -> None:
    context = make_context(access_token=student_session.access_token)
    record = _book(context).data

    consultation_actions.toggle_consultation_complete(context, record.id, True)

    assert _snapshot(db_session, record.id)[5] is False


def test_toggle_of_another_students_consultation_is_silent_no_op(
    make_context,
    student_session,
    other_student_session,
    db_session,
) -> None:
    record = _book(make_context(access_token=student_session.access_token)).data
    before = _snapshot(db_session, record.id)
    intruder = make_context(access_token=other_student_session.access_token)

    foreign = consultation_actions.toggle_consultation_complete(intruder, record.id, False)
    unknown = consultation_actions.toggle_consultation_complete(intruder, 'no-such-id', False)

    assert _snapshot(db_session, record.id) == before
    assert foreign == unknown
    assert foreign.ok
    assert foreign.data is None


def test_toggle_requires_authenticated_caller(make_context, student_session, db_session) -> None:
    record = _book(make_context(access_token=student_session.access_token)).data

    result = consultation_actions.toggle_consultation_complete(make_context(), record.id, False)

    assert result.error_kind is ErrorKind.UNAUTHORIZED
    assert _snapshot(db_session, record.id)[5] is False


@pytest.mark.parametrize('is_complete', ['false', None, 0])
def test_toggle_rejects_non_boolean_flag(make_context, service_calls, is_complete) -> None:
    calls, _ = service_calls

    result = consultation_actions.toggle_consultation_complete(make_context(), 'some-id', is_complete)

    assert result.field_errors == {'isComplete': 'Completion flag must be true or false'}
    assert calls == []


def test_toggle_reports_storage_failure(make_context, student_session, data_service, monkeypatch) -> None:
    def reject(**_kwargs):
        raise StorageError('Failed to update consultation')

    monkeypatch.setattr(data_service, 'set_consultation_complete', reject)

    result = consultation_actions.toggle_consultation_complete(
        make_context(access_token=student_session.access_token),
        'some-id',
        False,
    )

    assert result.error == 'Failed to update consultation'


def test_load_dashboard_redirects_anonymous_caller_to_login(make_context) -> None:
    assert consultation_actions.load_dashboard(make_context()).redirect_to == '/login'


def test_load_dashboard_redirects_to_error_without_student_record(make_context, data_service) -> None:
    user = data_service.sign_up('noprofile@example.com', 'Str0ng!Pass')
    session = data_service.issue_session(user)

    result = consultation_actions.load_dashboard(make_context(access_token=session.access_token))

    assert result.redirect_to == '/error'


def test_load_dashboard_lists_own_consultations_by_time(
    make_context,
    student_session,
    other_student_session,
) -> None:
    context = make_context(access_token=student_session.access_token)
    _book(context, scheduled_at=_in_days(5), reason='Later')
    _book(context, scheduled_at=_in_days(1), reason='Sooner')
    _book(make_context(access_token=other_student_session.access_token), reason='Someone else')

    result = consultation_actions.load_dashboard(context)

    assert (result.data.first_name, result.data.last_name) == ('Jane', 'Doe')
    assert [consultation.reason for consultation in result.data.consultations] == ['Sooner', 'Later']


@pytest.mark.parametrize('failing_read', ['get_user', 'get_student', 'list_consultations'])
def test_load_dashboard_redirects_to_error_when_a_read_fails(
    make_context,
    student_session,
    data_service,
    monkeypatch,
    failing_read: str,
) -> None:
    def unavailable(*_args, **_kwargs):
        raise StorageError('Failed to load consultations')

    monkeypatch.setattr(data_service, failing_read, unavailable)

    result = consultation_actions.load_dashboard(make_context(access_token=student_session.access_token))

    assert result.redirect_to == '/error'
    assert result.data is None
