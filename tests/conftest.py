import os
import time

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault('DATABASE_URL', 'sqlite:///:memory:')

from booking_backend.auth.context import RequestContext  # noqa: E402
from booking_backend.database import Base  # noqa: E402
from booking_backend.models import account, consultation, student  # noqa: E402,F401
from booking_backend.services.sql_data_service import SqlAlchemyDataService  # noqa: E402

STUDENT_EMAIL = 'student@example.com'
STUDENT_PASSWORD = 'Str0ng!Pass'


@pytest.fixture
def db_session():
    engine = create_engine('sqlite://', connect_args={'check_same_thread': False}, poolclass=StaticPool)
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    db = testing_session_local()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def data_service(db_session):
    return SqlAlchemyDataService(db_session)


@pytest.fixture
def service_calls(data_service):
    """Records every time a handler opens the data service."""
    calls: list[str] = []

    def factory():
        calls.append('open')
        return data_service

    return calls, factory


@pytest.fixture
def make_context(service_calls):
    _calls, factory = service_calls

    def _make(access_token: str | None = None, **kwargs) -> RequestContext:
        return RequestContext(service_factory=factory, access_token=access_token, **kwargs)

    return _make


@pytest.fixture
def student_session(data_service):
    user = data_service.sign_up(STUDENT_EMAIL, STUDENT_PASSWORD)
    data_service.insert_student(user.id, 'Jane', 'Doe', '0412 345 678')
    return data_service.issue_session(user)


@pytest.fixture
def other_student_session(data_service):
    user = data_service.sign_up('other@example.com', STUDENT_PASSWORD)
    data_service.insert_student(user.id, 'Sam', 'Lee', '0498 765 432')
    return data_service.issue_session(user)


@pytest.fixture
def local_timezone(monkeypatch):
    """Switches the process timezone for one test."""
    if not hasattr(time, 'tzset'):
        pytest.skip('time.tzset is unavailable on this platform')

    def _use(name: str) -> None:
        monkeypatch.setenv('TZ', name)
        time.tzset()

    yield _use
    monkeypatch.undo()
    time.tzset()
