import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Callable, Iterator

import jwt
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from booking_backend.auth import jwt_handler
from booking_backend.auth.passwords import hash_password, verify_password
from booking_backend.database import SessionLocal, ensure_consultation_schema
from booking_backend.models.account import Account, AuthSession
from booking_backend.models.consultation import Consultation
from booking_backend.models.student import Student
from booking_backend.services.errors import AuthError, ConfigurationError, StorageError
from booking_backend.services.models import ConsultationRecord, Identity, IssuedSession, StudentRecord
from booking_backend.utils.dates import as_utc, utc_now

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = 'Invalid login credentials'
DUPLICATE_ACCOUNT_MESSAGE = 'User already registered'
DUPLICATE_STUDENT_MESSAGE = 'Student record already exists'
UNAVAILABLE_MESSAGE = 'Data service unavailable'


class SqlAlchemyDataService:
    """Data service backed by the application's SQLAlchemy database."""

    def __init__(self, db: Session, clock: Callable[[], datetime] = utc_now) -> None:
        self.db = db
        self.clock = clock

    @contextmanager
    def _guard(self, failure_message: str, conflict_message: str | None = None) -> Iterator[None]:
        try:
            yield
        except IntegrityError as exc:
            self.db.rollback()
            logger.warning('Write rejected by storage: %s', exc.orig)
            raise StorageError(conflict_message or failure_message) from exc
        except OperationalError as exc:
            self.db.rollback()
            logger.exception('Database unreachable.')
            raise ConfigurationError(UNAVAILABLE_MESSAGE) from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception(failure_message)
            raise StorageError(failure_message) from exc

    def sign_up(self, email: str, password: str) -> Identity | None:
        normalized_email = email.strip().lower()

        with self._guard('Failed to create account', conflict_message=DUPLICATE_ACCOUNT_MESSAGE):
            existing = self.db.query(Account).filter(Account.email == normalized_email).first()
            if existing:
                raise AuthError(DUPLICATE_ACCOUNT_MESSAGE)

            account = Account(email=normalized_email, hashed_password=hash_password(password))
            self.db.add(account)
            self.db.commit()
            self.db.refresh(account)

        if not account.id:
            return None

        logger.info('Created account %s', account.id)
        return Identity(id=account.id, email=account.email)

    def sign_in_with_password(self, email: str, password: str) -> IssuedSession:
        normalized_email = email.strip().lower()

        with self._guard('Failed to sign in'):
            account = self.db.query(Account).filter(Account.email == normalized_email).first()

        if account is None or not verify_password(password, account.hashed_password):
            raise AuthError(INVALID_CREDENTIALS_MESSAGE)

        return self.issue_session(Identity(id=account.id, email=account.email))

    def issue_session(self, user: Identity) -> IssuedSession:
        issued_at = self.clock()

        with self._guard('Failed to start session'):
            session = AuthSession(account_id=user.id, created_at=issued_at, expires_at=issued_at)
            self.db.add(session)
            self.db.flush()
            token, expires_at = jwt_handler.create_access_token(
                subject=user.id,
                session_id=session.id,
                issued_at=issued_at,
            )
            session.expires_at = expires_at
            self.db.commit()

        logger.info('Started session for account %s', user.id)
        return IssuedSession(access_token=token, expires_at=expires_at, user=user)

    def _load_session(self, access_token: str) -> AuthSession | None:
        # Expiry is judged by the service clock against the session row.
        try:
            payload = jwt_handler.decode_access_token(access_token, verify_timestamps=False)
        except jwt.PyJWTError:
            return None

        session_id = payload.get('jti')
        subject = payload.get('sub')
        if not session_id or not subject:
            return None

        with self._guard('Failed to load session'):
            session = self.db.query(AuthSession).filter(AuthSession.id == session_id).first()

        if session is None or session.account_id != subject:
            return None
        return session

    def sign_out(self, access_token: str) -> None:
        session = self._load_session(access_token)
        if session is None:
            raise AuthError('Invalid session')

        with self._guard('Failed to sign out'):
            if session.revoked_at is None:
                session.revoked_at = self.clock()
                self.db.commit()

    def get_user(self, access_token: str | None) -> Identity | None:
        if not access_token:
            return None

        session = self._load_session(access_token)
        if session is None or session.revoked_at is not None:
            return None
        if as_utc(session.expires_at) <= self.clock():
            return None

        with self._guard('Failed to load user'):
            account = self.db.query(Account).filter(Account.id == session.account_id).first()

        if account is None:
            return None
        return Identity(id=account.id, email=account.email)

    def delete_user(self, user_id: str) -> None:
        with self._guard('Failed to delete account'):
            self.db.query(AuthSession).filter(AuthSession.account_id == user_id).delete()
            self.db.query(Account).filter(Account.id == user_id).delete()
            self.db.commit()

        logger.info('Deleted account %s', user_id)

    def insert_student(self, user_id: str, first_name: str, last_name: str, phone: str) -> StudentRecord:
        with self._guard('Failed to save student record', conflict_message=DUPLICATE_STUDENT_MESSAGE):
            if self.db.query(Student).filter(Student.id == user_id).first():
                raise StorageError(DUPLICATE_STUDENT_MESSAGE)

            student = Student(id=user_id, first_name=first_name, last_name=last_name, phone=phone)
            self.db.add(student)
            self.db.commit()
            self.db.refresh(student)

        return StudentRecord.model_validate(student)

    def get_student(self, user_id: str) -> StudentRecord | None:
        with self._guard('Failed to load student record'):
            student = self.db.query(Student).filter(Student.id == user_id).first()

        if student is None:
            return None
        return StudentRecord.model_validate(student)

    def insert_consultation(
        self,
        user_id: str,
        first_name: str,
        last_name: str,
        reason: str,
        scheduled_at: datetime,
    ) -> ConsultationRecord:
        now = self.clock()

        with self._guard('Failed to create consultation'):
            consultation = Consultation(
                user_id=user_id,
                first_name=first_name,
                last_name=last_name,
                reason=reason,
                datetime=as_utc(scheduled_at),
                is_complete=False,
                created_at=now,
                updated_at=now,
            )
            self.db.add(consultation)
            self.db.commit()
            self.db.refresh(consultation)

        return ConsultationRecord.model_validate(consultation)

    def set_consultation_complete(self, consultation_id: str, owner_id: str, is_complete: bool) -> int:
        with self._guard('Failed to update consultation'):
            consultation = self.db.query(Consultation).filter(
                Consultation.id == consultation_id,
                Consultation.user_id == owner_id,
            ).first()

            if consultation is None:
                return 0

            consultation.is_complete = is_complete
            consultation.updated_at = self.clock()
            self.db.commit()

        return 1

    def list_consultations(self, owner_id: str) -> list[ConsultationRecord]:
        with self._guard('Failed to load consultations'):
            consultations = self.db.query(Consultation).filter(
                Consultation.user_id == owner_id,
            ).order_by(Consultation.datetime.asc()).all()

        return [ConsultationRecord.model_validate(consultation) for consultation in consultations]

    def close(self) -> None:
        self.db.close()


def open_data_service(clock: Callable[[], datetime] = utc_now) -> SqlAlchemyDataService:
    try:
        ensure_consultation_schema()
    except SQLAlchemyError as exc:
        logger.exception('Database initialization failed. Check DATABASE_URL.')
        raise ConfigurationError(UNAVAILABLE_MESSAGE) from exc

    return SqlAlchemyDataService(SessionLocal(), clock=clock)
