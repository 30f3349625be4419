from threading import Lock

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.orm import declarative_base, sessionmaker

from booking_backend.core import config


def _connect_args(database_url: str) -> dict:
    if database_url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(config.DATABASE_URL, connect_args=_connect_args(config.DATABASE_URL))

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()

_schema_lock = Lock()
_consultation_schema_checked = False


def ensure_consultation_schema() -> None:
    """Create the owner/time index that dashboard listings read through."""
    global _consultation_schema_checked

    if _consultation_schema_checked:
        return

    with _schema_lock:
        if _consultation_schema_checked:
            return

        inspector = inspect(engine)

        if 'consultations' not in inspector.get_table_names():
            _consultation_schema_checked = True
            return

        with engine.begin() as connection:
            connection.execute(
                text('CREATE INDEX IF NOT EXISTS idx_consultations_user_datetime ON consultations(user_id, datetime)')
            )

        _consultation_schema_checked = True
