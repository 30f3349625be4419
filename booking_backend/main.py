import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from booking_backend.core import config
from booking_backend.database import Base, engine, ensure_consultation_schema
from booking_backend.models import account, consultation, student  # noqa: F401
from booking_backend.routes import auth_routes, consultation_routes, student_routes

logging.basicConfig(level=config.LOG_LEVEL)

config.validate_runtime_config()

app = FastAPI()

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

logger = logging.getLogger(__name__)


@app.on_event('startup')
def initialize_database() -> None:
    try:
        Base.metadata.create_all(bind=engine)
        ensure_consultation_schema()
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL and Postgres credentials.')


@app.get('/')
def root():
    return {'status': 'Consultation Booking API Running'}


app.include_router(auth_routes.router, prefix='/auth')
app.include_router(consultation_routes.router)
app.include_router(student_routes.router, prefix='/api')
