from datetime import datetime, timedelta, timezone

import jwt

from booking_backend.core import config

def create_access_token(
    subject: str,
    session_id: str,
    issued_at: datetime | None = None,
    expires_minutes: int | None = None,
) -> tuple[str, datetime]:
    issued = issued_at or datetime.now(timezone.utc)
    expire_minutes = expires_minutes or config.JWT_EXPIRES_MINUTES
    expire = issued + timedelta(minutes=expire_minutes)
    payload = {"sub": subject, "jti": session_id, "exp": expire, "iat": issued}
    return jwt.encode(payload, config.JWT_SECRET_KEY, algorithm=config.JWT_ALGORITHM), expire


def decode_access_token(token: str, verify_timestamps: bool = True) -> dict:
    return jwt.decode(
        token,
        config.JWT_SECRET_KEY,
        algorithms=[config.JWT_ALGORITHM],
        options={"verify_exp": verify_timestamps, "verify_iat": verify_timestamps},
    )
