from typing import Iterator

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from booking_backend.auth.context import RequestContext
from booking_backend.core import config
from booking_backend.services.sql_data_service import open_data_service

security = HTTPBearer(auto_error=False)


def get_access_token(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> str | None:
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(config.SESSION_COOKIE_NAME)


def get_request_context(access_token: str | None = Depends(get_access_token)) -> Iterator[RequestContext]:
    context = RequestContext(service_factory=open_data_service, access_token=access_token)
    try:
        yield context
    finally:
        context.close()
