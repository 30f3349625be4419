import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from booking_backend.auth.context import RequestContext
from booking_backend.auth.dependencies import get_request_context
from booking_backend.services.errors import ConfigurationError, DataServiceError
from booking_backend.validation.rules import is_missing

router = APIRouter(tags=['students'])

logger = logging.getLogger(__name__)


class CreateStudentRequest(BaseModel):
    first_name: str | None = Field(default=None, alias='firstName')
    last_name: str | None = Field(default=None, alias='lastName')
    phone: str | None = None

    class Config:
        populate_by_name = True


@router.post('/students', status_code=status.HTTP_201_CREATED)
def create_student(data: CreateStudentRequest, context: RequestContext = Depends(get_request_context)):
    try:
        service = context.data_service()
        caller = context.caller()
    except DataServiceError:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={'error': 'Server configuration error'},
        )

    if caller is None:
        return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content={'error': 'Unauthorized'})

    if is_missing(data.first_name) or is_missing(data.last_name) or is_missing(data.phone):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={'error': 'First name, last name, and phone are required'},
        )

    try:
        service.insert_student(caller.id, data.first_name.strip(), data.last_name.strip(), data.phone.strip())
    except ConfigurationError:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={'error': 'Server configuration error'},
        )
    except DataServiceError as exc:
        logger.warning('Student record for %s rejected: %s', caller.id, exc.message)
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={'error': exc.message})

    return JSONResponse(status_code=status.HTTP_201_CREATED, content={'success': True})
