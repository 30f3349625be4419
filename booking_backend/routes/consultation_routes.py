from typing import Any

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from booking_backend.actions import consultation_actions
from booking_backend.auth.context import RequestContext
from booking_backend.auth.dependencies import get_request_context
from booking_backend.routes.responses import render_action_result

router = APIRouter(tags=['consultations'])


class CreateConsultationRequest(BaseModel):
    first_name: str = Field(default='', alias='firstName')
    last_name: str = Field(default='', alias='lastName')
    reason: str = ''
    datetime: str = ''

    class Config:
        populate_by_name = True


class ToggleConsultationRequest(BaseModel):
    is_complete: Any = Field(default=None, alias='isComplete')

    class Config:
        populate_by_name = True


@router.get('/dashboard')
def get_dashboard(context: RequestContext = Depends(get_request_context)):
    return render_action_result(consultation_actions.load_dashboard(context))


@router.post('/consultations')
def create_consultation(data: CreateConsultationRequest, context: RequestContext = Depends(get_request_context)):
    result = consultation_actions.create_consultation(
        context,
        first_name=data.first_name,
        last_name=data.last_name,
        reason=data.reason,
        scheduled_at=data.datetime,
    )
    return render_action_result(result, success_status=status.HTTP_201_CREATED)


@router.post('/consultations/{consultation_id}/toggle')
def toggle_consultation_complete(
    consultation_id: str,
    data: ToggleConsultationRequest,
    context: RequestContext = Depends(get_request_context),
):
    result = consultation_actions.toggle_consultation_complete(
        context,
        consultation_id=consultation_id,
        is_complete=data.is_complete,
    )
    return render_action_result(result)
