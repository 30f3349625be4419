from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from booking_backend.actions import auth_actions
from booking_backend.auth.context import RequestContext
from booking_backend.auth.dependencies import get_request_context
from booking_backend.routes.responses import render_action_result

router = APIRouter(tags=['auth'])


class LoginRequest(BaseModel):
    email: str = ''
    password: str = ''


class SignupRequest(BaseModel):
    email: str = ''
    password: str = ''
    confirm_password: str = Field(default='', alias='confirmPassword')
    first_name: str = Field(default='', alias='firstName')
    last_name: str = Field(default='', alias='lastName')
    phone: str = ''

    class Config:
        populate_by_name = True


@router.post('/login')
def login(data: LoginRequest, context: RequestContext = Depends(get_request_context)):
    result = auth_actions.login(context, email=data.email, password=data.password)
    return render_action_result(result)


@router.post('/signup')
def signup(data: SignupRequest, context: RequestContext = Depends(get_request_context)):
    result = auth_actions.signup(
        context,
        email=data.email,
        password=data.password,
        confirm_password=data.confirm_password,
        first_name=data.first_name,
        last_name=data.last_name,
        phone=data.phone,
    )
    return render_action_result(result)


@router.post('/logout')
def logout(context: RequestContext = Depends(get_request_context)):
    return render_action_result(auth_actions.logout(context))
