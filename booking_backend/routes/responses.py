from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, RedirectResponse, Response

from booking_backend.actions.result import ActionResult, ErrorKind
from booking_backend.core import config

ERROR_STATUS_CODES = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.AUTHENTICATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.STORAGE: status.HTTP_400_BAD_REQUEST,
    ErrorKind.CONFIGURATION: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def render_action_result(result: ActionResult, success_status: int = status.HTTP_200_OK) -> Response:
    if result.redirect_to:
        response = RedirectResponse(url=result.redirect_to, status_code=status.HTTP_303_SEE_OTHER)
        if result.session_token:
            response.set_cookie(
                key=config.SESSION_COOKIE_NAME,
                value=result.session_token,
                max_age=config.JWT_EXPIRES_MINUTES * 60,
                httponly=True,
                secure=config.SESSION_COOKIE_SECURE,
                samesite='lax',
            )
        if result.clear_session:
            response.delete_cookie(config.SESSION_COOKIE_NAME)
        return response

    if result.error is not None:
        body = {'error': result.error}
        if result.field_errors:
            body['fieldErrors'] = dict(result.field_errors)
        status_code = ERROR_STATUS_CODES.get(result.error_kind, status.HTTP_400_BAD_REQUEST)
        return JSONResponse(status_code=status_code, content=body)

    if result.data is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return JSONResponse(status_code=success_status, content={'data': jsonable_encoder(result.data)})
