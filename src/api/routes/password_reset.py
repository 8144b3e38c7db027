from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from src.api.error import ClientError, ServerError
from src.app.services.email_dispatcher import IEmailDispatcher
from src.app.services.event_recorder import IEventRecorder
from src.app.services.reset_code_manager import ResetCodeManager
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import (
    ForgotPasswordResponse,
    ForgotPasswordUseCase,
    ResetPasswordCommand,
    ResetPasswordResponse,
    ResetPasswordUseCase,
    VerifyResetCodeResponse,
    VerifyResetCodeUseCase,
)
from src.depends import (
    get_email_dispatcher,
    get_event_recorder,
    get_reset_code_manager,
    get_unit_of_work,
)

router = APIRouter(prefix="/auth", tags=["Password Reset"])


class ForgotPasswordRequest(BaseModel):
    """Forgot password HTTP request payload"""

    email: Optional[str] = Field(None, description="User email address")


@router.post(
    "/forgot-password", status_code=status.HTTP_200_OK, response_model=ForgotPasswordResponse
)
async def forgot_password(
    request: ForgotPasswordRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    reset_codes: ResetCodeManager = Depends(get_reset_code_manager),
    mailer: IEmailDispatcher = Depends(get_email_dispatcher),
    events: IEventRecorder = Depends(get_event_recorder),
):
    """
    Forgot Password

    Emails a 6-digit verification code valid for 10 minutes.

    Security:
        - No email enumeration (same response for valid/invalid emails)
        - Rate limiting should be applied at middleware layer

    Raises:
        - 400 Bad Request: Missing email
        - 503 Service Unavailable: Email could not be sent
        - 500 Internal Server Error: Server error
    """
    use_case = ForgotPasswordUseCase(uow, reset_codes, mailer, events)
    result = await use_case.execute(request.email)

    if result.is_err():
        error = result.error
        if error.code == "MISSING_FIELDS":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "EMAIL_DELIVERY_FAILED":
            raise ServerError(
                error, status_code=status.HTTP_503_SERVICE_UNAVAILABLE, expose=True
            )
        raise ServerError(error)

    return result.value


class VerifyResetCodeRequest(BaseModel):
    """Verify reset code HTTP request payload"""

    email: Optional[str] = Field(None, description="User email address")
    code: Optional[str] = Field(None, description="6-digit code from the email")


@router.post(
    "/verify-reset-code",
    status_code=status.HTTP_200_OK,
    response_model=VerifyResetCodeResponse,
)
async def verify_reset_code(
    request: VerifyResetCodeRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    reset_codes: ResetCodeManager = Depends(get_reset_code_manager),
    events: IEventRecorder = Depends(get_event_recorder),
):
    """
    Verify Reset Code

    Exchanges the emailed code for a one-time reset token.

    Raises:
        - 400 Bad Request: Missing fields, invalid or expired code
        - 500 Internal Server Error: Server error
    """
    use_case = VerifyResetCodeUseCase(uow, reset_codes, events)
    result = await use_case.execute(request.email, request.code)

    if result.is_err():
        error = result.error
        if error.code in ("MISSING_FIELDS", "INVALID_OR_EXPIRED_CODE"):
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    return result.value


class ResetPasswordRequest(BaseModel):
    """Reset password HTTP request payload"""

    email: Optional[str] = Field(None, description="User email address")
    token: Optional[str] = Field(None, description="Reset token from verify-reset-code")
    new_password: Optional[str] = Field(None, description="New password (min 8 chars)")


@router.post(
    "/reset-password", status_code=status.HTTP_200_OK, response_model=ResetPasswordResponse
)
async def reset_password(
    request: ResetPasswordRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    reset_codes: ResetCodeManager = Depends(get_reset_code_manager),
    events: IEventRecorder = Depends(get_event_recorder),
):
    """
    Reset Password

    Sets the new password and invalidates every earlier session token.

    Raises:
        - 400 Bad Request: Missing fields, weak password, invalid or expired token
        - 500 Internal Server Error: Server error
    """
    command = ResetPasswordCommand(
        email=request.email, token=request.token, new_password=request.new_password
    )

    use_case = ResetPasswordUseCase(uow, reset_codes, events)
    result = await use_case.execute(command)

    if result.is_err():
        error = result.error
        if error.code in ("MISSING_FIELDS", "INVALID_PASSWORD", "INVALID_OR_EXPIRED_TOKEN"):
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    return result.value
