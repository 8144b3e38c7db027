from typing import Optional, Union

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, Field

from src.api.error import ClientError, ServerError
from src.app.services.event_recorder import IEventRecorder
from src.app.services.secret_codec import SecretCodec
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import (
    LoginCommand,
    LoginResponse,
    LoginUseCase,
    RegisterCommand,
    RegisterResponse,
    RegisterUseCase,
    TwoFactorChallengeResponse,
    VerifyTwoFactorLoginUseCase,
)
from src.depends import get_event_recorder, get_secret_codec, get_unit_of_work

router = APIRouter(prefix="/auth", tags=["Authentication"])


class RegisterRequest(BaseModel):
    """
    Register HTTP request payload

    Fields are optional here so that absence is reported as MISSING_FIELDS
    by the use case rather than as a 422 from request parsing.
    """

    email: Optional[str] = Field(None, description="User email address")
    password: Optional[str] = Field(None, description="User password (min 8 chars)")


@router.post(
    "/register", status_code=status.HTTP_201_CREATED, response_model=RegisterResponse
)
async def register(
    request: RegisterRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    events: IEventRecorder = Depends(get_event_recorder),
):
    """
    Register

    Creates an account with 2FA disabled and returns a session token.

    Raises:
        - 400 Bad Request: Missing fields or weak password
        - 409 Conflict: Email already in use
        - 500 Internal Server Error: Server error
    """
    command = RegisterCommand(email=request.email, password=request.password)

    use_case = RegisterUseCase(uow, events)
    result = await use_case.execute(command)

    if result.is_err():
        error = result.error
        if error.code in ("MISSING_FIELDS", "INVALID_PASSWORD"):
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "EMAIL_IN_USE":
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        raise ServerError(error)

    return result.value


class LoginRequest(BaseModel):
    """
    Login HTTP request payload

    code + temp_token complete a login on an account with 2FA enabled.
    """

    email: Optional[str] = Field(None, description="User email address")
    password: Optional[str] = Field(None, description="User password")
    code: Optional[str] = Field(None, description="6-digit TOTP code")
    temp_token: Optional[str] = Field(
        None, description="2FA-pending token from the previous login response"
    )


@router.post(
    "/login",
    status_code=status.HTTP_200_OK,
    response_model=Union[LoginResponse, TwoFactorChallengeResponse],
)
async def login(
    request: LoginRequest,
    response: Response,
    uow: UnitOfWork = Depends(get_unit_of_work),
    codec: SecretCodec = Depends(get_secret_codec),
    events: IEventRecorder = Depends(get_event_recorder),
):
    """
    User Login

    Returns:
        - 200 OK: Session token
        - 202 Accepted: 2FA verification required (temp_token, no session)

    Raises:
        - 400 Bad Request: Missing credentials
        - 401 Unauthorized: Invalid credentials, 2FA token or 2FA code
        - 500 Internal Server Error: Server error
    """
    command = LoginCommand(
        email=request.email,
        password=request.password,
        code=request.code,
        temp_token=request.temp_token,
    )

    use_case = LoginUseCase(uow, codec, events)
    result = await use_case.execute(command)

    if result.is_err():
        error = result.error
        if error.code == "MISSING_CREDENTIALS":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code in ("INVALID_CREDENTIALS", "INVALID_2FA_TOKEN", "INVALID_2FA_CODE"):
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        raise ServerError(error)

    if isinstance(result.value, TwoFactorChallengeResponse):
        response.status_code = status.HTTP_202_ACCEPTED

    return result.value


class VerifyTwoFactorLoginRequest(BaseModel):
    """Second login step with the 2FA-pending token"""

    temp_token: Optional[str] = Field(None, description="2FA-pending token")
    code: Optional[str] = Field(None, description="6-digit TOTP code")


@router.post(
    "/login/verify-2fa", status_code=status.HTTP_200_OK, response_model=LoginResponse
)
async def verify_two_factor_login(
    request: VerifyTwoFactorLoginRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    codec: SecretCodec = Depends(get_secret_codec),
    events: IEventRecorder = Depends(get_event_recorder),
):
    """
    Complete 2FA Login

    Exchanges a 2FA-pending token and a valid code for a session token.

    Raises:
        - 400 Bad Request: Missing fields
        - 401 Unauthorized: Invalid/expired pending token or invalid code
        - 500 Internal Server Error: Server error
    """
    use_case = VerifyTwoFactorLoginUseCase(uow, codec, events)
    result = await use_case.execute(request.temp_token, request.code)

    if result.is_err():
        error = result.error
        if error.code == "MISSING_FIELDS":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code in ("INVALID_2FA_TOKEN", "INVALID_2FA_CODE"):
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        raise ServerError(error)

    return result.value
