from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from src.api.error import ClientError, ServerError
from src.app.services.event_recorder import IEventRecorder
from src.app.services.secret_codec import SecretCodec
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import AccountInfo
from src.app.use_cases.two_factor import (
    DisableTwoFactorUseCase,
    EnableTwoFactorResponse,
    EnableTwoFactorUseCase,
    TwoFactorStatusResponse,
    VerifyTwoFactorUseCase,
)
from src.depends import (
    get_current_account,
    get_event_recorder,
    get_secret_codec,
    get_unit_of_work,
)

router = APIRouter(prefix="/auth", tags=["Two-Factor"])


@router.post(
    "/enable-2fa", status_code=status.HTTP_200_OK, response_model=EnableTwoFactorResponse
)
async def enable_two_factor(
    current_account: AccountInfo = Depends(get_current_account),
    uow: UnitOfWork = Depends(get_unit_of_work),
    codec: SecretCodec = Depends(get_secret_codec),
    events: IEventRecorder = Depends(get_event_recorder),
):
    """
    Enable 2FA

    Returns the TOTP secret, otpauth URL and QR code. An unconfirmed secret
    is shown again; otherwise a new secret replaces the old one.

    Raises:
        - 401 Unauthorized: Missing, invalid or outdated session token
        - 404 Not Found: Account no longer exists
        - 500 Internal Server Error: Server error
    """
    use_case = EnableTwoFactorUseCase(uow, codec, events)
    result = await use_case.execute(UUID(current_account.id))

    if result.is_err():
        error = result.error
        if error.code == "USER_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value


class VerifyTwoFactorRequest(BaseModel):
    """Code from the authenticator app"""

    code: Optional[str] = Field(None, description="6-digit TOTP code")


@router.post(
    "/verify-2fa", status_code=status.HTTP_200_OK, response_model=TwoFactorStatusResponse
)
async def verify_two_factor(
    request: VerifyTwoFactorRequest,
    current_account: AccountInfo = Depends(get_current_account),
    uow: UnitOfWork = Depends(get_unit_of_work),
    codec: SecretCodec = Depends(get_secret_codec),
    events: IEventRecorder = Depends(get_event_recorder),
):
    """
    Verify 2FA

    Confirms enrolment (turns 2FA on) or re-confirms an enabled secret.

    Raises:
        - 400 Bad Request: Missing code or no secret generated
        - 401 Unauthorized: Invalid session or invalid code
        - 404 Not Found: Account no longer exists
        - 500 Internal Server Error: Server error
    """
    use_case = VerifyTwoFactorUseCase(uow, codec, events)
    result = await use_case.execute(UUID(current_account.id), request.code)

    if result.is_err():
        error = result.error
        if error.code in ("MISSING_VERIFICATION_CODE", "2FA_NOT_ENABLED"):
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "INVALID_2FA_CODE":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        elif error.code == "USER_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value


@router.post(
    "/disable-2fa", status_code=status.HTTP_200_OK, response_model=TwoFactorStatusResponse
)
async def disable_two_factor(
    current_account: AccountInfo = Depends(get_current_account),
    uow: UnitOfWork = Depends(get_unit_of_work),
    events: IEventRecorder = Depends(get_event_recorder),
):
    """
    Disable 2FA

    Raises:
        - 401 Unauthorized: Invalid session
        - 404 Not Found: Account no longer exists
        - 500 Internal Server Error: Server error
    """
    use_case = DisableTwoFactorUseCase(uow, events)
    result = await use_case.execute(UUID(current_account.id))

    if result.is_err():
        error = result.error
        if error.code == "USER_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value
