"""
Verify Two-Factor Login Use Case

Completes a 2FA login with the pending token and a TOTP code.
"""

from datetime import datetime

from src.app.services.event_recorder import IEventRecorder
from src.app.services.secret_codec import SecretCodec
from src.app.services.unit_of_work import UnitOfWork
from src.libs.result import Error, Result, Return
from .dtos import LoginResponse
from .login_use_case import INVALID_2FA_CODE, INVALID_2FA_TOKEN, pending_token_subject, session_response


class VerifyTwoFactorLoginUseCase:
    """
    Second login step driven by the 2FA-pending token alone.

    Business Rules:
    - Pending token must be valid, unexpired and of the pending purpose
    - Account named by the token must still exist with 2FA enabled
    - Wrong code: INVALID_2FA_CODE and no token; the caller restarts the login
    """

    def __init__(self, uow: UnitOfWork, codec: SecretCodec, events: IEventRecorder):
        self.uow = uow
        self.codec = codec
        self.events = events

    async def execute(self, temp_token: str, code: str) -> Result[LoginResponse]:
        if not temp_token or not code:
            return Return.err(
                Error("MISSING_FIELDS", "Temporary token and verification code are required")
            )

        subject = pending_token_subject(temp_token)
        if subject.is_err():
            self.events.record("login_failed", reason="invalid_2fa_token")
            return Return.err(subject.error)

        async with self.uow:
            account = await self.uow.accounts.get_by_id(subject.value)
            if account is None or not account.two_factor_enabled or not account.totp_secret:
                self.events.record(
                    "login_failed", reason="invalid_2fa_token", account_id=str(subject.value)
                )
                return Return.err(INVALID_2FA_TOKEN)

            if not self.codec.verify(code, account.totp_secret):
                self.events.record(
                    "login_failed", reason="invalid_2fa_code", account_id=str(account.id)
                )
                return Return.err(INVALID_2FA_CODE)

            account.last_login_at = datetime.utcnow()
            await self.uow.accounts.update(account)
            await self.uow.commit()

            self.events.record("login_succeeded", account_id=str(account.id), two_factor=True)
            return Return.ok(session_response(account))
