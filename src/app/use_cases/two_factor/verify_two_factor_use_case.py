"""
Verify Two-Factor Use Case

Confirms a TOTP secret with a code from the authenticator app.
"""

from uuid import UUID

from src.app.services.event_recorder import IEventRecorder
from src.app.services.secret_codec import SecretCodec
from src.app.services.unit_of_work import UnitOfWork
from src.libs.result import Error, Result, Return
from .dtos import TwoFactorStatusResponse


class VerifyTwoFactorUseCase:
    """
    Use case for confirming 2FA enrolment.

    Business Rules:
    - A code is required (MISSING_VERIFICATION_CODE)
    - The account must still exist (USER_NOT_FOUND)
    - A secret must have been generated (2FA_NOT_ENABLED)
    - Valid code on an unconfirmed secret turns 2FA on; on an already
      enabled account it simply confirms
    """

    def __init__(self, uow: UnitOfWork, codec: SecretCodec, events: IEventRecorder):
        self.uow = uow
        self.codec = codec
        self.events = events

    async def execute(self, account_id: UUID, code: str) -> Result[TwoFactorStatusResponse]:
        if not code:
            return Return.err(
                Error("MISSING_VERIFICATION_CODE", "Verification code is required")
            )

        async with self.uow:
            account = await self.uow.accounts.get_by_id(account_id)
            if account is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            if not account.totp_secret:
                self.events.record(
                    "two_factor_verification_failed",
                    reason="not_enabled",
                    account_id=str(account_id),
                )
                return Return.err(
                    Error("2FA_NOT_ENABLED", "2FA is not enabled for this account")
                )

            if not self.codec.verify(code, account.totp_secret):
                self.events.record(
                    "two_factor_verification_failed",
                    reason="invalid_code",
                    account_id=str(account_id),
                )
                return Return.err(Error("INVALID_2FA_CODE", "Invalid verification code"))

            if not account.two_factor_enabled:
                account.two_factor_enabled = True
                await self.uow.accounts.update(account)
                await self.uow.commit()
                self.events.record("two_factor_enabled", account_id=str(account_id))

            return Return.ok(
                TwoFactorStatusResponse(
                    message="2FA verification successful",
                    two_factor_enabled=True,
                )
            )
