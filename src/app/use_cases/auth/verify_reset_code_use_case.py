"""
Verify Reset Code Use Case

Exchanges an emailed reset code for a one-time reset token.
"""

from src.app.services.event_recorder import IEventRecorder
from src.app.services.reset_code_manager import ResetCodeManager
from src.app.services.unit_of_work import UnitOfWork
from src.libs.result import Error, Result, Return
from .dtos import VerifyResetCodeResponse


class VerifyResetCodeUseCase:
    """
    Use case for verifying a password reset code.

    Business Rules:
    - Unknown email and wrong/expired code give the same error
    - A verified code is replaced by the reset token in the same save,
      so the code cannot be verified twice
    """

    def __init__(self, uow: UnitOfWork, reset_codes: ResetCodeManager, events: IEventRecorder):
        self.uow = uow
        self.reset_codes = reset_codes
        self.events = events

    async def execute(self, email: str, code: str) -> Result[VerifyResetCodeResponse]:
        if not email or not code:
            return Return.err(
                Error("MISSING_FIELDS", "Email and verification code are required")
            )

        async with self.uow:
            account = await self.uow.accounts.get_by_email(email)
            if account is None:
                self.events.record("reset_code_verification_failed", email=email)
                return Return.err(
                    Error("INVALID_OR_EXPIRED_CODE", "Invalid or expired verification code")
                )

            verified = self.reset_codes.verify_code(account, code)
            if verified.is_err():
                self.events.record(
                    "reset_code_verification_failed", account_id=str(account.id)
                )
                return Return.err(verified.error)

            await self.uow.accounts.update(account)
            await self.uow.commit()

            self.events.record("reset_code_verified", account_id=str(account.id))
            return Return.ok(
                VerifyResetCodeResponse(
                    message="Verification successful",
                    reset_token=verified.value,
                )
            )
