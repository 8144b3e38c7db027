"""
Reset Password Use Case

Sets a new password with a reset token.
"""

from datetime import datetime

from src.app.services.event_recorder import IEventRecorder
from src.app.services.passwords import hash_password, validate_password
from src.app.services.reset_code_manager import ResetCodeManager
from src.app.services.unit_of_work import UnitOfWork
from src.libs.result import Error, Result, Return
from .dtos import ResetPasswordCommand, ResetPasswordResponse


class ResetPasswordUseCase:
    """
    Use case for completing a password reset.

    Business Rules:
    - Email, token and new password are required
    - New password must meet complexity requirements
    - Only an escalated reset token is accepted, never the numeric code
    - New hash, cleared reset fields and password_changed_at are one save,
      so the token cannot be replayed
    - password_changed_at invalidates every session token issued before it
    """

    def __init__(self, uow: UnitOfWork, reset_codes: ResetCodeManager, events: IEventRecorder):
        self.uow = uow
        self.reset_codes = reset_codes
        self.events = events

    async def execute(self, command: ResetPasswordCommand) -> Result[ResetPasswordResponse]:
        """
        Execute reset password use case.

        Errors:
            - MISSING_FIELDS: email, token or new_password absent
            - INVALID_PASSWORD: new password does not meet complexity rules
            - INVALID_OR_EXPIRED_TOKEN: unknown email, wrong or expired token
        """
        if not command.email or not command.token or not command.new_password:
            return Return.err(
                Error("MISSING_FIELDS", "Email, reset token and new password are required")
            )

        password_validation = validate_password(command.new_password)
        if password_validation.is_err():
            return Return.err(password_validation.error)

        async with self.uow:
            account = await self.uow.accounts.get_by_email(command.email)
            if account is None:
                self.events.record("password_reset_failed", email=command.email)
                return Return.err(
                    Error("INVALID_OR_EXPIRED_TOKEN", "Invalid or expired reset token")
                )

            consumed = self.reset_codes.consume_token(account, command.token)
            if consumed.is_err():
                self.events.record("password_reset_failed", account_id=str(account.id))
                return Return.err(consumed.error)

            account.password_hash = hash_password(command.new_password)
            account.password_changed_at = datetime.utcnow()
            await self.uow.accounts.update(account)
            await self.uow.commit()

            self.events.record("password_reset_completed", account_id=str(account.id))
            return Return.ok(
                ResetPasswordResponse(
                    status="success",
                    message="Password has been reset successfully. You can now log in with your new password.",
                )
            )
