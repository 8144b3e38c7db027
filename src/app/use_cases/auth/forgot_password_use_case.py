"""
Forgot Password Use Case

Issues a 6-digit reset code and emails it.
"""

from src.app.services.email_dispatcher import EmailDeliveryError, IEmailDispatcher
from src.app.services.event_recorder import IEventRecorder
from src.app.services.reset_code_manager import ResetCodeManager
from src.app.services.unit_of_work import UnitOfWork
from src.libs.result import Error, Result, Return
from .dtos import ForgotPasswordResponse

SENT_MESSAGE = "If an account exists with this email, a verification code has been sent."


class ForgotPasswordUseCase:
    """
    Use case for requesting a password reset code.

    Business Rules:
    - No email enumeration: identical response for known and unknown emails
    - A new code overwrites any outstanding code or reset token
    - Code hash and expiry are committed before the email goes out
    - Delivery failure surfaces as EMAIL_DELIVERY_FAILED with a generic message
    """

    def __init__(
        self,
        uow: UnitOfWork,
        reset_codes: ResetCodeManager,
        mailer: IEmailDispatcher,
        events: IEventRecorder,
    ):
        self.uow = uow
        self.reset_codes = reset_codes
        self.mailer = mailer
        self.events = events

    async def execute(self, email: str) -> Result[ForgotPasswordResponse]:
        if not email or not email.strip():
            return Return.err(Error("MISSING_FIELDS", "Email is required"))

        async with self.uow:
            account = await self.uow.accounts.get_by_email(email)

            if account is None:
                self.events.record("password_reset_requested", email=email, account_found=False)
                return Return.ok(
                    ForgotPasswordResponse(status="sent", message=SENT_MESSAGE)
                )

            code = self.reset_codes.issue_code(account)
            await self.uow.accounts.update(account)
            await self.uow.commit()

            account_id = str(account.id)
            account_email = account.email

        self.events.record("password_reset_requested", account_id=account_id, account_found=True)

        try:
            await self.mailer.send_reset_code(account_email, code)
        except EmailDeliveryError:
            self.events.record("password_reset_email_failed", account_id=account_id)
            return Return.err(
                Error(
                    "EMAIL_DELIVERY_FAILED",
                    "We could not send the verification code. Please try again later.",
                )
            )

        return Return.ok(ForgotPasswordResponse(status="sent", message=SENT_MESSAGE))
