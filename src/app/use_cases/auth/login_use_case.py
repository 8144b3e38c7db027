"""
Login Use Case

Handles password authentication and the TOTP second step.
"""

from datetime import datetime
from uuid import UUID

from src.api.utils.jwt import TokenPurpose, account_claims, issue_token, verify_token
from src.app.services.event_recorder import IEventRecorder
from src.app.services.passwords import burn_password_check, check_password
from src.app.services.secret_codec import SecretCodec
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import Account
from src.libs.result import Error, Result, Return
from .dtos import AccountInfo, LoginCommand, LoginResponse, TwoFactorChallengeResponse

INVALID_CREDENTIALS = Error("INVALID_CREDENTIALS", "Invalid email or password")
INVALID_2FA_CODE = Error("INVALID_2FA_CODE", "Invalid verification code")
INVALID_2FA_TOKEN = Error(
    "INVALID_2FA_TOKEN",
    "Two-factor session is invalid or has expired. Please log in again.",
)


def pending_token_subject(temp_token: str) -> Result[UUID]:
    """Account id named by a valid 2FA-pending token"""
    verified = verify_token(temp_token, TokenPurpose.two_factor_pending)
    if verified.is_err():
        return Return.err(INVALID_2FA_TOKEN)
    try:
        return Return.ok(UUID(verified.value["sub"]))
    except (KeyError, ValueError):
        return Return.err(INVALID_2FA_TOKEN)


def session_response(account: Account) -> LoginResponse:
    """Issue the session token for an account that passed every factor"""
    return LoginResponse(
        message="Login successful",
        token=issue_token(account_claims(account), TokenPurpose.session),
        account=AccountInfo(
            id=str(account.id),
            email=account.email,
            two_factor_enabled=account.two_factor_enabled,
        ),
    )


class LoginUseCase:
    """
    Use case for user login.

    State machine for one attempt:
        Unauthenticated -> PasswordVerified -> (SessionGranted | TwoFactorPending)
        TwoFactorPending -> SessionGranted (valid code) | restart (anything else)

    Business Rules:
    - Same INVALID_CREDENTIALS error for unknown email and wrong password
    - A bcrypt check is spent even when the email is unknown
    - 2FA disabled: session token straight away
    - 2FA enabled, no code: short-lived 2FA-pending token, never a session token
    - 2FA enabled, code supplied: the 2FA-pending token issued to this same
      account must accompany the code before the code is checked
    """

    def __init__(self, uow: UnitOfWork, codec: SecretCodec, events: IEventRecorder):
        self.uow = uow
        self.codec = codec
        self.events = events

    async def execute(self, command: LoginCommand) -> Result:
        """
        Execute login use case.

        Returns:
            Result with LoginResponse (session granted) or
            TwoFactorChallengeResponse (code required), or Error
        """
        if not command.email or not command.password:
            self.events.record(
                "login_failed",
                reason="missing_credentials",
                email_provided=bool(command.email),
                password_provided=bool(command.password),
            )
            return Return.err(
                Error("MISSING_CREDENTIALS", "Email and password are required")
            )

        async with self.uow:
            account = await self.uow.accounts.get_by_email(command.email)

            if account is None:
                burn_password_check(command.password)
                self.events.record("login_failed", reason="unknown_email", email=command.email)
                return Return.err(INVALID_CREDENTIALS)

            if not check_password(command.password, account.password_hash):
                self.events.record(
                    "login_failed", reason="wrong_password", account_id=str(account.id)
                )
                return Return.err(INVALID_CREDENTIALS)

            if account.two_factor_enabled:
                if not command.code:
                    temp_token = issue_token(
                        account_claims(account), TokenPurpose.two_factor_pending
                    )
                    self.events.record("login_2fa_required", account_id=str(account.id))
                    return Return.ok(
                        TwoFactorChallengeResponse(
                            message="2FA verification required",
                            temp_token=temp_token,
                        )
                    )

                subject = pending_token_subject(command.temp_token or "")
                if subject.is_err() or subject.value != account.id:
                    self.events.record(
                        "login_failed", reason="invalid_2fa_token", account_id=str(account.id)
                    )
                    return Return.err(INVALID_2FA_TOKEN)

                if not self.codec.verify(command.code, account.totp_secret):
                    self.events.record(
                        "login_failed", reason="invalid_2fa_code", account_id=str(account.id)
                    )
                    return Return.err(INVALID_2FA_CODE)

            account.last_login_at = datetime.utcnow()
            await self.uow.accounts.update(account)
            await self.uow.commit()

            self.events.record(
                "login_succeeded",
                account_id=str(account.id),
                two_factor=account.two_factor_enabled,
            )
            return Return.ok(session_response(account))
