"""
Register Use Case

Creates an email/password account and signs it in.
"""

from src.api.utils.jwt import TokenPurpose, account_claims, issue_token
from src.app.repositories.account_repository import DuplicateEmailError
from src.app.services.event_recorder import IEventRecorder
from src.app.services.passwords import hash_password, validate_password
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import Account, normalize_email
from src.libs.result import Error, Result, Return
from .dtos import AccountInfo, RegisterCommand, RegisterResponse


class RegisterUseCase:
    """
    Register Use Case

    Business Logic:
    1. Email and password are both required (MISSING_FIELDS)
    2. Password must meet the minimum length (INVALID_PASSWORD)
    3. Email must not be registered (EMAIL_IN_USE); a concurrent duplicate
       is rejected by the store's unique index and reported the same way
    4. Hash password with bcrypt, create Account with 2FA disabled
    5. Issue a session token for immediate login
    """

    def __init__(self, uow: UnitOfWork, events: IEventRecorder):
        self.uow = uow
        self.events = events

    async def execute(self, command: RegisterCommand) -> Result[RegisterResponse]:
        if not command.email or not command.email.strip() or not command.password:
            self.events.record(
                "register_failed",
                reason="missing_fields",
                email_provided=bool(command.email),
                password_provided=bool(command.password),
            )
            return Return.err(
                Error("MISSING_FIELDS", "Email and password are required")
            )

        password_validation = validate_password(command.password)
        if password_validation.is_err():
            return Return.err(password_validation.error)

        email = normalize_email(command.email)

        async with self.uow:
            existing = await self.uow.accounts.get_by_email(email)
            if existing:
                self.events.record("register_failed", reason="email_in_use", email=email)
                return Return.err(Error("EMAIL_IN_USE", "Email already in use"))

            account = Account(
                email=email,
                password_hash=hash_password(command.password),
                two_factor_enabled=False,
            )
            try:
                account = await self.uow.accounts.create(account)
            except DuplicateEmailError:
                self.events.record("register_failed", reason="email_in_use", email=email)
                return Return.err(Error("EMAIL_IN_USE", "Email already in use"))

            await self.uow.commit()

            token = issue_token(account_claims(account), TokenPurpose.session)
            self.events.record("account_registered", account_id=str(account.id), email=email)

            return Return.ok(
                RegisterResponse(
                    message="Registration successful",
                    token=token,
                    account=AccountInfo(
                        id=str(account.id),
                        email=account.email,
                        two_factor_enabled=account.two_factor_enabled,
                    ),
                )
            )
