"""
Disable Two-Factor Use Case
"""

from uuid import UUID

from src.app.services.event_recorder import IEventRecorder
from src.app.services.unit_of_work import UnitOfWork
from src.libs.result import Error, Result, Return
from .dtos import TwoFactorStatusResponse


class DisableTwoFactorUseCase:
    """
    Use case for turning 2FA off.

    Business Rules:
    - Flag and secret are cleared together; re-enabling starts a new enrolment
    """

    def __init__(self, uow: UnitOfWork, events: IEventRecorder):
        self.uow = uow
        self.events = events

    async def execute(self, account_id: UUID) -> Result[TwoFactorStatusResponse]:
        async with self.uow:
            account = await self.uow.accounts.get_by_id(account_id)
            if account is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            account.two_factor_enabled = False
            account.totp_secret = None
            await self.uow.accounts.update(account)
            await self.uow.commit()

            self.events.record("two_factor_disabled", account_id=str(account_id))
            return Return.ok(
                TwoFactorStatusResponse(
                    message="Two-factor authentication disabled",
                    two_factor_enabled=False,
                )
            )
