"""
Authenticate Session Use Case

Protected-route check: the token is valid AND still current for its account.
"""

from datetime import UTC
from typing import Any, Dict
from uuid import UUID

from src.api.utils.jwt import TokenPurpose, verify_token
from src.app.services.unit_of_work import UnitOfWork
from src.libs.result import Error, Result, Return
from .dtos import AccountInfo


class AuthenticateSessionUseCase:
    """
    Use case for validating a session token on every protected request.

    Business Rules:
    - Signature, expiry and purpose checked (TOKEN_EXPIRED vs INVALID_TOKEN)
    - 2FA-pending tokens never pass
    - Account named by the token must still exist (USER_NOT_FOUND)
    - Rejected when the password changed at or after the token's iat
      (PASSWORD_CHANGED); there is no revocation list
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, token: str) -> Result[AccountInfo]:
        verified = verify_token(token, TokenPurpose.session)
        if verified.is_err():
            return Return.err(verified.error)
        claims: Dict[str, Any] = verified.value

        try:
            account_id = UUID(claims["sub"])
        except (KeyError, ValueError):
            return Return.err(Error("INVALID_TOKEN", "Invalid token. Please log in again."))

        async with self.uow:
            account = await self.uow.accounts.get_by_id(account_id)
            if account is None:
                return Return.err(
                    Error(
                        "USER_NOT_FOUND",
                        "The user belonging to this token no longer exists.",
                    )
                )

            if account.password_changed_at is not None:
                changed_at = account.password_changed_at.replace(tzinfo=UTC).timestamp()
                if changed_at >= float(claims.get("iat", 0)):
                    return Return.err(
                        Error(
                            "PASSWORD_CHANGED",
                            "User recently changed password. Please log in again.",
                        )
                    )

            return Return.ok(
                AccountInfo(
                    id=str(account.id),
                    email=account.email,
                    two_factor_enabled=account.two_factor_enabled,
                )
            )
