"""
Enable Two-Factor Use Case

Generates (or re-shows) the TOTP secret for enrolment.
"""

from uuid import UUID

from src.app.services.event_recorder import IEventRecorder
from src.app.services.secret_codec import SecretCodec
from src.app.services.unit_of_work import UnitOfWork
from src.libs.result import Error, Result, Return
from .dtos import EnableTwoFactorResponse


class EnableTwoFactorUseCase:
    """
    Use case for starting TOTP enrolment.

    Business Rules:
    - Unconfirmed secret (present, 2FA still disabled): reuse it so the QR
      code stays the same across page reloads
    - No secret, or secret already confirmed: generate a fresh secret,
      discard the old one and set two_factor_enabled=false until the new
      secret is confirmed with Verify2FA
    """

    def __init__(self, uow: UnitOfWork, codec: SecretCodec, events: IEventRecorder):
        self.uow = uow
        self.codec = codec
        self.events = events

    async def execute(self, account_id: UUID) -> Result[EnableTwoFactorResponse]:
        async with self.uow:
            account = await self.uow.accounts.get_by_id(account_id)
            if account is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            if account.has_unconfirmed_secret:
                secret = account.totp_secret
                otpauth_url = self.codec.provisioning_uri(secret, account.email)
                regenerated = False
            else:
                generated = self.codec.generate_secret(account.email)
                secret = generated.secret
                otpauth_url = generated.provisioning_uri
                account.totp_secret = secret
                account.two_factor_enabled = False
                await self.uow.accounts.update(account)
                await self.uow.commit()
                regenerated = True

            self.events.record(
                "two_factor_enrolment_started",
                account_id=str(account_id),
                regenerated=regenerated,
            )

            return Return.ok(
                EnableTwoFactorResponse(
                    message="Scan the QR code with your authenticator app, then verify a code",
                    secret=secret,
                    otpauth_url=otpauth_url,
                    qr_code=self.codec.render_qr_code(otpauth_url),
                )
            )
