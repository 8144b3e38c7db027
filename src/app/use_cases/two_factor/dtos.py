"""
Two-Factor Use Case DTOs
"""

from pydantic import BaseModel


class EnableTwoFactorResponse(BaseModel):
    """Secret and enrolment material for an authenticator app"""

    message: str
    secret: str
    otpauth_url: str
    qr_code: str


class TwoFactorStatusResponse(BaseModel):
    """Response for verify / disable 2FA use cases"""

    message: str
    two_factor_enabled: bool
