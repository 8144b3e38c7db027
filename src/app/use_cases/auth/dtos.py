"""
Authentication Use Case DTOs (Data Transfer Objects)

All Command and Response classes for auth domain.
Commands keep every field optional: presence is a business rule checked by
the use case so it can answer with MISSING_FIELDS / MISSING_CREDENTIALS.
"""

from typing import Optional
from pydantic import BaseModel


# ============================================================================
# Command DTOs
# ============================================================================


class RegisterCommand(BaseModel):
    """Register command - new email/password account"""

    email: Optional[str] = None
    password: Optional[str] = None


class LoginCommand(BaseModel):
    """
    Login command

    code and temp_token are only used for the second step of a 2FA login;
    the temp_token must be the 2FA-pending token issued to the same account.
    """

    email: Optional[str] = None
    password: Optional[str] = None
    code: Optional[str] = None
    temp_token: Optional[str] = None


class ResetPasswordCommand(BaseModel):
    """Reset password command - reset token travels in the request body"""

    email: Optional[str] = None
    token: Optional[str] = None
    new_password: Optional[str] = None


# ============================================================================
# Response DTOs
# ============================================================================


class AccountInfo(BaseModel):
    """Account information in authentication responses"""

    id: str
    email: str
    two_factor_enabled: bool


class RegisterResponse(BaseModel):
    """Response for register use case"""

    message: str
    token: str
    account: AccountInfo


class LoginResponse(BaseModel):
    """Response for a completed login (session granted)"""

    message: str
    token: str
    account: AccountInfo


class TwoFactorChallengeResponse(BaseModel):
    """Response for a login that still needs a TOTP code"""

    message: str
    two_factor_required: bool = True
    temp_token: str


class ForgotPasswordResponse(BaseModel):
    """Response for forgot password use case (same for every email)"""

    status: str
    message: str


class VerifyResetCodeResponse(BaseModel):
    """Response for verify reset code use case"""

    message: str
    reset_token: str


class ResetPasswordResponse(BaseModel):
    """Response for reset password use case"""

    status: str
    message: str
