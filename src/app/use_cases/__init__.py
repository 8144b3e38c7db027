"""
Use Cases

Organized into domain folders:
- auth/: Registration, login, session checks, password reset
- two_factor/: TOTP enrolment and removal
"""

from .auth import (
    RegisterUseCase,
    LoginUseCase,
    VerifyTwoFactorLoginUseCase,
    AuthenticateSessionUseCase,
    ForgotPasswordUseCase,
    VerifyResetCodeUseCase,
    ResetPasswordUseCase,
)
from .two_factor import (
    EnableTwoFactorUseCase,
    VerifyTwoFactorUseCase,
    DisableTwoFactorUseCase,
)

__all__ = [
    # Auth
    "RegisterUseCase",
    "LoginUseCase",
    "VerifyTwoFactorLoginUseCase",
    "AuthenticateSessionUseCase",
    "ForgotPasswordUseCase",
    "VerifyResetCodeUseCase",
    "ResetPasswordUseCase",
    # Two-factor
    "EnableTwoFactorUseCase",
    "VerifyTwoFactorUseCase",
    "DisableTwoFactorUseCase",
]
