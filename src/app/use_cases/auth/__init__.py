"""
Authentication Use Cases

Registration, login (including the TOTP step), session checks and the
password reset flow.
"""

from .register_use_case import RegisterUseCase
from .login_use_case import LoginUseCase
from .verify_two_factor_login_use_case import VerifyTwoFactorLoginUseCase
from .authenticate_session_use_case import AuthenticateSessionUseCase
from .forgot_password_use_case import ForgotPasswordUseCase
from .verify_reset_code_use_case import VerifyResetCodeUseCase
from .reset_password_use_case import ResetPasswordUseCase
from .dtos import (
    RegisterCommand,
    LoginCommand,
    ResetPasswordCommand,
    AccountInfo,
    RegisterResponse,
    LoginResponse,
    TwoFactorChallengeResponse,
    ForgotPasswordResponse,
    VerifyResetCodeResponse,
    ResetPasswordResponse,
)

__all__ = [
    # Use Cases
    "RegisterUseCase",
    "LoginUseCase",
    "VerifyTwoFactorLoginUseCase",
    "AuthenticateSessionUseCase",
    "ForgotPasswordUseCase",
    "VerifyResetCodeUseCase",
    "ResetPasswordUseCase",
    # DTOs - Commands
    "RegisterCommand",
    "LoginCommand",
    "ResetPasswordCommand",
    # DTOs - Responses
    "RegisterResponse",
    "LoginResponse",
    "TwoFactorChallengeResponse",
    "ForgotPasswordResponse",
    "VerifyResetCodeResponse",
    "ResetPasswordResponse",
    # DTOs - Nested Models
    "AccountInfo",
]
