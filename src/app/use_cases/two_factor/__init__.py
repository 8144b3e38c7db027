"""
Two-Factor Use Cases

TOTP enrolment, confirmation and removal for signed-in accounts.
"""

from .enable_two_factor_use_case import EnableTwoFactorUseCase
from .verify_two_factor_use_case import VerifyTwoFactorUseCase
from .disable_two_factor_use_case import DisableTwoFactorUseCase
from .dtos import EnableTwoFactorResponse, TwoFactorStatusResponse

__all__ = [
    # Use Cases
    "EnableTwoFactorUseCase",
    "VerifyTwoFactorUseCase",
    "DisableTwoFactorUseCase",
    # DTOs - Responses
    "EnableTwoFactorResponse",
    "TwoFactorStatusResponse",
]
