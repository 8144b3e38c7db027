"""
Authenticator Domain Entities
"""

from .account import Account, normalize_email

__all__ = [
    "Account",
    "normalize_email",
]
