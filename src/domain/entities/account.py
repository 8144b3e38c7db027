"""
Account Entity

Identity record for a person who signs in with email and password.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel


def normalize_email(email: str) -> str:
    """Lookup form of an email address (trimmed, lower-cased)"""
    return email.strip().lower()


class Account(SQLModel, table=True):
    """
    Account entity - email/password identity with optional TOTP second factor.

    Business Rules:
    - Email is unique, stored trimmed and lower-cased
    - Password stored as bcrypt hash
    - totp_secret is present whenever two_factor_enabled is true
    - password_reset_code_hash holds the SHA-256 of either the numeric reset
      code or the escalated reset token; it is always written together with
      password_reset_expires_at
    - password_changed_at invalidates every token issued before it
    """

    __tablename__ = "accounts"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    password_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars

    # Second factor
    two_factor_enabled: bool = Field(default=False)
    totp_secret: Optional[str] = Field(default=None, max_length=64)

    # Password reset (code stage, then token stage)
    password_reset_code_hash: Optional[str] = Field(default=None, max_length=64)
    password_reset_expires_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime)
    )
    password_changed_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime)
    )

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )
    last_login_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    @property
    def has_unconfirmed_secret(self) -> bool:
        """A secret was generated but never confirmed with a valid code"""
        return bool(self.totp_secret) and not self.two_factor_enabled

    def clear_password_reset(self) -> None:
        self.password_reset_code_hash = None
        self.password_reset_expires_at = None
