"""
Password reset code lifecycle.

A reset runs in two stages that share the same account fields:
the emailed 6-digit code, then the high-entropy reset token it is
exchanged for. Only SHA-256 digests are stored.
"""

import hashlib
import hmac
import re
import secrets
from datetime import datetime, timedelta

from src.domain.entities import Account
from src.libs.result import Error, Result, Return

CODE_DIGITS = 6
TOKEN_BYTES = 32

_CODE_PATTERN = re.compile(r"^\d{%d}$" % CODE_DIGITS)
_TOKEN_PATTERN = re.compile(r"^[0-9a-f]{%d}$" % (TOKEN_BYTES * 2))


def hash_secret(value: str) -> str:
    return hashlib.sha256(value.encode()).hexdigest()


class ResetCodeManager:
    """
    Issues, verifies and consumes password reset credentials on an Account.

    Business Rules:
    - At most one pending reset per account; a new code overwrites the old one
    - Hash and expiry are always written together
    - An expired entry never matches, whatever the hash
    - A verified code is replaced by a reset token immediately
    - Only a reset token (never the numeric code) is accepted by consume_token

    The manager mutates the account in memory; callers persist it.
    """

    def __init__(self, ttl_minutes: int = 10):
        self.ttl = timedelta(minutes=ttl_minutes)

    def issue_code(self, account: Account) -> str:
        """Store a fresh code hash on the account and return the plaintext code"""
        code = str(secrets.randbelow(10 ** CODE_DIGITS)).zfill(CODE_DIGITS)
        self._store(account, code)
        return code

    def verify_code(self, account: Account, code: str) -> Result[str]:
        """
        Exchange a valid reset code for a one-time reset token.

        Returns:
            Result with the plaintext reset token, or Error(INVALID_OR_EXPIRED_CODE)
        """
        code = (code or "").strip()
        if not _CODE_PATTERN.match(code) or not self._matches(account, code):
            return Return.err(
                Error("INVALID_OR_EXPIRED_CODE", "Invalid or expired verification code")
            )

        reset_token = secrets.token_hex(TOKEN_BYTES)
        self._store(account, reset_token)
        return Return.ok(reset_token)

    def consume_token(self, account: Account, reset_token: str) -> Result[None]:
        """
        Accept a reset token once and clear the pending reset.

        Returns:
            Result with None, or Error(INVALID_OR_EXPIRED_TOKEN)
        """
        reset_token = (reset_token or "").strip()
        if not _TOKEN_PATTERN.match(reset_token) or not self._matches(account, reset_token):
            return Return.err(
                Error("INVALID_OR_EXPIRED_TOKEN", "Invalid or expired reset token")
            )

        account.clear_password_reset()
        return Return.ok(None)

    def _store(self, account: Account, plaintext: str) -> None:
        account.password_reset_code_hash = hash_secret(plaintext)
        account.password_reset_expires_at = datetime.utcnow() + self.ttl

    def _matches(self, account: Account, plaintext: str) -> bool:
        if not account.password_reset_code_hash or account.password_reset_expires_at is None:
            return False
        if account.password_reset_expires_at <= datetime.utcnow():
            return False
        return hmac.compare_digest(account.password_reset_code_hash, hash_secret(plaintext))
