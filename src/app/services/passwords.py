"""
Password hashing helpers (bcrypt).
"""

from functools import lru_cache

import bcrypt

from config import ApplicationConfig
from src.libs.result import Error, Result, Return

# bcrypt only reads this many bytes of input and rejects anything longer
MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    password_hash = bcrypt.hashpw(
        password.encode("utf-8"), bcrypt.gensalt(ApplicationConfig.BCRYPT_ROUNDS)
    )
    return password_hash.decode("utf-8")


def check_password(password: str, password_hash: str) -> bool:
    """False for a wrong password, including one no stored hash can match"""
    encoded = password.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        burn_password_check(password)
        return False
    return bcrypt.checkpw(encoded, password_hash.encode("utf-8"))


@lru_cache(maxsize=1)
def _dummy_hash() -> bytes:
    return bcrypt.hashpw(b"dummy_password", bcrypt.gensalt(ApplicationConfig.BCRYPT_ROUNDS))


def burn_password_check(password: str) -> None:
    """Spend the time of a real check when there is no account to compare against"""
    bcrypt.checkpw(password.encode("utf-8")[:MAX_PASSWORD_BYTES], _dummy_hash())


def validate_password(password: str) -> Result[None]:
    """Password complexity rules: minimum length, and what bcrypt can hash"""
    if len(password) < ApplicationConfig.PASSWORD_MIN_LENGTH:
        return Return.err(
            Error(
                "INVALID_PASSWORD",
                f"Password must be at least {ApplicationConfig.PASSWORD_MIN_LENGTH} characters long",
            )
        )
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        return Return.err(
            Error(
                "INVALID_PASSWORD",
                f"Password must be at most {MAX_PASSWORD_BYTES} bytes long",
            )
        )
    return Return.ok(None)
