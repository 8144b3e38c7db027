from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any, Dict

from jose import ExpiredSignatureError, JWTError, jwt

from config import ApplicationConfig
from src.libs.result import Error, Result, Return


class TokenPurpose(str, Enum):
    """What a bearer token grants"""

    session = "session"
    two_factor_pending = "two_factor_pending"


def token_lifetime(purpose: TokenPurpose) -> timedelta:
    if purpose == TokenPurpose.two_factor_pending:
        return timedelta(minutes=ApplicationConfig.TWO_FACTOR_TOKEN_TTL_MINUTES)
    return timedelta(minutes=ApplicationConfig.SESSION_TOKEN_TTL_MINUTES)


def issue_token(claims: Dict[str, Any], purpose: TokenPurpose) -> str:
    """
    Issue a signed bearer token

    Args:
        claims: Identity claims (sub, email, two_factor_enabled)
        purpose: session (1 hour) or two_factor_pending (5 minutes)

    Returns:
        JWT token string (HS256)
    """
    now = datetime.now(UTC)
    payload = dict(claims)
    payload.pop("two_factor_pending", None)
    if purpose == TokenPurpose.two_factor_pending:
        payload["two_factor_pending"] = True
    # Sub-second iat so a password change in the same second is ordered correctly
    payload["iat"] = now.timestamp()
    payload["exp"] = now + token_lifetime(purpose)
    return jwt.encode(
        payload, ApplicationConfig.JWT_SECRET, algorithm=ApplicationConfig.JWT_ALGORITHM
    )


def verify_token(token: str, purpose: TokenPurpose) -> Result[Dict[str, Any]]:
    """
    Verify and decode a bearer token

    Args:
        token: JWT token string
        purpose: Purpose the caller requires

    Returns:
        Result with decoded claims, or Error

    Errors:
        - TOKEN_EXPIRED: Signature valid but token past its expiry
        - INVALID_TOKEN: Malformed, tampered, or issued for another purpose
    """
    try:
        payload = jwt.decode(
            token,
            ApplicationConfig.JWT_SECRET,
            algorithms=[ApplicationConfig.JWT_ALGORITHM],
        )
    except ExpiredSignatureError:
        return Return.err(
            Error("TOKEN_EXPIRED", "Session expired. Please log in again.")
        )
    except JWTError:
        return Return.err(
            Error("INVALID_TOKEN", "Invalid token. Please log in again.")
        )

    pending = bool(payload.get("two_factor_pending", False))
    if pending != (purpose == TokenPurpose.two_factor_pending) or not payload.get("sub"):
        return Return.err(
            Error("INVALID_TOKEN", "Invalid token. Please log in again.")
        )

    return Return.ok(payload)


def account_claims(account) -> Dict[str, Any]:
    """Identity claims carried by every token issued for an account"""
    return {
        "sub": str(account.id),
        "email": account.email,
        "two_factor_enabled": bool(account.two_factor_enabled),
    }
