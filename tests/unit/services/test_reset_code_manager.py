"""
Unit tests for ResetCodeManager

Covers the code -> token escalation and single-use guarantees.
"""
import hashlib
from datetime import datetime, timedelta

from src.app.services.reset_code_manager import ResetCodeManager
from src.domain.entities import Account


def sha256(value: str) -> str:
    return hashlib.sha256(value.encode()).hexdigest()


def test_issue_code_stores_only_hash_and_expiry(reset_codes, make_account):
    account = make_account()

    code = reset_codes.issue_code(account)

    assert len(code) == 6 and code.isdigit()
    assert account.password_reset_code_hash == sha256(code)
    assert code not in account.password_reset_code_hash
    remaining = account.password_reset_expires_at - datetime.utcnow()
    assert timedelta(minutes=9) < remaining <= timedelta(minutes=10)


def test_issue_code_overwrites_previous_code(reset_codes, make_account):
    account = make_account()
    first = reset_codes.issue_code(account)
    second = reset_codes.issue_code(account)

    assert account.password_reset_code_hash == sha256(second)
    if first != second:
        assert reset_codes.verify_code(account, first).is_err()
    assert reset_codes.verify_code(account, second).is_ok()


def test_verify_code_escalates_to_reset_token(reset_codes, make_account):
    account = make_account()
    code = reset_codes.issue_code(account)

    result = reset_codes.verify_code(account, code)

    assert result.is_ok()
    reset_token = result.value
    assert len(reset_token) == 64
    assert account.password_reset_code_hash == sha256(reset_token)
    assert account.password_reset_expires_at > datetime.utcnow()


def test_verify_code_succeeds_exactly_once(reset_codes, make_account):
    account = make_account()
    code = reset_codes.issue_code(account)

    assert reset_codes.verify_code(account, code).is_ok()
    second = reset_codes.verify_code(account, code)

    assert second.is_err()
    assert second.error.code == "INVALID_OR_EXPIRED_CODE"


def test_verify_code_wrong_code(reset_codes, make_account):
    account = make_account()
    code = reset_codes.issue_code(account)
    wrong = "000000" if code != "000000" else "111111"

    result = reset_codes.verify_code(account, wrong)

    assert result.is_err()
    assert result.error.code == "INVALID_OR_EXPIRED_CODE"
    # Outstanding code untouched
    assert account.password_reset_code_hash == sha256(code)


def test_verify_code_expired(reset_codes, make_account):
    account = make_account()
    code = reset_codes.issue_code(account)
    account.password_reset_expires_at = datetime.utcnow() - timedelta(seconds=1)

    result = reset_codes.verify_code(account, code)

    assert result.is_err()
    assert result.error.code == "INVALID_OR_EXPIRED_CODE"


def test_verify_code_without_pending_reset(reset_codes, make_account):
    account = make_account()

    result = reset_codes.verify_code(account, "123456")

    assert result.is_err()
    assert result.error.code == "INVALID_OR_EXPIRED_CODE"


def test_verify_code_rejects_reset_token(reset_codes, make_account):
    """A reset token cannot be escalated again through the code endpoint"""
    account = make_account()
    reset_token = reset_codes.verify_code(account, reset_codes.issue_code(account)).value

    result = reset_codes.verify_code(account, reset_token)

    assert result.is_err()
    assert account.password_reset_code_hash == sha256(reset_token)


def test_consume_token_succeeds_exactly_once(reset_codes, make_account):
    account = make_account()
    reset_token = reset_codes.verify_code(account, reset_codes.issue_code(account)).value

    first = reset_codes.consume_token(account, reset_token)
    second = reset_codes.consume_token(account, reset_token)

    assert first.is_ok()
    assert account.password_reset_code_hash is None
    assert account.password_reset_expires_at is None
    assert second.is_err()
    assert second.error.code == "INVALID_OR_EXPIRED_TOKEN"


def test_consume_token_rejects_numeric_code(reset_codes, make_account):
    """The low-entropy code is never accepted as the final reset credential"""
    account = make_account()
    code = reset_codes.issue_code(account)

    result = reset_codes.consume_token(account, code)

    assert result.is_err()
    assert result.error.code == "INVALID_OR_EXPIRED_TOKEN"
    assert account.password_reset_code_hash == sha256(code)


def test_consume_token_expired(reset_codes, make_account):
    account = make_account()
    reset_token = reset_codes.verify_code(account, reset_codes.issue_code(account)).value
    account.password_reset_expires_at = datetime.utcnow() - timedelta(minutes=1)

    result = reset_codes.consume_token(account, reset_token)

    assert result.is_err()
    assert result.error.code == "INVALID_OR_EXPIRED_TOKEN"


def test_consume_token_wrong_token(reset_codes, make_account):
    account = make_account()
    reset_codes.verify_code(account, reset_codes.issue_code(account))

    result = reset_codes.consume_token(account, "f" * 64)

    assert result.is_err()
    assert account.password_reset_code_hash is not None


def test_custom_ttl():
    manager = ResetCodeManager(ttl_minutes=1)

    account = Account(email="user@example.com", password_hash="x")
    manager.issue_code(account)

    assert account.password_reset_expires_at - datetime.utcnow() <= timedelta(minutes=1)
