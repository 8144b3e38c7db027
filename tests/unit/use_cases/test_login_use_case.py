"""
Unit tests for LoginUseCase

Covers password login, the 2FA challenge and the code + pending token step.
"""
from datetime import datetime

import pyotp
import pytest

from src.api.utils.jwt import TokenPurpose, account_claims, issue_token, verify_token
from src.app.use_cases.auth import LoginCommand, LoginResponse, LoginUseCase, TwoFactorChallengeResponse


@pytest.fixture
def two_factor_account(make_account):
    return make_account(two_factor_enabled=True, totp_secret=pyotp.random_base32(32))


@pytest.mark.asyncio
async def test_login_without_two_factor(mock_uow, codec, events, make_account):
    # Arrange
    account = make_account()
    mock_uow.accounts.get_by_email.return_value = account
    use_case = LoginUseCase(mock_uow, codec, events)

    # Act
    result = await use_case.execute(
        LoginCommand(email="user@example.com", password="Abcd1234!")
    )

    # Assert
    assert result.is_ok()
    assert isinstance(result.value, LoginResponse)
    assert result.value.account.id == str(account.id)
    assert verify_token(result.value.token, TokenPurpose.session).is_ok()
    assert isinstance(account.last_login_at, datetime)
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_login_unknown_email_and_wrong_password_look_the_same(
    mock_uow, codec, events, make_account
):
    use_case = LoginUseCase(mock_uow, codec, events)

    unknown = await use_case.execute(
        LoginCommand(email="nobody@example.com", password="Abcd1234!")
    )
    mock_uow.accounts.get_by_email.return_value = make_account()
    wrong = await use_case.execute(
        LoginCommand(email="user@example.com", password="Wrong1234!")
    )

    assert unknown.is_err() and wrong.is_err()
    assert unknown.error == wrong.error
    assert unknown.error.code == "INVALID_CREDENTIALS"
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_login_missing_credentials(mock_uow, codec, events):
    use_case = LoginUseCase(mock_uow, codec, events)

    result = await use_case.execute(LoginCommand(email="user@example.com"))

    assert result.is_err()
    assert result.error.code == "MISSING_CREDENTIALS"
    mock_uow.accounts.get_by_email.assert_not_called()


@pytest.mark.asyncio
async def test_login_with_two_factor_returns_challenge(
    mock_uow, codec, events, two_factor_account
):
    mock_uow.accounts.get_by_email.return_value = two_factor_account
    use_case = LoginUseCase(mock_uow, codec, events)

    result = await use_case.execute(
        LoginCommand(email="user@example.com", password="Abcd1234!")
    )

    assert result.is_ok()
    challenge = result.value
    assert isinstance(challenge, TwoFactorChallengeResponse)
    assert challenge.two_factor_required is True
    assert challenge.message == "2FA verification required"
    # Pending token is not a session token
    assert verify_token(challenge.temp_token, TokenPurpose.session).is_err()
    assert verify_token(challenge.temp_token, TokenPurpose.two_factor_pending).is_ok()
    assert two_factor_account.last_login_at is None
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_login_with_code_and_pending_token(mock_uow, codec, events, two_factor_account):
    mock_uow.accounts.get_by_email.return_value = two_factor_account
    use_case = LoginUseCase(mock_uow, codec, events)
    challenge = await use_case.execute(
        LoginCommand(email="user@example.com", password="Abcd1234!")
    )

    result = await use_case.execute(
        LoginCommand(
            email="user@example.com",
            password="Abcd1234!",
            code=pyotp.TOTP(two_factor_account.totp_secret).now(),
            temp_token=challenge.value.temp_token,
        )
    )

    assert result.is_ok()
    assert isinstance(result.value, LoginResponse)
    assert result.value.account.two_factor_enabled is True
    assert verify_token(result.value.token, TokenPurpose.session).is_ok()
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_login_code_without_pending_token_is_rejected(
    mock_uow, codec, events, two_factor_account
):
    """A correct code alone does not bypass the challenge step"""
    mock_uow.accounts.get_by_email.return_value = two_factor_account
    use_case = LoginUseCase(mock_uow, codec, events)

    result = await use_case.execute(
        LoginCommand(
            email="user@example.com",
            password="Abcd1234!",
            code=pyotp.TOTP(two_factor_account.totp_secret).now(),
        )
    )

    assert result.is_err()
    assert result.error.code == "INVALID_2FA_TOKEN"


@pytest.mark.asyncio
async def test_login_pending_token_of_other_account_is_rejected(
    mock_uow, codec, events, make_account, two_factor_account
):
    other = make_account(email="other@example.com", two_factor_enabled=True)
    foreign_token = issue_token(account_claims(other), TokenPurpose.two_factor_pending)
    mock_uow.accounts.get_by_email.return_value = two_factor_account
    use_case = LoginUseCase(mock_uow, codec, events)

    result = await use_case.execute(
        LoginCommand(
            email="user@example.com",
            password="Abcd1234!",
            code=pyotp.TOTP(two_factor_account.totp_secret).now(),
            temp_token=foreign_token,
        )
    )

    assert result.is_err()
    assert result.error.code == "INVALID_2FA_TOKEN"


@pytest.mark.asyncio
async def test_login_session_token_cannot_stand_in_for_pending_token(
    mock_uow, codec, events, two_factor_account
):
    session_token = issue_token(account_claims(two_factor_account), TokenPurpose.session)
    mock_uow.accounts.get_by_email.return_value = two_factor_account
    use_case = LoginUseCase(mock_uow, codec, events)

    result = await use_case.execute(
        LoginCommand(
            email="user@example.com",
            password="Abcd1234!",
            code=pyotp.TOTP(two_factor_account.totp_secret).now(),
            temp_token=session_token,
        )
    )

    assert result.is_err()
    assert result.error.code == "INVALID_2FA_TOKEN"


@pytest.mark.asyncio
async def test_login_wrong_code(mock_uow, codec, events, two_factor_account):
    mock_uow.accounts.get_by_email.return_value = two_factor_account
    temp_token = issue_token(account_claims(two_factor_account), TokenPurpose.two_factor_pending)
    use_case = LoginUseCase(mock_uow, codec, events)

    result = await use_case.execute(
        LoginCommand(
            email="user@example.com",
            password="Abcd1234!",
            code="12345",
            temp_token=temp_token,
        )
    )

    assert result.is_err()
    assert result.error.code == "INVALID_2FA_CODE"
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_login_wrong_password_checked_before_code(
    mock_uow, codec, events, two_factor_account
):
    mock_uow.accounts.get_by_email.return_value = two_factor_account
    use_case = LoginUseCase(mock_uow, codec, events)

    result = await use_case.execute(
        LoginCommand(
            email="user@example.com",
            password="Wrong1234!",
            code=pyotp.TOTP(two_factor_account.totp_secret).now(),
        )
    )

    assert result.is_err()
    assert result.error.code == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_login_overlong_password_is_invalid_credentials(
    mock_uow, codec, events, make_account
):
    use_case = LoginUseCase(mock_uow, codec, events)

    unknown = await use_case.execute(LoginCommand(email="nobody@example.com", password="A" * 100))
    mock_uow.accounts.get_by_email.return_value = make_account()
    known = await use_case.execute(LoginCommand(email="user@example.com", password="A" * 100))

    assert unknown.is_err() and known.is_err()
    assert unknown.error.code == known.error.code == "INVALID_CREDENTIALS"
