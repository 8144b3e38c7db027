"""
Unit tests for RegisterUseCase
"""
import bcrypt
import pytest

from src.api.utils.jwt import TokenPurpose, verify_token
from src.app.repositories.account_repository import DuplicateEmailError
from src.app.use_cases.auth import RegisterCommand, RegisterUseCase


@pytest.mark.asyncio
async def test_register_success(mock_uow, events):
    """New account is created with a bcrypt hash and signed in"""
    # Arrange
    use_case = RegisterUseCase(mock_uow, events)
    command = RegisterCommand(email="  New.User@Example.com ", password="Abcd1234!")

    # Act
    result = await use_case.execute(command)

    # Assert
    assert result.is_ok()
    response = result.value
    assert response.account.email == "new.user@example.com"
    assert response.account.two_factor_enabled is False

    created = mock_uow.accounts.create.call_args[0][0]
    assert created.password_hash != "Abcd1234!"
    assert bcrypt.checkpw(b"Abcd1234!", created.password_hash.encode())
    assert created.totp_secret is None

    claims = verify_token(response.token, TokenPurpose.session)
    assert claims.is_ok()
    assert claims.value["sub"] == response.account.id
    mock_uow.commit.assert_called_once()
    events.record.assert_called_with(
        "account_registered", account_id=response.account.id, email="new.user@example.com"
    )


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "email,password",
    [(None, "Abcd1234!"), ("user@example.com", None), ("", "Abcd1234!"), ("   ", "Abcd1234!")],
)
async def test_register_missing_fields(mock_uow, events, email, password):
    use_case = RegisterUseCase(mock_uow, events)

    result = await use_case.execute(RegisterCommand(email=email, password=password))

    assert result.is_err()
    assert result.error.code == "MISSING_FIELDS"
    mock_uow.accounts.create.assert_not_called()


@pytest.mark.asyncio
async def test_register_short_password(mock_uow, events):
    use_case = RegisterUseCase(mock_uow, events)

    result = await use_case.execute(RegisterCommand(email="user@example.com", password="short"))

    assert result.is_err()
    assert result.error.code == "INVALID_PASSWORD"
    assert "8" in result.error.message
    mock_uow.accounts.create.assert_not_called()


@pytest.mark.asyncio
async def test_register_email_in_use(mock_uow, events, make_account):
    mock_uow.accounts.get_by_email.return_value = make_account(email="user@example.com")
    use_case = RegisterUseCase(mock_uow, events)

    result = await use_case.execute(
        RegisterCommand(email="USER@example.com", password="Abcd1234!")
    )

    assert result.is_err()
    assert result.error.code == "EMAIL_IN_USE"
    mock_uow.accounts.create.assert_not_called()
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_register_concurrent_duplicate_rejected_by_store(mock_uow, events):
    """Lost race on the unique index is reported as EMAIL_IN_USE"""
    mock_uow.accounts.create.side_effect = DuplicateEmailError("user@example.com")
    use_case = RegisterUseCase(mock_uow, events)

    result = await use_case.execute(
        RegisterCommand(email="user@example.com", password="Abcd1234!")
    )

    assert result.is_err()
    assert result.error.code == "EMAIL_IN_USE"
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_register_password_longer_than_bcrypt_input(mock_uow, events):
    """Over 72 bytes is rejected up front instead of failing inside bcrypt"""
    use_case = RegisterUseCase(mock_uow, events)

    result = await use_case.execute(RegisterCommand(email="user@example.com", password="A" * 100))

    assert result.is_err()
    assert result.error.code == "INVALID_PASSWORD"
    mock_uow.accounts.create.assert_not_called()
