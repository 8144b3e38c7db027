import bcrypt
import pytest
from unittest.mock import AsyncMock, MagicMock

from src.app.services.reset_code_manager import ResetCodeManager
from src.app.services.secret_codec import SecretCodec
from src.domain.entities import Account


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.accounts = MagicMock()
    uow.accounts.get_by_email = AsyncMock(return_value=None)
    uow.accounts.get_by_id = AsyncMock(return_value=None)
    uow.accounts.create = AsyncMock(side_effect=lambda account: account)
    uow.accounts.update = AsyncMock(side_effect=lambda account: account)
    return uow


@pytest.fixture
def events():
    return MagicMock()


@pytest.fixture
def codec():
    return SecretCodec(issuer="AuthenticatorApp", valid_window=2)


@pytest.fixture
def reset_codes():
    return ResetCodeManager(ttl_minutes=10)


@pytest.fixture
def make_account():
    """Build an Account with a real (cheap) bcrypt hash of `password`"""

    def _make(email="user@example.com", password="Abcd1234!", **fields):
        password_hash = bcrypt.hashpw(password.encode(), bcrypt.gensalt(4)).decode()
        return Account(email=email, password_hash=password_hash, **fields)

    return _make
