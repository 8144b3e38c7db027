import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from tests.fixtures.json_loader import TestDataLoader
from src.app.services.email_dispatcher import EmailDeliveryError, IEmailDispatcher
from src.depends import get_email_dispatcher, get_unit_of_work
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork


class RecordingEmailDispatcher(IEmailDispatcher):
    """Keeps every reset code instead of sending it"""

    def __init__(self):
        self.sent = []
        self.fail = False

    async def send_reset_code(self, email: str, code: str) -> None:
        if self.fail:
            raise EmailDeliveryError("delivery disabled in test")
        self.sent.append((email, code))

    def last_code_for(self, email: str) -> str:
        return [code for to, code in self.sent if to == email][-1]


@pytest_asyncio.fixture
def test_data():
    return TestDataLoader()


@pytest_asyncio.fixture
def mailbox():
    return RecordingEmailDispatcher()


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///./test.db")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_session, mailbox):
    from httpx import ASGITransport
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_email_dispatcher] = lambda: mailbox

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def registered(client, test_data):
    """Account registered through the API; returns its credentials and token"""
    account = test_data.get_copy("account")
    response = await client.post("/auth/register", json=account)
    assert response.status_code == 201
    account["token"] = response.json()["token"]
    account["id"] = response.json()["account"]["id"]
    return account
