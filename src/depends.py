import logging
from typing import Optional

from fastapi import Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.services.email_dispatcher import ConsoleEmailDispatcher, SmtpEmailDispatcher
from src.adapter.services.event_recorder import LoggingEventRecorder
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import ClientError
from src.app.services.email_dispatcher import IEmailDispatcher
from src.app.services.event_recorder import IEventRecorder
from src.app.services.reset_code_manager import ResetCodeManager
from src.app.services.secret_codec import SecretCodec
from src.app.use_cases.auth import AccountInfo, AuthenticateSessionUseCase
from src.libs.result import Error

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer(auto_error=False)

logger = logging.getLogger(__name__)


def _build_email_dispatcher() -> IEmailDispatcher:
    if ApplicationConfig.EMAIL_BACKEND == "smtp":
        return SmtpEmailDispatcher(
            host=ApplicationConfig.SMTP_HOST,
            port=ApplicationConfig.SMTP_PORT,
            username=ApplicationConfig.SMTP_USERNAME,
            password=ApplicationConfig.SMTP_PASSWORD,
            sender=ApplicationConfig.EMAIL_FROM,
            starttls=ApplicationConfig.SMTP_STARTTLS,
            ttl_minutes=ApplicationConfig.PASSWORD_RESET_TTL_MINUTES,
        )
    logger.warning(
        "EMAIL_BACKEND is \"console\": password reset codes are written to the log "
        "instead of being emailed. Set EMAIL_BACKEND: smtp in env.yaml for deployments."
    )
    return ConsoleEmailDispatcher()


# Process-wide collaborators, constructed once
event_recorder = LoggingEventRecorder()
email_dispatcher = _build_email_dispatcher()
secret_codec = SecretCodec(
    issuer=ApplicationConfig.TOTP_ISSUER, valid_window=ApplicationConfig.TOTP_VALID_WINDOW
)
reset_code_manager = ResetCodeManager(ttl_minutes=ApplicationConfig.PASSWORD_RESET_TTL_MINUTES)


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_event_recorder() -> IEventRecorder:
    return event_recorder


def get_email_dispatcher() -> IEmailDispatcher:
    return email_dispatcher


def get_secret_codec() -> SecretCodec:
    return secret_codec


def get_reset_code_manager() -> ResetCodeManager:
    return reset_code_manager


async def get_current_account(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    uow=Depends(get_unit_of_work),
) -> AccountInfo:
    """
    Dependency guarding protected routes.

    Verifies the bearer token, reloads the account and applies the
    password-changed rule.

    Raises:
        ClientError: 401 with TOKEN_EXPIRED, INVALID_TOKEN, USER_NOT_FOUND,
            PASSWORD_CHANGED or AUTHENTICATION_REQUIRED
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise ClientError(
            Error("AUTHENTICATION_REQUIRED", "Authentication required. Please log in."),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    use_case = AuthenticateSessionUseCase(uow)
    result = await use_case.execute(credentials.credentials)

    if result.is_err():
        raise ClientError(result.error, status_code=status.HTTP_401_UNAUTHORIZED)

    return result.value
