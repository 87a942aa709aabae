from datetime import timedelta

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.services.mail_queue_dispatcher import MailQueueDispatcher
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.utils.jwt import verify_jwt
from src.app.notifications import NotificationSettings
from src.app.services.notification_dispatcher import INotificationDispatcher
from src.app.services.tokens import RedemptionTokenCodec
from src.domain.errors import ValidationError

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer()


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_notification_dispatcher() -> INotificationDispatcher:
    return MailQueueDispatcher(AsyncSessionLocal)


def get_token_codec() -> RedemptionTokenCodec:
    return RedemptionTokenCodec(
        secret=ApplicationConfig.SPONSORSHIP_TOKEN_SECRET,
        ttl=timedelta(days=ApplicationConfig.SPONSORSHIP_TOKEN_TTL_DAYS),
    )


def get_notification_settings() -> NotificationSettings:
    return NotificationSettings(
        web_vault_url=ApplicationConfig.WEB_VAULT_URL,
        site_name=ApplicationConfig.SITE_NAME,
    )


def get_self_hosted() -> bool:
    return ApplicationConfig.SELF_HOSTED


def require_cloud_installation(self_hosted: bool = Depends(get_self_hosted)) -> None:
    """
    Dependency rejecting cloud-only endpoints on self-hosted installations.

    Raises:
        ValidationError: 400 if the installation is self-hosted
    """
    if self_hosted:
        raise ValidationError(
            "Only available to cloud instances.",
            code="NOT_AVAILABLE_SELF_HOSTED",
        )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> dict:
    """
    Dependency to extract and verify JWT token from Authorization header.

    Args:
        credentials: Bearer token from Authorization header

    Returns:
        Decoded JWT payload containing user_id, email

    Raises:
        HTTPException: 401 if token is invalid or expired
    """
    token = credentials.credentials
    payload = verify_jwt(token)

    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )

    return payload
