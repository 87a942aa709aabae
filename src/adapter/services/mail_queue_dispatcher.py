import logging
from typing import Callable, List

from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.services.notification_dispatcher import INotificationDispatcher
from src.domain.entities import MailQueueMessage

logger = logging.getLogger(__name__)


class MailQueueDispatcher(INotificationDispatcher):
    """
    Dispatcher that persists notifications to the mail_queue table.

    Each enqueue runs in its own session and transaction, independent of the
    lifecycle transaction that produced it. Delivery is the mail transport's job.
    """

    def __init__(self, session_factory: Callable[[], AsyncSession]):
        self.session_factory = session_factory

    async def enqueue(
        self, kind: str, recipients: List[str], model: dict, subject: str
    ) -> None:
        """Queue one notification for the given recipients"""
        message = MailQueueMessage(
            kind=kind,
            subject=subject,
            recipients=list(recipients),
            model=model,
        )
        message_id = message.id
        async with self.session_factory() as session:
            session.add(message)
            await session.commit()

        logger.debug(f"Mail queue message {message_id} created ({kind})")
