import logging

from src.app.services.notification_dispatcher import INotificationDispatcher

from .builders import Notification

logger = logging.getLogger(__name__)


async def send_notification(
    dispatcher: INotificationDispatcher, notification: Notification
) -> bool:
    """
    Hand a notification to the dispatcher, best-effort.

    The lifecycle transition is already committed when this runs, so an
    enqueue failure is logged and reported as False instead of raised.
    """
    if not notification.recipients:
        logger.warning(f"No recipients for {notification.kind.value} notification")
        return False

    try:
        await dispatcher.enqueue(
            notification.kind.value,
            notification.recipients,
            notification.model,
            notification.subject,
        )
    except Exception:
        logger.exception(
            f"Failed to enqueue {notification.kind.value} notification "
            f"for {len(notification.recipients)} recipient(s)"
        )
        return False

    logger.info(f"Queued {notification.kind.value} notification")
    return True
