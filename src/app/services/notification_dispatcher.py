from abc import ABC, abstractmethod
from typing import List


class INotificationDispatcher(ABC):
    """
    Notification dispatcher interface - application layer

    Fire-and-forget from the caller's perspective: enqueue returns once the
    message is accepted by the queue, not once it is delivered.
    """

    @abstractmethod
    async def enqueue(
        self, kind: str, recipients: List[str], model: dict, subject: str
    ) -> None:
        """Queue one notification for the given recipients"""
        pass
