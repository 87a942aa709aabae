"""
Organization Use Cases

Notification hooks fired by seat autoscaling.
"""

from .seat_notification_use_cases import (
    SendMaxSeatLimitReachedNotificationUseCase,
    SendOrganizationAutoscaledNotificationUseCase,
)

__all__ = [
    "SendOrganizationAutoscaledNotificationUseCase",
    "SendMaxSeatLimitReachedNotificationUseCase",
]
