"""
Seat Notification Use Cases

Owner notifications fired by the (external) seat autoscaling process.
"""

import logging
from datetime import datetime

from src.app.notifications import (
    build_organization_autoscaled_notification,
    build_organization_max_seats_notification,
    send_notification,
)
from src.app.services.notification_dispatcher import INotificationDispatcher
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import Organization, OrganizationUserType

logger = logging.getLogger(__name__)


class SendOrganizationAutoscaledNotificationUseCase:
    """
    Use case for telling owners their seat count was increased automatically.

    Business Rules:
    - Owners are notified at most once (owners_notified_of_autoscaling)
    - The organization is only stamped when the notification was queued
    """

    def __init__(self, uow: UnitOfWork, dispatcher: INotificationDispatcher):
        self.uow = uow
        self.dispatcher = dispatcher

    async def execute(self, organization: Organization, initial_seat_count: int) -> bool:
        """
        Execute autoscaled notification use case.

        Returns:
            True if a notification was queued by this call
        """
        if organization.owners_notified_of_autoscaling is not None:
            return False

        owners = await self.uow.organization_users.get_many_by_minimum_role(
            organization.id, OrganizationUserType.owner
        )

        sent = await send_notification(
            self.dispatcher,
            build_organization_autoscaled_notification(
                organization, initial_seat_count, [owner.email for owner in owners]
            ),
        )
        if not sent:
            return False

        organization.owners_notified_of_autoscaling = datetime.utcnow()
        await self.uow.organizations.update(organization)
        await self.uow.commit()

        logger.info(f"Owners of organization {organization.id} notified of autoscaling")
        return True


class SendMaxSeatLimitReachedNotificationUseCase:
    """Use case for telling owners autoscaling hit max_autoscale_seats"""

    def __init__(self, uow: UnitOfWork, dispatcher: INotificationDispatcher):
        self.uow = uow
        self.dispatcher = dispatcher

    async def execute(self, organization: Organization, max_seat_count: int) -> bool:
        owners = await self.uow.organization_users.get_many_by_minimum_role(
            organization.id, OrganizationUserType.owner
        )

        return await send_notification(
            self.dispatcher,
            build_organization_max_seats_notification(
                organization, max_seat_count, [owner.email for owner in owners]
            ),
        )
