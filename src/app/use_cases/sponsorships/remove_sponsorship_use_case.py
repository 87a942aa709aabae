"""
Remove Sponsorship Use Case

Handles the sponsored organization opting out of an active sponsorship.
"""

import logging
from datetime import datetime
from typing import Optional

from src.app.notifications import (
    build_sponsorship_removed_notification,
    send_notification,
)
from src.app.repositories.errors import (
    RepositoryConflictError,
    RepositoryNotFoundError,
)
from src.app.services.notification_dispatcher import INotificationDispatcher
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import (
    AuditEvent,
    Organization,
    OrganizationUser,
    OrganizationUserType,
    Sponsorship,
    SponsorshipStatus,
)
from src.domain.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)

from .dtos import RemoveSponsorshipResponse

logger = logging.getLogger(__name__)


class RemoveSponsorshipUseCase:
    """
    Use case for removing a sponsorship from the sponsored side.

    Business Rules:
    - Only an owner of the sponsored organization can remove it
    - Only active sponsorships can be removed; pending and terminal are rejected
    - Marks the record "removed" with to_delete set
    - The sponsoring member is told about the opt-out
    """

    def __init__(self, uow: UnitOfWork, dispatcher: INotificationDispatcher):
        self.uow = uow
        self.dispatcher = dispatcher

    async def execute(
        self,
        sponsored_organization: Optional[Organization],
        caller_membership: Optional[OrganizationUser],
        sponsorship: Optional[Sponsorship],
    ) -> RemoveSponsorshipResponse:
        """
        Execute remove sponsorship use case.

        Args:
            sponsored_organization: Organization receiving the sponsorship
            caller_membership: The caller's membership in that organization
            sponsorship: Sponsorship looked up by sponsored organization

        Returns:
            RemoveSponsorshipResponse DTO

        Raises:
            NotFoundError, AuthorizationError, ValidationError, ConflictError
        """
        if sponsored_organization is None:
            raise NotFoundError(
                "Cannot find the sponsored organization.",
                code="ORGANIZATION_NOT_FOUND",
            )

        if sponsorship is None:
            raise NotFoundError(
                "The requested organization is not currently being sponsored.",
                code="SPONSORSHIP_NOT_FOUND",
            )

        if (
            caller_membership is None
            or caller_membership.organization_id != sponsored_organization.id
            or caller_membership.type != OrganizationUserType.owner
            or sponsorship.sponsored_organization_id != sponsored_organization.id
        ):
            raise AuthorizationError(
                "Only the owner of an organization can remove sponsorship.",
                code="NOT_ORGANIZATION_OWNER",
            )

        if sponsorship.is_terminal:
            raise ValidationError(
                "This sponsorship has already ended.",
                code="SPONSORSHIP_TERMINATED",
            )

        if not sponsorship.is_active:
            raise ValidationError(
                "The requested organization is not currently being sponsored.",
                code="SPONSORSHIP_NOT_ACTIVE",
            )

        sponsorship.status = SponsorshipStatus.removed
        sponsorship.to_delete = True
        sponsorship.terminated_at = datetime.utcnow()

        try:
            sponsorship = await self.uow.sponsorships.upsert(sponsorship)
        except RepositoryNotFoundError:
            raise NotFoundError(
                "The requested organization is not currently being sponsored.",
                code="SPONSORSHIP_NOT_FOUND",
            )
        except RepositoryConflictError:
            raise ConflictError(
                "The sponsorship was modified concurrently. Try again.",
                code="SPONSORSHIP_MODIFIED",
            )

        audit = AuditEvent(
            organization_id=sponsored_organization.id,
            user_id=caller_membership.user_id,
            action="sponsorship_removed",
            event_metadata={
                "sponsorship_id": str(sponsorship.id),
                "sponsoring_organization_id": str(sponsorship.sponsoring_organization_id),
            },
        )
        await self.uow.audit_events.create(audit)

        sponsoring_member = await self.uow.organization_users.get_by_id(
            sponsorship.sponsoring_organization_user_id
        )

        # Commit transaction
        await self.uow.commit()

        logger.info(
            f"Sponsorship {sponsorship.id} removed by organization "
            f"{sponsored_organization.id}"
        )

        await send_notification(
            self.dispatcher,
            build_sponsorship_removed_notification(
                sponsorship,
                sponsored_organization,
                sponsoring_member.email if sponsoring_member else None,
            ),
        )

        return RemoveSponsorshipResponse(
            sponsorship_id=str(sponsorship.id),
            status=sponsorship.status.value,
        )
