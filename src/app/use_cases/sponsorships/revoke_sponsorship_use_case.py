"""
Revoke Sponsorship Use Case

Handles the sponsoring member ending a pending or active sponsorship.
"""

import logging
from datetime import datetime
from typing import Optional

from src.app.notifications import (
    build_sponsorship_revoked_notification,
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

from .dtos import RevokeSponsorshipResponse

logger = logging.getLogger(__name__)


class RevokeSponsorshipUseCase:
    """
    Use case for revoking a sponsorship.

    Business Rules:
    - Only the member who granted the sponsorship can revoke it
    - Works from offered, resent and active; terminal records are rejected
    - Marks the record "revoked" with to_delete set; physical deletion and
      plan downgrade of the sponsored organization happen elsewhere
    """

    def __init__(self, uow: UnitOfWork, dispatcher: INotificationDispatcher):
        self.uow = uow
        self.dispatcher = dispatcher

    async def execute(
        self,
        sponsoring_organization: Optional[Organization],
        caller_membership: Optional[OrganizationUser],
        sponsorship: Optional[Sponsorship],
        sponsored_organization: Optional[Organization] = None,
    ) -> RevokeSponsorshipResponse:
        """
        Execute revoke sponsorship use case.

        Args:
            sponsoring_organization: Organization that granted the sponsorship
            caller_membership: The caller's membership in that organization
            sponsorship: The caller's sponsorship, if any
            sponsored_organization: Organization bound to an active sponsorship

        Returns:
            RevokeSponsorshipResponse DTO

        Raises:
            NotFoundError, AuthorizationError, ValidationError, ConflictError
        """
        if sponsoring_organization is None:
            raise NotFoundError(
                "Cannot find the requested sponsoring organization.",
                code="ORGANIZATION_NOT_FOUND",
            )

        if sponsorship is None:
            raise NotFoundError(
                "You are not currently sponsoring an organization.",
                code="SPONSORSHIP_NOT_FOUND",
            )

        if (
            caller_membership is None
            or caller_membership.organization_id != sponsoring_organization.id
            or sponsorship.sponsoring_organization_user_id != caller_membership.id
            or sponsorship.sponsoring_organization_id != sponsoring_organization.id
        ):
            raise AuthorizationError(
                "Can only revoke a sponsorship you granted.",
                code="NOT_SPONSORING_MEMBER",
            )

        if sponsorship.is_terminal:
            raise ValidationError(
                "This sponsorship has already ended.",
                code="SPONSORSHIP_TERMINATED",
            )

        if (
            sponsored_organization is not None
            and sponsored_organization.id != sponsorship.sponsored_organization_id
        ):
            raise ValidationError(
                "The organization is not sponsored by this sponsorship.",
                code="SPONSORED_ORGANIZATION_MISMATCH",
            )

        was_active = sponsorship.is_active

        sponsorship.status = SponsorshipStatus.revoked
        sponsorship.to_delete = True
        sponsorship.terminated_at = datetime.utcnow()
        sponsorship.redemption_token_id = None
        sponsorship.redemption_token_expires_at = None

        try:
            sponsorship = await self.uow.sponsorships.upsert(sponsorship)
        except RepositoryNotFoundError:
            raise NotFoundError(
                "You are not currently sponsoring an organization.",
                code="SPONSORSHIP_NOT_FOUND",
            )
        except RepositoryConflictError:
            raise ConflictError(
                "The sponsorship was modified concurrently. Try again.",
                code="SPONSORSHIP_MODIFIED",
            )

        audit = AuditEvent(
            organization_id=sponsoring_organization.id,
            user_id=caller_membership.user_id,
            action="sponsorship_revoked",
            event_metadata={
                "sponsorship_id": str(sponsorship.id),
                "was_active": was_active,
                "sponsored_organization_id": (
                    str(sponsorship.sponsored_organization_id)
                    if sponsorship.sponsored_organization_id
                    else None
                ),
            },
        )
        await self.uow.audit_events.create(audit)

        sponsored_owner_emails = []
        if was_active:
            sponsored_owners = await self.uow.organization_users.get_many_by_minimum_role(
                sponsorship.sponsored_organization_id, OrganizationUserType.owner
            )
            sponsored_owner_emails = [owner.email for owner in sponsored_owners]

        # Commit transaction
        await self.uow.commit()

        logger.info(f"Sponsorship {sponsorship.id} revoked (was_active={was_active})")

        await send_notification(
            self.dispatcher,
            build_sponsorship_revoked_notification(
                sponsorship,
                sponsoring_organization,
                was_active,
                sponsored_owner_emails,
                sponsored_organization,
            ),
        )

        return RevokeSponsorshipResponse(
            sponsorship_id=str(sponsorship.id),
            status=sponsorship.status.value,
            sponsored_organization_id=(
                str(sponsorship.sponsored_organization_id)
                if sponsorship.sponsored_organization_id
                else None
            ),
        )
