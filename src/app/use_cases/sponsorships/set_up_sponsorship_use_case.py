"""
Set Up Sponsorship Use Case

Handles redeeming a pending sponsorship offer for a sponsored organization.
"""

import logging
from typing import Optional

from src.app.notifications import (
    build_sponsorship_redeemed_notification,
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
from src.domain.errors import AuthorizationError, NotFoundError, ValidationError
from src.domain.plans import organization_can_be_sponsored

from .dtos import SetUpSponsorshipResponse

logger = logging.getLogger(__name__)


class SetUpSponsorshipUseCase:
    """
    Use case for redeeming a sponsorship offer.

    Business Rules:
    - Caller must own the organization being sponsored
    - Revoked/removed or already redeemed offers are rejected (not re-entrant)
    - Only families organizations can be sponsored
    - An organization can hold only one non-terminal sponsorship
    - Binds sponsored_organization_id, moves to "active" and clears the token
    - Confirmation goes to the sponsoring member and the sponsoring
      organization's admins
    """

    def __init__(self, uow: UnitOfWork, dispatcher: INotificationDispatcher):
        self.uow = uow
        self.dispatcher = dispatcher

    async def execute(
        self,
        sponsorship: Optional[Sponsorship],
        sponsored_organization: Optional[Organization],
        caller_membership: Optional[OrganizationUser],
    ) -> SetUpSponsorshipResponse:
        """
        Execute set up sponsorship use case.

        Args:
            sponsorship: Offer looked up by the caller's email
            sponsored_organization: Organization receiving the sponsorship
            caller_membership: The caller's membership in that organization

        Returns:
            SetUpSponsorshipResponse DTO

        Raises:
            NotFoundError, AuthorizationError, ValidationError
        """
        if sponsorship is None:
            raise NotFoundError(
                "No unredeemed sponsorship offer exists for you.",
                code="SPONSORSHIP_NOT_FOUND",
            )

        if sponsored_organization is None:
            raise NotFoundError(
                "Cannot find the organization to sponsor.",
                code="ORGANIZATION_NOT_FOUND",
            )

        if (
            caller_membership is None
            or caller_membership.organization_id != sponsored_organization.id
            or caller_membership.type != OrganizationUserType.owner
        ):
            raise AuthorizationError(
                "Can only redeem sponsorship for an organization you own.",
                code="NOT_ORGANIZATION_OWNER",
            )

        if sponsorship.is_terminal:
            raise ValidationError(
                "This sponsorship offer has been revoked.",
                code="SPONSORSHIP_TERMINATED",
            )

        if sponsorship.sponsored_organization_id is not None or sponsorship.is_active:
            raise ValidationError(
                "This sponsorship offer has already been redeemed.",
                code="SPONSORSHIP_ALREADY_REDEEMED",
            )

        if not organization_can_be_sponsored(
            sponsored_organization, sponsorship.plan_sponsorship_type
        ):
            raise ValidationError(
                "Can only redeem sponsorship offer on families organizations.",
                code="ORGANIZATION_NOT_ELIGIBLE",
            )

        existing = await self.uow.sponsorships.get_by_sponsored_organization(
            sponsored_organization.id
        )
        if existing is not None and not existing.is_terminal:
            raise ValidationError(
                "Cannot redeem a sponsorship offer for an organization that is "
                "already sponsored. Revoke existing sponsorship first.",
                code="ORGANIZATION_ALREADY_SPONSORED",
            )

        sponsorship.sponsored_organization_id = sponsored_organization.id
        sponsorship.status = SponsorshipStatus.active
        sponsorship.redemption_token_id = None
        sponsorship.redemption_token_expires_at = None

        try:
            sponsorship = await self.uow.sponsorships.upsert(sponsorship)
        except RepositoryNotFoundError:
            raise NotFoundError(
                "No unredeemed sponsorship offer exists for you.",
                code="SPONSORSHIP_NOT_FOUND",
            )
        except RepositoryConflictError:
            # Lost the compare-and-swap: someone else redeemed or revoked first
            raise ValidationError(
                "This sponsorship offer is no longer available.",
                code="SPONSORSHIP_ALREADY_REDEEMED",
            )

        audit = AuditEvent(
            organization_id=sponsorship.sponsoring_organization_id,
            user_id=caller_membership.user_id,
            action="sponsorship_redeemed",
            event_metadata={
                "sponsorship_id": str(sponsorship.id),
                "sponsored_organization_id": str(sponsored_organization.id),
            },
        )
        await self.uow.audit_events.create(audit)

        sponsoring_admins = await self.uow.organization_users.get_many_by_minimum_role(
            sponsorship.sponsoring_organization_id, OrganizationUserType.admin
        )
        sponsoring_member = await self.uow.organization_users.get_by_id(
            sponsorship.sponsoring_organization_user_id
        )

        # Commit transaction
        await self.uow.commit()

        logger.info(
            f"Sponsorship {sponsorship.id} redeemed for organization "
            f"{sponsored_organization.id}"
        )

        await send_notification(
            self.dispatcher,
            build_sponsorship_redeemed_notification(
                sponsorship,
                sponsored_organization,
                [admin.email for admin in sponsoring_admins],
                sponsoring_member.email if sponsoring_member else None,
            ),
        )

        return SetUpSponsorshipResponse(
            sponsorship_id=str(sponsorship.id),
            sponsored_organization_id=str(sponsored_organization.id),
            status=sponsorship.status.value,
        )
