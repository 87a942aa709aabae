"""
Resend Sponsorship Offer Use Case

Handles reissuing the redemption token for a pending sponsorship offer.
"""

import logging
from typing import Optional

from src.app.notifications import (
    NotificationSettings,
    build_sponsorship_offer_notification,
    send_notification,
)
from src.app.repositories.errors import (
    RepositoryConflictError,
    RepositoryNotFoundError,
)
from src.app.services.notification_dispatcher import INotificationDispatcher
from src.app.services.tokens import RedemptionTokenCodec
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import (
    AuditEvent,
    Organization,
    OrganizationUser,
    Sponsorship,
    SponsorshipStatus,
)
from src.domain.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)

from .dtos import ResendSponsorshipOfferResponse
from .redemption_tokens import issue_redemption_token

logger = logging.getLogger(__name__)


class ResendSponsorshipOfferUseCase:
    """
    Use case for resending a sponsorship offer.

    Business Rules:
    - Only the sponsoring member can resend their own offer
    - Revoked/removed sponsorships cannot be resent (400)
    - Redeemed sponsorships have no outstanding offer (400)
    - Identity, offered_to_email and plan type never change;
      only the token nonce and expiry are replaced
    """

    def __init__(
        self,
        uow: UnitOfWork,
        token_codec: RedemptionTokenCodec,
        dispatcher: INotificationDispatcher,
        notification_settings: Optional[NotificationSettings] = None,
    ):
        self.uow = uow
        self.token_codec = token_codec
        self.dispatcher = dispatcher
        self.notification_settings = notification_settings or NotificationSettings()

    async def execute(
        self,
        sponsoring_organization: Optional[Organization],
        sponsoring_org_user: Optional[OrganizationUser],
        sponsorship: Optional[Sponsorship],
        sponsoring_user_email: str,
    ) -> ResendSponsorshipOfferResponse:
        """
        Execute resend sponsorship offer use case.

        Args:
            sponsoring_organization: Organization that granted the sponsorship
            sponsoring_org_user: The caller's membership in it
            sponsorship: The member's existing sponsorship, if any
            sponsoring_user_email: The caller's email (shown in the invite)

        Returns:
            ResendSponsorshipOfferResponse DTO

        Raises:
            NotFoundError, AuthorizationError, ValidationError, ConflictError
        """
        if sponsoring_organization is None:
            raise NotFoundError(
                "Cannot find the requested sponsoring organization.",
                code="ORGANIZATION_NOT_FOUND",
            )

        if sponsoring_org_user is None:
            raise NotFoundError(
                "Only members of the sponsoring organization can resend offers.",
                code="ORGANIZATION_USER_NOT_FOUND",
            )

        if sponsorship is None:
            raise NotFoundError(
                "Cannot find an outstanding sponsorship offer for this organization.",
                code="SPONSORSHIP_NOT_FOUND",
            )

        if (
            sponsorship.sponsoring_organization_user_id != sponsoring_org_user.id
            or sponsorship.sponsoring_organization_id != sponsoring_organization.id
        ):
            raise AuthorizationError(
                "Can only resend a sponsorship you granted.",
                code="NOT_SPONSORING_MEMBER",
            )

        if sponsorship.is_terminal:
            raise ValidationError(
                "This sponsorship has already ended.",
                code="SPONSORSHIP_TERMINATED",
            )

        if not sponsorship.is_pending or sponsorship.sponsored_organization_id:
            raise ValidationError(
                "This sponsorship has already been redeemed.",
                code="SPONSORSHIP_ALREADY_REDEEMED",
            )

        token = issue_redemption_token(self.token_codec, sponsorship)
        sponsorship.status = SponsorshipStatus.resent

        try:
            sponsorship = await self.uow.sponsorships.upsert(sponsorship)
        except RepositoryNotFoundError:
            raise NotFoundError(
                "Cannot find an outstanding sponsorship offer for this organization.",
                code="SPONSORSHIP_NOT_FOUND",
            )
        except RepositoryConflictError:
            raise ConflictError(
                "The sponsorship was modified concurrently. Try again.",
                code="SPONSORSHIP_MODIFIED",
            )

        audit = AuditEvent(
            organization_id=sponsoring_organization.id,
            user_id=sponsoring_org_user.user_id,
            action="sponsorship_offer_resent",
            event_metadata={
                "sponsorship_id": str(sponsorship.id),
                "offered_to_email": sponsorship.offered_to_email,
            },
        )
        await self.uow.audit_events.create(audit)

        # Commit transaction
        await self.uow.commit()

        logger.info(f"Sponsorship {sponsorship.id} offer resent")

        await send_notification(
            self.dispatcher,
            build_sponsorship_offer_notification(
                sponsorship,
                sponsoring_organization,
                token,
                sponsoring_user_email,
                self.notification_settings,
            ),
        )

        return ResendSponsorshipOfferResponse(
            sponsorship_id=str(sponsorship.id),
            status=sponsorship.status.value,
            expires_at=sponsorship.redemption_token_expires_at.isoformat(),
        )
