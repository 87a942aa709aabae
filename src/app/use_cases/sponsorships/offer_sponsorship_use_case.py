"""
Offer Sponsorship Use Case

Handles a sponsoring member offering a sponsored plan to an email address.
"""

import logging
from typing import Optional

from src.app.notifications import (
    NotificationSettings,
    build_sponsorship_offer_notification,
    send_notification,
)
from src.app.repositories.errors import RepositoryConflictError
from src.app.services.notification_dispatcher import INotificationDispatcher
from src.app.services.tokens import RedemptionTokenCodec
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import (
    AuditEvent,
    Organization,
    OrganizationUser,
    OrganizationUserStatus,
    PlanSponsorshipType,
    Sponsorship,
    SponsorshipStatus,
)
from src.domain.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from src.domain.plans import organization_can_sponsor

from .dtos import OfferSponsorshipResponse
from .redemption_tokens import issue_redemption_token

logger = logging.getLogger(__name__)


class OfferSponsorshipUseCase:
    """
    Use case for offering a sponsorship.

    Business Rules:
    - Sponsoring organization must be on an enterprise plan, not self-hosted
    - Sponsoring member must be a confirmed member of that organization
    - A member holds at most one non-terminal sponsorship (409 otherwise)
    - Members cannot sponsor their own email address
    - Creates the record in "offered" with a fresh redemption token
    - Exactly one invite notification is attempted after commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        token_codec: RedemptionTokenCodec,
        dispatcher: INotificationDispatcher,
        self_hosted: bool = False,
        notification_settings: Optional[NotificationSettings] = None,
    ):
        self.uow = uow
        self.token_codec = token_codec
        self.dispatcher = dispatcher
        self.self_hosted = self_hosted
        self.notification_settings = notification_settings or NotificationSettings()

    async def execute(
        self,
        sponsoring_organization: Optional[Organization],
        sponsoring_org_user: Optional[OrganizationUser],
        sponsorship_type: PlanSponsorshipType,
        sponsored_email: str,
        friendly_name: Optional[str],
        sponsoring_user_email: str,
    ) -> OfferSponsorshipResponse:
        """
        Execute offer sponsorship use case.

        Args:
            sponsoring_organization: Organization granting the sponsorship
            sponsoring_org_user: The granting member's membership in it
            sponsorship_type: Discounted plan tier being offered
            sponsored_email: Recipient address for the invite
            friendly_name: Display name for the sponsored party
            sponsoring_user_email: The granting member's own email

        Returns:
            OfferSponsorshipResponse DTO

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
                "Only members of the sponsoring organization can sponsor.",
                code="ORGANIZATION_USER_NOT_FOUND",
            )

        if sponsoring_org_user.organization_id != sponsoring_organization.id:
            raise AuthorizationError(
                "Member does not belong to the sponsoring organization.",
                code="NOT_A_MEMBER",
            )

        if sponsoring_org_user.status != OrganizationUserStatus.confirmed:
            raise ValidationError(
                "Only confirmed users can sponsor other organizations.",
                code="MEMBER_NOT_CONFIRMED",
            )

        if not organization_can_sponsor(
            sponsoring_organization, self.self_hosted, sponsorship_type
        ):
            raise ValidationError(
                "Specified organization cannot sponsor other organizations.",
                code="SPONSORSHIP_NOT_AVAILABLE",
            )

        offered_to_email = sponsored_email.strip().lower()
        if offered_to_email == (sponsoring_user_email or "").strip().lower():
            raise ValidationError(
                "Cannot offer a sponsorship to yourself. Choose a different email.",
                code="CANNOT_SPONSOR_SELF",
            )

        existing = await self.uow.sponsorships.get_by_offering_member(
            sponsoring_organization.id, sponsoring_org_user.id
        )
        if existing is not None and not existing.is_terminal:
            raise ConflictError(
                "Can only sponsor one organization per member.",
                code="SPONSORSHIP_ALREADY_EXISTS",
            )

        sponsorship = Sponsorship(
            sponsoring_organization_id=sponsoring_organization.id,
            sponsoring_organization_user_id=sponsoring_org_user.id,
            friendly_name=friendly_name,
            offered_to_email=offered_to_email,
            plan_sponsorship_type=sponsorship_type,
            status=SponsorshipStatus.offered,
        )
        token = issue_redemption_token(self.token_codec, sponsorship)

        try:
            sponsorship = await self.uow.sponsorships.upsert(sponsorship)
        except RepositoryConflictError:
            raise ConflictError(
                "Can only sponsor one organization per member.",
                code="SPONSORSHIP_ALREADY_EXISTS",
            )

        audit = AuditEvent(
            organization_id=sponsoring_organization.id,
            user_id=sponsoring_org_user.user_id,
            action="sponsorship_offered",
            event_metadata={
                "sponsorship_id": str(sponsorship.id),
                "offered_to_email": offered_to_email,
                "sponsorship_type": sponsorship_type.value,
            },
        )
        await self.uow.audit_events.create(audit)

        # Commit transaction
        await self.uow.commit()

        logger.info(
            f"Sponsorship {sponsorship.id} offered by member {sponsoring_org_user.id}"
        )

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

        return OfferSponsorshipResponse(
            sponsorship_id=str(sponsorship.id),
            status=sponsorship.status.value,
            offered_to_email=sponsorship.offered_to_email,
            expires_at=sponsorship.redemption_token_expires_at.isoformat(),
        )
