from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, EmailStr, Field

from src.app.notifications import NotificationSettings
from src.app.services.notification_dispatcher import INotificationDispatcher
from src.app.services.tokens import RedemptionTokenCodec
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.sponsorships import (
    OfferSponsorshipResponse,
    OfferSponsorshipUseCase,
    RemoveSponsorshipResponse,
    RemoveSponsorshipUseCase,
    ResendSponsorshipOfferResponse,
    ResendSponsorshipOfferUseCase,
    RevokeSponsorshipResponse,
    RevokeSponsorshipUseCase,
    SetUpSponsorshipResponse,
    SetUpSponsorshipUseCase,
    ValidateRedemptionTokenUseCase,
)
from src.depends import (
    get_current_user,
    get_notification_dispatcher,
    get_notification_settings,
    get_self_hosted,
    get_token_codec,
    get_unit_of_work,
    require_cloud_installation,
)
from src.domain.entities import PlanSponsorshipType, User
from src.domain.errors import ValidationError

router = APIRouter(
    prefix="/organization/sponsorship",
    tags=["Sponsorships"],
    dependencies=[Depends(require_cloud_installation)],
)


class OfferSponsorshipRequest(BaseModel):
    """
    Offer sponsorship HTTP request payload

    Validates incoming request for offering a sponsorship.
    """

    plan_sponsorship_type: PlanSponsorshipType = Field(
        ..., description="Discounted plan tier being offered"
    )
    sponsored_email: EmailStr = Field(..., description="Recipient of the offer")
    friendly_name: Optional[str] = Field(
        None, max_length=255, description="Display name for the sponsored party"
    )


class RedeemSponsorshipRequest(BaseModel):
    """Redeem sponsorship HTTP request payload"""

    sponsored_organization_id: UUID = Field(
        ..., description="Organization (owned by the caller) to sponsor"
    )


async def _load_current_user(uow: UnitOfWork, current_user: dict) -> User:
    user = await uow.users.get_by_id(UUID(current_user["user_id"]))
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return user


@router.post(
    "/{sponsoring_org_id}/families-for-enterprise",
    status_code=status.HTTP_201_CREATED,
    response_model=OfferSponsorshipResponse,
)
async def create_sponsorship(
    sponsoring_org_id: UUID,
    request: OfferSponsorshipRequest,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_codec: RedemptionTokenCodec = Depends(get_token_codec),
    dispatcher: INotificationDispatcher = Depends(get_notification_dispatcher),
    notification_settings: NotificationSettings = Depends(get_notification_settings),
    self_hosted: bool = Depends(get_self_hosted),
):
    """
    Offer Sponsorship

    The caller offers a sponsored plan from their organization to an email.

    Raises:
        - 400 Bad Request: plan not eligible, member not confirmed, self-sponsorship
        - 401 Unauthorized: Invalid or expired JWT
        - 403 Forbidden: caller not in the sponsoring organization
        - 404 Not Found: organization or membership not found
        - 409 Conflict: caller already sponsors an organization
    """
    async with uow:
        user = await _load_current_user(uow, current_user)
        organization = await uow.organizations.get_by_id(sponsoring_org_id)
        org_user = await uow.organization_users.get_by_organization_and_user(
            sponsoring_org_id, user.id
        )

        use_case = OfferSponsorshipUseCase(
            uow,
            token_codec,
            dispatcher,
            self_hosted=self_hosted,
            notification_settings=notification_settings,
        )
        return await use_case.execute(
            organization,
            org_user,
            request.plan_sponsorship_type,
            request.sponsored_email,
            request.friendly_name,
            user.email,
        )


@router.post(
    "/{sponsoring_org_id}/families-for-enterprise/resend",
    status_code=status.HTTP_200_OK,
    response_model=ResendSponsorshipOfferResponse,
)
async def resend_sponsorship_offer(
    sponsoring_org_id: UUID,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_codec: RedemptionTokenCodec = Depends(get_token_codec),
    dispatcher: INotificationDispatcher = Depends(get_notification_dispatcher),
    notification_settings: NotificationSettings = Depends(get_notification_settings),
):
    """
    Resend Sponsorship Offer

    Reissues the redemption token for the caller's pending offer.

    Raises:
        - 400 Bad Request: sponsorship ended or already redeemed
        - 401 Unauthorized: Invalid or expired JWT
        - 404 Not Found: no sponsorship for the caller
    """
    async with uow:
        user = await _load_current_user(uow, current_user)
        organization = await uow.organizations.get_by_id(sponsoring_org_id)
        org_user = await uow.organization_users.get_by_organization_and_user(
            sponsoring_org_id, user.id
        )
        sponsorship = None
        if org_user is not None:
            sponsorship = await uow.sponsorships.get_by_offering_member(
                sponsoring_org_id, org_user.id
            )

        use_case = ResendSponsorshipOfferUseCase(
            uow,
            token_codec,
            dispatcher,
            notification_settings=notification_settings,
        )
        return await use_case.execute(organization, org_user, sponsorship, user.email)


@router.post(
    "/validate-token",
    status_code=status.HTTP_200_OK,
    response_model=bool,
)
async def pre_validate_sponsorship_token(
    sponsorship_token: str = Query(..., description="Redemption token"),
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_codec: RedemptionTokenCodec = Depends(get_token_codec),
):
    """
    Validate Sponsorship Token

    Lets a recipient check a token before committing to redemption.

    Raises:
        - 400 Bad Request: TOKEN_INVALID
        - 401 Unauthorized: Invalid or expired JWT
        - 410 Gone: TOKEN_EXPIRED
    """
    async with uow:
        user = await _load_current_user(uow, current_user)
        use_case = ValidateRedemptionTokenUseCase(uow, token_codec)
        return await use_case.execute(sponsorship_token, user.email)


@router.post(
    "/redeem",
    status_code=status.HTTP_200_OK,
    response_model=SetUpSponsorshipResponse,
)
async def redeem_sponsorship(
    request: RedeemSponsorshipRequest,
    sponsorship_token: str = Query(..., description="Redemption token"),
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_codec: RedemptionTokenCodec = Depends(get_token_codec),
    dispatcher: INotificationDispatcher = Depends(get_notification_dispatcher),
):
    """
    Redeem Sponsorship

    Binds the caller's pending offer to an organization the caller owns.

    Raises:
        - 400 Bad Request: token rejected, offer ended or already redeemed,
                           organization not eligible or already sponsored
        - 401 Unauthorized: Invalid or expired JWT
        - 403 Forbidden: caller does not own the organization
        - 410 Gone: TOKEN_EXPIRED
    """
    async with uow:
        user = await _load_current_user(uow, current_user)

        validator = ValidateRedemptionTokenUseCase(uow, token_codec)
        if not await validator.execute(sponsorship_token, user.email):
            raise ValidationError(
                "Failed to parse sponsorship token.",
                code="INVALID_SPONSORSHIP_TOKEN",
            )

        sponsored_organization = await uow.organizations.get_by_id(
            request.sponsored_organization_id
        )
        caller_membership = await uow.organization_users.get_by_organization_and_user(
            request.sponsored_organization_id, user.id
        )
        sponsorship = await uow.sponsorships.get_by_offered_email(user.email)

        use_case = SetUpSponsorshipUseCase(uow, dispatcher)
        return await use_case.execute(
            sponsorship, sponsored_organization, caller_membership
        )


async def _revoke(
    sponsoring_org_id: UUID,
    current_user: dict,
    uow: UnitOfWork,
    dispatcher: INotificationDispatcher,
) -> RevokeSponsorshipResponse:
    async with uow:
        user = await _load_current_user(uow, current_user)
        organization = await uow.organizations.get_by_id(sponsoring_org_id)
        org_user = await uow.organization_users.get_by_organization_and_user(
            sponsoring_org_id, user.id
        )
        sponsorship = None
        sponsored_organization = None
        if org_user is not None:
            sponsorship = await uow.sponsorships.get_by_offering_member(
                sponsoring_org_id, org_user.id
            )
        if sponsorship is not None and sponsorship.sponsored_organization_id:
            sponsored_organization = await uow.organizations.get_by_id(
                sponsorship.sponsored_organization_id
            )

        use_case = RevokeSponsorshipUseCase(uow, dispatcher)
        return await use_case.execute(
            organization, org_user, sponsorship, sponsored_organization
        )


@router.delete(
    "/{sponsoring_org_id}",
    status_code=status.HTTP_200_OK,
    response_model=RevokeSponsorshipResponse,
)
async def revoke_sponsorship(
    sponsoring_org_id: UUID,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    dispatcher: INotificationDispatcher = Depends(get_notification_dispatcher),
):
    """
    Revoke Sponsorship

    The sponsoring member ends their pending or active sponsorship.

    Raises:
        - 400 Bad Request: sponsorship already ended
        - 401 Unauthorized: Invalid or expired JWT
        - 403 Forbidden: caller did not grant the sponsorship
        - 404 Not Found: caller has no sponsorship
    """
    return await _revoke(sponsoring_org_id, current_user, uow, dispatcher)


@router.post(
    "/{sponsoring_org_id}/delete",
    status_code=status.HTTP_200_OK,
    response_model=RevokeSponsorshipResponse,
)
async def revoke_sponsorship_post(
    sponsoring_org_id: UUID,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    dispatcher: INotificationDispatcher = Depends(get_notification_dispatcher),
):
    """Revoke Sponsorship (POST alias for clients without DELETE)"""
    return await _revoke(sponsoring_org_id, current_user, uow, dispatcher)


async def _remove(
    sponsored_org_id: UUID,
    current_user: dict,
    uow: UnitOfWork,
    dispatcher: INotificationDispatcher,
) -> RemoveSponsorshipResponse:
    async with uow:
        user = await _load_current_user(uow, current_user)
        sponsored_organization = await uow.organizations.get_by_id(sponsored_org_id)
        caller_membership = await uow.organization_users.get_by_organization_and_user(
            sponsored_org_id, user.id
        )
        sponsorship = await uow.sponsorships.get_by_sponsored_organization(
            sponsored_org_id
        )

        use_case = RemoveSponsorshipUseCase(uow, dispatcher)
        return await use_case.execute(
            sponsored_organization, caller_membership, sponsorship
        )


@router.delete(
    "/sponsored/{sponsored_org_id}",
    status_code=status.HTTP_200_OK,
    response_model=RemoveSponsorshipResponse,
)
async def remove_sponsorship(
    sponsored_org_id: UUID,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    dispatcher: INotificationDispatcher = Depends(get_notification_dispatcher),
):
    """
    Remove Sponsorship

    An owner of the sponsored organization opts out of an active sponsorship.

    Raises:
        - 400 Bad Request: sponsorship not active or already ended
        - 401 Unauthorized: Invalid or expired JWT
        - 403 Forbidden: caller does not own the sponsored organization
        - 404 Not Found: organization not sponsored
    """
    return await _remove(sponsored_org_id, current_user, uow, dispatcher)


@router.post(
    "/sponsored/{sponsored_org_id}/remove",
    status_code=status.HTTP_200_OK,
    response_model=RemoveSponsorshipResponse,
)
async def remove_sponsorship_post(
    sponsored_org_id: UUID,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    dispatcher: INotificationDispatcher = Depends(get_notification_dispatcher),
):
    """Remove Sponsorship (POST alias for clients without DELETE)"""
    return await _remove(sponsored_org_id, current_user, uow, dispatcher)
