"""
Use Cases

Organized into domain folders:
- sponsorships/: Sponsorship lifecycle
- organizations/: Organization seat notifications

Import from subdirectories for better organization.
"""

from .organizations import (
    SendMaxSeatLimitReachedNotificationUseCase,
    SendOrganizationAutoscaledNotificationUseCase,
)
from .sponsorships import (
    OfferSponsorshipUseCase,
    RemoveSponsorshipUseCase,
    ResendSponsorshipOfferUseCase,
    RevokeSponsorshipUseCase,
    SetUpSponsorshipUseCase,
    ValidateRedemptionTokenUseCase,
)

__all__ = [
    # Sponsorships
    "OfferSponsorshipUseCase",
    "ResendSponsorshipOfferUseCase",
    "ValidateRedemptionTokenUseCase",
    "SetUpSponsorshipUseCase",
    "RevokeSponsorshipUseCase",
    "RemoveSponsorshipUseCase",
    # Organizations
    "SendOrganizationAutoscaledNotificationUseCase",
    "SendMaxSeatLimitReachedNotificationUseCase",
]
