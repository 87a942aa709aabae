"""
Sponsorship Lifecycle Use Cases

Offer, resend, validate, set up (redeem), revoke and remove.
"""

from .dtos import (
    OfferSponsorshipResponse,
    RemoveSponsorshipResponse,
    ResendSponsorshipOfferResponse,
    RevokeSponsorshipResponse,
    SetUpSponsorshipResponse,
)
from .offer_sponsorship_use_case import OfferSponsorshipUseCase
from .remove_sponsorship_use_case import RemoveSponsorshipUseCase
from .resend_sponsorship_offer_use_case import ResendSponsorshipOfferUseCase
from .revoke_sponsorship_use_case import RevokeSponsorshipUseCase
from .set_up_sponsorship_use_case import SetUpSponsorshipUseCase
from .validate_redemption_token_use_case import ValidateRedemptionTokenUseCase

__all__ = [
    "OfferSponsorshipUseCase",
    "ResendSponsorshipOfferUseCase",
    "ValidateRedemptionTokenUseCase",
    "SetUpSponsorshipUseCase",
    "RevokeSponsorshipUseCase",
    "RemoveSponsorshipUseCase",
    "OfferSponsorshipResponse",
    "ResendSponsorshipOfferResponse",
    "SetUpSponsorshipResponse",
    "RevokeSponsorshipResponse",
    "RemoveSponsorshipResponse",
]
