"""
Sponsorship Use Case DTOs (Data Transfer Objects)

Response classes returned by the sponsorship lifecycle use cases.
"""

from typing import Optional

from pydantic import BaseModel


# ============================================================================
# Response DTOs
# ============================================================================


class OfferSponsorshipResponse(BaseModel):
    """Response for offer sponsorship use case"""

    sponsorship_id: str
    status: str
    offered_to_email: str
    expires_at: str


class ResendSponsorshipOfferResponse(BaseModel):
    """Response for resend sponsorship offer use case"""

    sponsorship_id: str
    status: str
    expires_at: str


class SetUpSponsorshipResponse(BaseModel):
    """Response for set up (redeem) sponsorship use case"""

    sponsorship_id: str
    sponsored_organization_id: str
    status: str


class RevokeSponsorshipResponse(BaseModel):
    """Response for revoke sponsorship use case"""

    sponsorship_id: str
    status: str
    sponsored_organization_id: Optional[str] = None


class RemoveSponsorshipResponse(BaseModel):
    """Response for remove sponsorship use case"""

    sponsorship_id: str
    status: str
