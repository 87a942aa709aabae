"""
Validate Redemption Token Use Case

Checks a sponsorship redemption token without redeeming it.
"""

import logging

from src.app.services.tokens import RedemptionTokenCodec
from src.app.services.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class ValidateRedemptionTokenUseCase:
    """
    Use case for pre-validating a redemption token.

    Business Rules:
    - Malformed/tampered tokens raise TokenInvalidError
    - Expired tokens raise TokenExpiredError, even for a valid offer
    - Otherwise returns True only when the offer is still pending, the token
      is the latest one issued for it, and it was sent to the caller's email
    - Never mutates state
    """

    def __init__(self, uow: UnitOfWork, token_codec: RedemptionTokenCodec):
        self.uow = uow
        self.token_codec = token_codec

    async def execute(self, token: str, current_user_email: str) -> bool:
        """
        Execute validate redemption token use case.

        Args:
            token: Redemption token from the invite
            current_user_email: Email of the principal attempting redemption

        Returns:
            True if the caller may redeem the offer with this token
        """
        payload = self.token_codec.decode(token)

        sponsorship = await self.uow.sponsorships.get_by_offered_email(payload.email)
        if sponsorship is None:
            logger.debug(f"No sponsorship offered to token email for {payload.sponsorship_id}")
            return False

        if sponsorship.is_terminal or not sponsorship.is_pending:
            return False

        if sponsorship.sponsored_organization_id is not None:
            return False

        if sponsorship.id != payload.sponsorship_id:
            return False

        # Superseded by a resend, or cleared on redemption
        if sponsorship.redemption_token_id != payload.token_id:
            return False

        if sponsorship.plan_sponsorship_type != payload.sponsorship_type:
            return False

        return payload.email.strip().lower() == (current_user_email or "").strip().lower()
