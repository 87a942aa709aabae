import secrets

from src.app.services.tokens import RedemptionTokenCodec
from src.domain.entities import Sponsorship


def issue_redemption_token(codec: RedemptionTokenCodec, sponsorship: Sponsorship) -> str:
    """
    Mint a fresh token for a pending sponsorship.

    Replaces the nonce and expiry stored on the record, so any token issued
    earlier for the same offer stops validating.
    """
    token_id = secrets.token_urlsafe(16)
    payload = codec.new_payload(
        sponsorship_id=sponsorship.id,
        email=sponsorship.offered_to_email,
        sponsorship_type=sponsorship.plan_sponsorship_type,
        token_id=token_id,
    )

    sponsorship.redemption_token_id = token_id
    sponsorship.redemption_token_expires_at = payload.expires_at.replace(tzinfo=None)

    return codec.encode(payload)
