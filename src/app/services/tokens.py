"""
Signed token codecs

Redemption tokens and billing-sync tokens share the HS256 signing primitive
but carry distinct payload types and purpose claims, so neither decodes as
the other.
"""

import logging
from datetime import UTC, datetime, timedelta
from typing import Optional
from uuid import UUID

from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import BaseModel

from src.domain.entities import PlanSponsorshipType
from src.domain.errors import TokenExpiredError, TokenInvalidError

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
REDEMPTION_PURPOSE = "sponsorship_redemption"
BILLING_SYNC_PURPOSE = "billing_sync"


def _now() -> datetime:
    # JWT timestamps have second precision
    return datetime.now(UTC).replace(microsecond=0)


def _encode_claims(
    claims: dict,
    secret: str,
    purpose: str,
    issued_at: datetime,
    expires_at: datetime,
) -> str:
    to_encode = dict(claims)
    to_encode.update(
        {
            "purpose": purpose,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
    )
    return jwt.encode(to_encode, secret, algorithm=ALGORITHM)


def _decode_claims(token: str, secret: str, purpose: str) -> dict:
    """
    Verify signature, expiry and purpose of a token.

    Raises:
        TokenExpiredError: signature is valid but exp has passed
        TokenInvalidError: anything else
    """
    if not token:
        raise TokenInvalidError("Token is empty")

    try:
        claims = jwt.decode(token, secret, algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        raise TokenExpiredError("Token has expired")
    except JWTError as exc:
        logger.debug(f"Rejected {purpose} token: {exc}")
        raise TokenInvalidError("Failed to parse token")

    if claims.get("purpose") != purpose:
        raise TokenInvalidError("Token was not issued for this purpose")

    return claims


def _timestamp(value) -> datetime:
    return datetime.fromtimestamp(int(value), UTC)


# ============================================================================
# Sponsorship redemption tokens
# ============================================================================


class RedemptionTokenPayload(BaseModel):
    """Claims binding a recipient email to one sponsorship offer"""

    sponsorship_id: UUID
    email: str
    sponsorship_type: PlanSponsorshipType
    token_id: str
    issued_at: datetime
    expires_at: datetime


class RedemptionTokenCodec:
    """
    Encodes/decodes sponsorship redemption tokens.

    token_id is a per-issue nonce stored on the sponsorship; reissuing the
    token replaces it, which invalidates earlier tokens for the same offer.
    """

    def __init__(self, secret: str, ttl: timedelta = timedelta(days=5)):
        self.secret = secret
        self.ttl = ttl

    def new_payload(
        self,
        sponsorship_id: UUID,
        email: str,
        sponsorship_type: PlanSponsorshipType,
        token_id: str,
        ttl: Optional[timedelta] = None,
    ) -> RedemptionTokenPayload:
        issued_at = _now()
        return RedemptionTokenPayload(
            sponsorship_id=sponsorship_id,
            email=email,
            sponsorship_type=sponsorship_type,
            token_id=token_id,
            issued_at=issued_at,
            expires_at=issued_at + (ttl if ttl is not None else self.ttl),
        )

    def encode(self, payload: RedemptionTokenPayload) -> str:
        claims = {
            "sid": str(payload.sponsorship_id),
            "email": payload.email,
            "type": payload.sponsorship_type.value,
            "jti": payload.token_id,
        }
        return _encode_claims(
            claims,
            self.secret,
            REDEMPTION_PURPOSE,
            payload.issued_at,
            payload.expires_at,
        )

    def decode(self, token: str) -> RedemptionTokenPayload:
        """
        Decode a redemption token.

        Raises:
            TokenExpiredError: token is authentic but past expires_at
            TokenInvalidError: malformed, unsigned, tampered or foreign token
        """
        claims = _decode_claims(token, self.secret, REDEMPTION_PURPOSE)
        try:
            return RedemptionTokenPayload(
                sponsorship_id=claims["sid"],
                email=claims["email"],
                sponsorship_type=claims["type"],
                token_id=claims["jti"],
                issued_at=_timestamp(claims["iat"]),
                expires_at=_timestamp(claims["exp"]),
            )
        except (KeyError, TypeError, ValueError):
            raise TokenInvalidError("Token is missing required claims")


# ============================================================================
# Billing sync tokens
# ============================================================================


class BillingSyncTokenPayload(BaseModel):
    """Claims identifying an organization's billing sync key"""

    organization_id: UUID
    billing_sync_key: str
    issued_at: datetime
    expires_at: datetime


class BillingSyncTokenCodec:
    """Encodes/decodes installation-to-installation billing sync tokens"""

    def __init__(self, secret: str, ttl: timedelta = timedelta(days=1)):
        self.secret = secret
        self.ttl = ttl

    def new_payload(
        self,
        organization_id: UUID,
        billing_sync_key: str,
        ttl: Optional[timedelta] = None,
    ) -> BillingSyncTokenPayload:
        issued_at = _now()
        return BillingSyncTokenPayload(
            organization_id=organization_id,
            billing_sync_key=billing_sync_key,
            issued_at=issued_at,
            expires_at=issued_at + (ttl if ttl is not None else self.ttl),
        )

    def encode(self, payload: BillingSyncTokenPayload) -> str:
        claims = {
            "oid": str(payload.organization_id),
            "key": payload.billing_sync_key,
        }
        return _encode_claims(
            claims,
            self.secret,
            BILLING_SYNC_PURPOSE,
            payload.issued_at,
            payload.expires_at,
        )

    def decode(self, token: str) -> BillingSyncTokenPayload:
        claims = _decode_claims(token, self.secret, BILLING_SYNC_PURPOSE)
        try:
            return BillingSyncTokenPayload(
                organization_id=claims["oid"],
                billing_sync_key=claims["key"],
                issued_at=_timestamp(claims["iat"]),
                expires_at=_timestamp(claims["exp"]),
            )
        except (KeyError, TypeError, ValueError):
            raise TokenInvalidError("Token is missing required claims")
