"""
Notification builders

Every builder is a pure function of its arguments: no repository access, no
rendering. Recipient lists are resolved by the caller and passed in.
"""

import html
from datetime import datetime
from enum import Enum
from typing import Iterable, List, Optional
from urllib.parse import quote

from pydantic import BaseModel

from src.domain.entities import Organization, Sponsorship


class NotificationKind(str, Enum):
    """Template kind understood by the mail transport"""

    sponsorship_offer = "sponsorship_offer"
    sponsorship_redeemed = "sponsorship_redeemed"
    sponsorship_revoked = "sponsorship_revoked"
    sponsorship_removed = "sponsorship_removed"
    organization_seats_autoscaled = "organization_seats_autoscaled"
    organization_seats_max_reached = "organization_seats_max_reached"


class NotificationSettings(BaseModel):
    """Installation-wide values shown in every notification"""

    web_vault_url: str = "http://localhost:8080/#"
    site_name: str = "Sponsorships"


class Notification(BaseModel):
    """A notification ready to be handed to the dispatcher"""

    kind: NotificationKind
    subject: str
    recipients: List[str]
    model: dict


def distinct_emails(emails: Iterable[Optional[str]]) -> List[str]:
    """Drop blanks and case-insensitive duplicates, keeping first-seen order"""
    seen = set()
    result = []
    for email in emails:
        if not email:
            continue
        key = email.strip().lower()
        if key in seen:
            continue
        seen.add(key)
        result.append(email.strip())
    return result


def _sanitize(value: Optional[str]) -> str:
    return html.escape(value or "", quote=False)


def _format_expiration(expires_at: Optional[datetime]) -> str:
    if expires_at is None:
        return ""
    return expires_at.strftime("%A, %B %d, %Y %I:%M %p") + " UTC"


def build_sponsorship_offer_notification(
    sponsorship: Sponsorship,
    sponsoring_organization: Organization,
    token: str,
    sponsoring_user_email: str,
    settings: NotificationSettings,
) -> Notification:
    """Invite sent to offered_to_email on offer and on every resend"""
    return Notification(
        kind=NotificationKind.sponsorship_offer,
        subject="Accept Your Free Families Subscription",
        recipients=[sponsorship.offered_to_email],
        model={
            "sponsorship_id": str(sponsorship.id),
            "sponsoring_organization_name": _sanitize(sponsoring_organization.name),
            "sponsor_email": sponsoring_user_email,
            "friendly_name": _sanitize(sponsorship.friendly_name),
            "sponsorship_type": sponsorship.plan_sponsorship_type.value,
            "token": quote(token, safe=""),
            "expiration_date": _format_expiration(
                sponsorship.redemption_token_expires_at
            ),
            "web_vault_url": settings.web_vault_url,
            "site_name": settings.site_name,
        },
    )


def build_sponsorship_redeemed_notification(
    sponsorship: Sponsorship,
    sponsored_organization: Organization,
    sponsoring_admin_emails: List[str],
    sponsoring_member_email: Optional[str],
) -> Notification:
    """Confirmation to the sponsoring side once the offer is redeemed"""
    return Notification(
        kind=NotificationKind.sponsorship_redeemed,
        subject="Your Families Sponsorship Has Been Redeemed",
        recipients=distinct_emails(
            [sponsoring_member_email, *sponsoring_admin_emails]
        ),
        model={
            "sponsorship_id": str(sponsorship.id),
            "sponsored_organization_id": str(sponsored_organization.id),
            "sponsored_organization_name": _sanitize(sponsored_organization.name),
            "offered_to_email": sponsorship.offered_to_email,
            "friendly_name": _sanitize(sponsorship.friendly_name),
        },
    )


def build_sponsorship_revoked_notification(
    sponsorship: Sponsorship,
    sponsoring_organization: Organization,
    was_active: bool,
    sponsored_owner_emails: List[str],
    sponsored_organization: Optional[Organization] = None,
) -> Notification:
    """
    Revocation notice.

    An active sponsorship notifies the sponsored organization's owners, who
    lose the sponsored plan; a pending offer notifies the original recipient.
    """
    if was_active:
        recipients = distinct_emails(sponsored_owner_emails)
    else:
        recipients = [sponsorship.offered_to_email]

    return Notification(
        kind=NotificationKind.sponsorship_revoked,
        subject="Your Families Sponsorship Has Ended",
        recipients=recipients,
        model={
            "sponsorship_id": str(sponsorship.id),
            "sponsoring_organization_name": _sanitize(sponsoring_organization.name),
            "sponsored_organization_name": _sanitize(
                sponsored_organization.name if sponsored_organization else None
            ),
            "was_active": was_active,
        },
    )


def build_sponsorship_removed_notification(
    sponsorship: Sponsorship,
    sponsored_organization: Organization,
    sponsoring_member_email: Optional[str],
) -> Notification:
    """Opt-out notice to the member who granted the sponsorship"""
    return Notification(
        kind=NotificationKind.sponsorship_removed,
        subject="A Families Sponsorship Was Removed",
        recipients=distinct_emails([sponsoring_member_email]),
        model={
            "sponsorship_id": str(sponsorship.id),
            "sponsored_organization_name": _sanitize(sponsored_organization.name),
            "offered_to_email": sponsorship.offered_to_email,
        },
    )


def build_organization_autoscaled_notification(
    organization: Organization,
    initial_seat_count: int,
    owner_emails: List[str],
) -> Notification:
    return Notification(
        kind=NotificationKind.organization_seats_autoscaled,
        subject=f"{organization.name} Seat Count Has Increased",
        recipients=distinct_emails(owner_emails),
        model={
            "organization_id": str(organization.id),
            "initial_seat_count": initial_seat_count,
            "current_seat_count": organization.seats,
        },
    )


def build_organization_max_seats_notification(
    organization: Organization,
    max_seat_count: int,
    owner_emails: List[str],
) -> Notification:
    return Notification(
        kind=NotificationKind.organization_seats_max_reached,
        subject=f"{organization.name} Seat Limit Reached",
        recipients=distinct_emails(owner_emails),
        model={
            "organization_id": str(organization.id),
            "max_seat_count": max_seat_count,
        },
    )
