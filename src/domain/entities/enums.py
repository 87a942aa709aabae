"""
Sponsorship Service Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class OrganizationUserType(str, Enum):
    """Member role within an organization, highest privilege first"""

    owner = "owner"
    admin = "admin"
    user = "user"


class OrganizationUserStatus(str, Enum):
    """Organization membership status"""

    invited = "invited"
    accepted = "accepted"
    confirmed = "confirmed"


class PlanType(str, Enum):
    """Billing plan an organization is subscribed to"""

    free = "free"
    families_annually = "families_annually"
    teams_monthly = "teams_monthly"
    teams_annually = "teams_annually"
    enterprise_monthly = "enterprise_monthly"
    enterprise_annually = "enterprise_annually"


class ProductType(str, Enum):
    """Product tier a plan belongs to"""

    free = "free"
    families = "families"
    teams = "teams"
    enterprise = "enterprise"


class PlanSponsorshipType(str, Enum):
    """Discounted plan tier offered through a sponsorship"""

    families_for_enterprise = "families_for_enterprise"


class SponsorshipStatus(str, Enum):
    """
    Sponsorship lifecycle state.

    offered/resent are pending, active is redeemed, revoked/removed are terminal.
    """

    offered = "offered"
    resent = "resent"
    active = "active"
    revoked = "revoked"
    removed = "removed"


PENDING_SPONSORSHIP_STATUSES = (SponsorshipStatus.offered, SponsorshipStatus.resent)
TERMINAL_SPONSORSHIP_STATUSES = (SponsorshipStatus.revoked, SponsorshipStatus.removed)


class MailQueueStatus(str, Enum):
    """Delivery state of a queued notification"""

    pending = "pending"
    sent = "sent"
    failed = "failed"
