"""
Sponsorship Service Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import (
    PENDING_SPONSORSHIP_STATUSES,
    TERMINAL_SPONSORSHIP_STATUSES,
    MailQueueStatus,
    OrganizationUserStatus,
    OrganizationUserType,
    PlanSponsorshipType,
    PlanType,
    ProductType,
    SponsorshipStatus,
)

# Export all entities
from .user import User
from .organization import Organization
from .organization_user import OrganizationUser
from .sponsorship import Sponsorship
from .audit_event import AuditEvent
from .mail_queue_message import MailQueueMessage

__all__ = [
    # Enums
    "PENDING_SPONSORSHIP_STATUSES",
    "TERMINAL_SPONSORSHIP_STATUSES",
    "MailQueueStatus",
    "OrganizationUserStatus",
    "OrganizationUserType",
    "PlanSponsorshipType",
    "PlanType",
    "ProductType",
    "SponsorshipStatus",
    # Entities
    "User",
    "Organization",
    "OrganizationUser",
    "Sponsorship",
    "AuditEvent",
    "MailQueueMessage",
]
