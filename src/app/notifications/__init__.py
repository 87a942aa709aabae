"""
Lifecycle Notifications

Pure builders turning a lifecycle event and its entities into a
Notification (kind, subject, recipients, model) for the dispatcher.
"""

from .builders import (
    Notification,
    NotificationKind,
    NotificationSettings,
    build_organization_autoscaled_notification,
    build_organization_max_seats_notification,
    build_sponsorship_offer_notification,
    build_sponsorship_redeemed_notification,
    build_sponsorship_removed_notification,
    build_sponsorship_revoked_notification,
    distinct_emails,
)

from .sender import send_notification

__all__ = [
    "send_notification",
    "Notification",
    "NotificationKind",
    "NotificationSettings",
    "build_organization_autoscaled_notification",
    "build_organization_max_seats_notification",
    "build_sponsorship_offer_notification",
    "build_sponsorship_redeemed_notification",
    "build_sponsorship_removed_notification",
    "build_sponsorship_revoked_notification",
    "distinct_emails",
]
