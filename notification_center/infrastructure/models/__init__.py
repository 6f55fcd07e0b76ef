"""SQLAlchemy models."""

from .email_notification import EmailNotificationModel
from .legacy_notification import LegacyNotificationModel
from .notification_recipient import NotificationRecipientModel

__all__ = [
    "EmailNotificationModel",
    "LegacyNotificationModel",
    "NotificationRecipientModel",
]
