"""Repositories and store adapters."""

from .base import NotificationAdapter
from .legacy_notification_adapter import LegacyNotificationAdapter
from .notification_store import NotificationStore
from .preferred_notification_adapter import PreferredNotificationAdapter
from .recipient_repository import RecipientRepository

__all__ = [
    "LegacyNotificationAdapter",
    "NotificationAdapter",
    "NotificationStore",
    "PreferredNotificationAdapter",
    "RecipientRepository",
]
