"""Domain entities exposed by the application."""

from .notification import (
    NON_TERMINAL_STATUSES,
    NotificationFilter,
    NotificationPriority,
    NotificationRecord,
    NotificationStats,
    NotificationStatus,
)
from .recipient import ALL_CATEGORIES, AdminRecipient
from .results import (
    BroadcastLeg,
    BroadcastResult,
    BulkDeleteReport,
    BulkDeleteResult,
    BulkSelection,
    DispatchResult,
    PendingRunResult,
    SendOutcome,
    ThrottleDecision,
)

__all__ = [
    "ALL_CATEGORIES",
    "AdminRecipient",
    "BroadcastLeg",
    "BroadcastResult",
    "BulkDeleteReport",
    "BulkDeleteResult",
    "BulkSelection",
    "DispatchResult",
    "NON_TERMINAL_STATUSES",
    "NotificationFilter",
    "NotificationPriority",
    "NotificationRecord",
    "NotificationStats",
    "NotificationStatus",
    "PendingRunResult",
    "SendOutcome",
    "ThrottleDecision",
]
