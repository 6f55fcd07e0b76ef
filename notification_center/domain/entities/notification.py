"""Domain entities describing tracked outbound notifications."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class NotificationStatus(str, Enum):
    """Lifecycle states of a notification record."""

    PENDING = "pending"
    SCHEDULED = "scheduled"
    SENT = "sent"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (NotificationStatus.SENT, NotificationStatus.FAILED)


NON_TERMINAL_STATUSES = (NotificationStatus.PENDING, NotificationStatus.SCHEDULED)


class NotificationPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


@dataclass
class NotificationRecord:
    """Outbound message tracked from creation to a terminal delivery outcome.

    ``sent_at`` is only populated for ``sent`` records and ``error_message`` /
    ``failed_at`` only for ``failed`` ones. ``category``, ``platform_module``
    and ``action_url`` are columns in the legacy store and
    ``template_data`` keys in the preferred one.
    """

    id: str | None
    event_type: str
    recipient_email: str
    subject: str
    recipient_name: str | None = None
    content: str = ""
    channels: list[str] = field(default_factory=lambda: ["email"])
    status: NotificationStatus = NotificationStatus.PENDING
    priority: NotificationPriority = NotificationPriority.MEDIUM
    error_message: str | None = None
    sent_at: datetime | None = None
    failed_at: datetime | None = None
    scheduled_for: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    category: str | None = None
    platform_module: str | None = None
    action_url: str | None = None
    source: str | None = None


@dataclass
class NotificationFilter:
    """Criteria accepted by :meth:`NotificationStore.list`."""

    status: NotificationStatus | None = None
    event_type: str | None = None
    priority: NotificationPriority | None = None
    category: str | None = None
    platform_module: str | None = None
    recipient_email: str | None = None
    created_since: datetime | None = None
    limit: int = 50
    oldest_first: bool = False
    include_legacy: bool = False

    @property
    def targets_legacy_only_fields(self) -> bool:
        return bool(self.category or self.platform_module)


@dataclass
class NotificationStats:
    total: int = 0
    sent: int = 0
    failed: int = 0
    pending: int = 0
    by_event: dict[str, int] = field(default_factory=dict)


__all__ = [
    "NON_TERMINAL_STATUSES",
    "NotificationFilter",
    "NotificationPriority",
    "NotificationRecord",
    "NotificationStats",
    "NotificationStatus",
]
