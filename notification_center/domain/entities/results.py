"""Value objects returned by the notification use cases."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .notification import NotificationRecord, NotificationStatus


@dataclass(frozen=True)
class ThrottleDecision:
    allowed: bool
    last_sent_at: datetime | None = None
    can_bypass: bool = True


@dataclass(frozen=True)
class DispatchResult:
    status: NotificationStatus
    error_message: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status is NotificationStatus.SENT


@dataclass(frozen=True)
class BroadcastLeg:
    """Outcome of delivering a broadcast to a single admin."""

    email: str
    success: bool
    notification_id: str | None = None
    error: str | None = None


@dataclass
class BroadcastResult:
    attempted: int = 0
    succeeded: int = 0
    failed: int = 0
    details: list[BroadcastLeg] = field(default_factory=list)

    @property
    def no_recipients(self) -> bool:
        return self.attempted == 0


@dataclass
class BulkDeleteResult:
    deleted_count: int = 0
    errors: list[str] = field(default_factory=list)


@dataclass
class BulkDeleteReport:
    deleted_count: int
    total_requested: int
    errors: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors


@dataclass
class BulkSelection:
    notifications: list[NotificationRecord] = field(default_factory=list)
    missing_ids: list[str] = field(default_factory=list)


@dataclass
class PendingRunResult:
    """Counts from one pass over records still waiting to be sent."""

    total: int = 0
    sent: int = 0
    failed: int = 0
    errors: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class SendOutcome:
    notification_id: str
    status: NotificationStatus
    error_message: str | None = None
    broadcast: BroadcastResult | None = None


__all__ = [
    "BroadcastLeg",
    "BroadcastResult",
    "BulkDeleteReport",
    "BulkDeleteResult",
    "BulkSelection",
    "DispatchResult",
    "PendingRunResult",
    "SendOutcome",
    "ThrottleDecision",
]
