"""Domain entity representing an administrator that receives broadcasts."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

ALL_CATEGORIES = "all"


@dataclass
class AdminRecipient:
    """Operator-managed address notified about store events."""

    id: str | None
    email: str
    name: str | None = None
    is_active: bool = True
    department: str | None = None
    notification_categories: list[str] = field(
        default_factory=lambda: [ALL_CATEGORIES]
    )
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def wants(self, categories: set[str]) -> bool:
        """Return whether the recipient subscribes to any of ``categories``."""

        subscribed = set(self.notification_categories or [ALL_CATEGORIES])
        return ALL_CATEGORIES in subscribed or bool(subscribed & categories)


__all__ = ["ALL_CATEGORIES", "AdminRecipient"]
