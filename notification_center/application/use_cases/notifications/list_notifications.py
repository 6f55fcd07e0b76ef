"""Use cases for reading notifications."""

from __future__ import annotations

from typing import TYPE_CHECKING

from notification_center.domain.entities import (
    NotificationFilter,
    NotificationRecord,
    NotificationStats,
)

if TYPE_CHECKING:
    from notification_center.application.container import NotificationServices


async def list_notifications(
    services: NotificationServices, criteria: NotificationFilter
) -> list[NotificationRecord]:
    """Return notifications matching ``criteria``, newest first."""

    return await services.store.list(criteria)


async def get_notification_stats(services: NotificationServices) -> NotificationStats:
    return await services.store.summarize()


__all__ = ["get_notification_stats", "list_notifications"]
