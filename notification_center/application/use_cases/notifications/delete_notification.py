"""Use case for deleting a single notification."""

from __future__ import annotations

from typing import TYPE_CHECKING

from notification_center.domain.exceptions import NotificationNotFoundError

if TYPE_CHECKING:
    from notification_center.application.container import NotificationServices


async def delete_notification(services: NotificationServices, notification_id: str) -> None:
    """Delete ``notification_id`` or raise :class:`NotificationNotFoundError`."""

    if not await services.store.delete(notification_id):
        msg = f"Notification {notification_id} not found"
        raise NotificationNotFoundError(msg)


__all__ = ["delete_notification"]
