"""Use case for sending a tracked notification email."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any
from urllib.parse import urlparse

from notification_center.domain.entities import (
    NotificationPriority,
    NotificationRecord,
    NotificationStatus,
    SendOutcome,
)
from notification_center.domain.events import admin_priority, display_name
from notification_center.domain.exceptions import PersistenceError, ValidationError
from notification_center.infrastructure.email import is_valid_email
from notification_center.infrastructure.templates import build_admin_summary

from .fanout import BroadcastRequest

if TYPE_CHECKING:
    from notification_center.application.container import NotificationServices

logger = logging.getLogger(__name__)


@dataclass
class SendNotificationRequest:
    event_type: str
    recipient_email: str
    title: str
    message: str
    recipient_name: str | None = None
    action_url: str | None = None
    priority: NotificationPriority = NotificationPriority.MEDIUM
    bypass_timeframe: bool = False
    scheduled_at: datetime | None = None
    notify_admins: bool = False
    category: str | None = None
    platform_module: str | None = None
    extra_data: dict[str, Any] = field(default_factory=dict)


def _validate(request: SendNotificationRequest) -> None:
    if not request.recipient_email or not request.recipient_email.strip():
        raise ValidationError("Recipient email is required")
    if not is_valid_email(request.recipient_email):
        raise ValidationError("Invalid email format")
    if not request.event_type or not request.event_type.strip():
        raise ValidationError("Event type is required")
    if not request.title or not request.title.strip():
        raise ValidationError("Title is required")
    if not request.message or not request.message.strip():
        raise ValidationError("Message is required")
    if request.action_url:
        parsed = urlparse(request.action_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValidationError("Action URL must be an absolute http(s) URL")


async def send_notification(
    services: NotificationServices, request: SendNotificationRequest
) -> SendOutcome:
    """Validate, throttle, persist and dispatch a single notification email."""

    _validate(request)
    services.dispatcher.ensure_ready()

    recipient_email = request.recipient_email.strip().lower()
    template_data: dict[str, Any] = {
        **request.extra_data,
        "title": request.title.strip(),
        "message": request.message,
    }
    if request.action_url:
        template_data["action_url"] = request.action_url
    if request.category:
        template_data["category"] = request.category
    if request.platform_module:
        template_data["platform_module"] = request.platform_module

    record = NotificationRecord(
        id=None,
        event_type=request.event_type.strip(),
        recipient_email=recipient_email,
        recipient_name=request.recipient_name,
        subject=request.title.strip(),
        priority=request.priority,
        status=(
            NotificationStatus.SCHEDULED
            if request.scheduled_at is not None
            else NotificationStatus.PENDING
        ),
        scheduled_for=request.scheduled_at,
        created_at=services.clock(),
        metadata=template_data,
        category=request.category,
        platform_module=request.platform_module,
        action_url=request.action_url,
    )
    async with services.throttle.reserve(
        recipient_email, bypass=request.bypass_timeframe
    ):
        record.id = await services.store.create(record)

    dispatch = await services.dispatcher.send(record)
    record.status = dispatch.status
    outcome = SendOutcome(
        notification_id=record.id,
        status=dispatch.status,
        error_message=dispatch.error_message,
    )

    if request.notify_admins:
        summary = BroadcastRequest(
            event_type=record.event_type,
            subject=f"[Admin] {display_name(record.event_type)}: {record.subject}",
            template_data={
                "title": f"{display_name(record.event_type)} Notification",
                "message": build_admin_summary(record),
            },
            priority=admin_priority(record.event_type),
            category=request.category,
        )
        try:
            broadcast = await services.broadcaster.broadcast_to_admins(summary)
        except PersistenceError:
            logger.exception(
                "Admin broadcast for notification %s could not be started", record.id
            )
        else:
            outcome = SendOutcome(
                notification_id=outcome.notification_id,
                status=outcome.status,
                error_message=outcome.error_message,
                broadcast=broadcast,
            )
    return outcome


__all__ = ["SendNotificationRequest", "send_notification"]
