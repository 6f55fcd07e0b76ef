"""Deliver one event to every subscribed admin recipient."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

import anyio

from notification_center.domain.entities import (
    AdminRecipient,
    BroadcastLeg,
    BroadcastResult,
    NotificationPriority,
    NotificationRecord,
    NotificationStatus,
)
from notification_center.domain.events import categories_for
from notification_center.infrastructure.repositories import (
    NotificationStore,
    RecipientRepository,
)
from notification_center.utils import now_in_app_timezone

from .dispatcher import Dispatcher

logger = logging.getLogger(__name__)


@dataclass
class BroadcastRequest:
    event_type: str
    subject: str
    template_data: dict[str, Any] = field(default_factory=dict)
    priority: NotificationPriority = NotificationPriority.MEDIUM
    content: str = ""
    category: str | None = None


class FanoutBroadcaster:
    """Send a request to all active admins with per-recipient failure isolation.

    Each leg owns its record and outcome; one admin failing never prevents
    the others from being attempted.
    """

    def __init__(
        self,
        recipients: RecipientRepository,
        store: NotificationStore,
        dispatcher: Dispatcher,
        *,
        concurrency: int = 10,
        clock: Callable[[], datetime] = now_in_app_timezone,
    ) -> None:
        self.recipients = recipients
        self.store = store
        self.dispatcher = dispatcher
        self.concurrency = concurrency
        self.clock = clock

    async def broadcast_to_admins(self, request: BroadcastRequest) -> BroadcastResult:
        categories = set(categories_for(request.event_type))
        if request.category:
            categories.add(request.category)
        admins = [
            admin
            for admin in await self.recipients.list_active()
            if admin.wants(categories)
        ]
        result = BroadcastResult()
        if not admins:
            logger.info("No active admin recipients for %s; nothing to broadcast", request.event_type)
            return result

        self.dispatcher.ensure_ready()

        limiter = anyio.CapacityLimiter(self.concurrency)
        lock = anyio.Lock()

        async def deliver(admin: AdminRecipient) -> None:
            async with limiter:
                leg = await self._deliver_one(admin, request)
            async with lock:
                result.attempted += 1
                if leg.success:
                    result.succeeded += 1
                else:
                    result.failed += 1
                result.details.append(leg)

        async with anyio.create_task_group() as task_group:
            for admin in admins:
                task_group.start_soon(deliver, admin)

        logger.info(
            "Broadcast %s to %d admins: %d sent, %d failed",
            request.event_type,
            result.attempted,
            result.succeeded,
            result.failed,
        )
        return result

    async def _deliver_one(
        self, admin: AdminRecipient, request: BroadcastRequest
    ) -> BroadcastLeg:
        notification_id: str | None = None
        try:
            record = NotificationRecord(
                id=None,
                event_type=request.event_type,
                recipient_email=admin.email,
                recipient_name=admin.name,
                subject=request.subject,
                content=request.content,
                priority=request.priority,
                status=NotificationStatus.PENDING,
                created_at=self.clock(),
                metadata={**request.template_data, "audience": "admin"},
                category=request.category,
            )
            notification_id = await self.store.create(record)
            record.id = notification_id
            outcome = await self.dispatcher.send(record)
        except Exception as exc:
            logger.exception("Admin broadcast to %s failed", admin.email)
            return BroadcastLeg(
                email=admin.email,
                success=False,
                notification_id=notification_id,
                error=str(exc) or exc.__class__.__name__,
            )
        return BroadcastLeg(
            email=admin.email,
            success=outcome.succeeded,
            notification_id=notification_id,
            error=outcome.error_message,
        )


__all__ = ["BroadcastRequest", "FanoutBroadcaster"]
