"""Deliver a stored notification and record the outcome."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Protocol

import anyio

from notification_center.domain.entities import (
    DispatchResult,
    NotificationRecord,
    NotificationStatus,
)
from notification_center.domain.exceptions import PersistenceError, TransportError
from notification_center.infrastructure.email import EmailTransport, OutboundEmail
from notification_center.infrastructure.repositories import NotificationStore
from notification_center.utils import now_in_app_timezone

logger = logging.getLogger(__name__)


class TemplateRenderer(Protocol):
    def render(self, record: NotificationRecord) -> str:
        """Return the HTML body for ``record``."""


class Dispatcher:
    """Send one record through the email transport and persist its final status."""

    def __init__(
        self,
        store: NotificationStore,
        transport: EmailTransport,
        renderer: TemplateRenderer,
        *,
        timeout: float = 10.0,
        clock: Callable[[], datetime] = now_in_app_timezone,
    ) -> None:
        self.store = store
        self.transport = transport
        self.renderer = renderer
        self.timeout = timeout
        self.clock = clock

    def ensure_ready(self) -> None:
        """Raise ``ConfigurationError`` before any record is created for an unusable transport."""

        self.transport.ensure_configured()

    async def send(self, record: NotificationRecord) -> DispatchResult:
        if record.id is None:
            msg = "Only stored notifications can be dispatched"
            raise ValueError(msg)
        if record.status.is_terminal:
            logger.info(
                "Notification %s already %s; not sending again",
                record.id,
                record.status.value,
            )
            return DispatchResult(record.status, record.error_message)
        if record.status is NotificationStatus.SCHEDULED:
            return DispatchResult(NotificationStatus.SCHEDULED)

        html_content = record.content or self.renderer.render(record)
        message = OutboundEmail(
            to=record.recipient_email,
            subject=record.subject,
            html=html_content,
            to_name=record.recipient_name,
        )

        error_message: str | None = None
        try:
            with anyio.fail_after(self.timeout):
                await self.transport.send(message)
        except TimeoutError:
            error_message = f"Email transport timed out after {self.timeout:g} seconds"
        except TransportError as exc:
            error_message = str(exc)

        try:
            if error_message is None:
                await self.store.update_status(
                    record.id, NotificationStatus.SENT, sent_at=self.clock()
                )
                logger.info("Notification %s sent to %s", record.id, record.recipient_email)
                return DispatchResult(NotificationStatus.SENT)

            await self.store.update_status(
                record.id,
                NotificationStatus.FAILED,
                error_message=error_message,
                failed_at=self.clock(),
            )
        except PersistenceError:
            logger.exception(
                "Could not record delivery outcome of notification %s; it may be sent again",
                record.id,
            )
            raise

        logger.warning(
            "Notification %s to %s failed: %s",
            record.id,
            record.recipient_email,
            error_message,
        )
        return DispatchResult(NotificationStatus.FAILED, error_message)


__all__ = ["Dispatcher", "TemplateRenderer"]
