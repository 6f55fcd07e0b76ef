"""Wiring of stores, transport and use-case services."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncEngine

from notification_center.application.use_cases.notifications import (
    BulkOperationCoordinator,
    Dispatcher,
    FanoutBroadcaster,
    TemplateRenderer,
    ThrottlePolicy,
)
from notification_center.config import Settings
from notification_center.infrastructure.database import (
    build_engine,
    build_session_factory,
    initialize_database,
    normalize_database_url,
)
from notification_center.infrastructure.email import EmailTransport
from notification_center.infrastructure.models import (
    EmailNotificationModel,
    LegacyNotificationModel,
    NotificationRecipientModel,
)
from notification_center.infrastructure.repositories import (
    LegacyNotificationAdapter,
    NotificationStore,
    PreferredNotificationAdapter,
    RecipientRepository,
)
from notification_center.infrastructure.sendpulse import SendPulseTransport
from notification_center.infrastructure.templates import DefaultTemplateRenderer
from notification_center.utils import now_in_app_timezone

logger = logging.getLogger(__name__)


@dataclass
class NotificationServices:
    """Long-lived collaborators shared by every request."""

    settings: Settings
    store: NotificationStore
    recipients: RecipientRepository
    throttle: ThrottlePolicy
    dispatcher: Dispatcher
    broadcaster: FanoutBroadcaster
    bulk: BulkOperationCoordinator
    transport: EmailTransport
    clock: Callable[[], datetime] = now_in_app_timezone
    engines: list[AsyncEngine] = field(default_factory=list)

    async def aclose(self) -> None:
        await self.transport.aclose()
        for engine in self.engines:
            await engine.dispose()


async def build_services(
    settings: Settings,
    *,
    transport: EmailTransport | None = None,
    renderer: TemplateRenderer | None = None,
    clock: Callable[[], datetime] = now_in_app_timezone,
    create_tables: bool = True,
) -> NotificationServices:
    """Create engines and services for ``settings``.

    The preferred and legacy schemas share one engine unless
    ``LEGACY_DATABASE_URL`` points somewhere else.
    """

    primary_engine = build_engine(settings.database_url)
    engines = [primary_engine]
    legacy_url = settings.resolved_legacy_database_url
    if normalize_database_url(legacy_url) == normalize_database_url(settings.database_url):
        legacy_engine = primary_engine
    else:
        legacy_engine = build_engine(legacy_url)
        engines.append(legacy_engine)

    if create_tables:
        await initialize_database(
            primary_engine,
            tables=[
                EmailNotificationModel.__table__,
                NotificationRecipientModel.__table__,
            ],
        )
        await initialize_database(legacy_engine, tables=[LegacyNotificationModel.__table__])

    primary_sessions = build_session_factory(primary_engine)
    legacy_sessions = (
        primary_sessions
        if legacy_engine is primary_engine
        else build_session_factory(legacy_engine)
    )

    store = NotificationStore(
        PreferredNotificationAdapter(primary_sessions),
        LegacyNotificationAdapter(legacy_sessions),
    )
    recipients = RecipientRepository(primary_sessions)
    transport = transport or SendPulseTransport(settings)
    dispatcher = Dispatcher(
        store,
        transport,
        renderer or DefaultTemplateRenderer(settings.sender_name),
        timeout=settings.transport_timeout_seconds,
        clock=clock,
    )
    if not settings.email_enabled:
        logger.warning("SendPulse credentials missing; email sends will be rejected")

    return NotificationServices(
        settings=settings,
        store=store,
        recipients=recipients,
        throttle=ThrottlePolicy(
            store, window=timedelta(days=settings.throttle_window_days), clock=clock
        ),
        dispatcher=dispatcher,
        broadcaster=FanoutBroadcaster(
            recipients,
            store,
            dispatcher,
            concurrency=settings.fanout_concurrency,
            clock=clock,
        ),
        bulk=BulkOperationCoordinator(store, max_batch=settings.bulk_max_batch),
        transport=transport,
        clock=clock,
        engines=engines,
    )


__all__ = ["NotificationServices", "build_services"]
