"""Shared fixtures for the notification service tests."""

from __future__ import annotations

from datetime import datetime, timedelta
from pathlib import Path

import anyio
import pytest

from notification_center.application.container import build_services
from notification_center.config import Settings
from notification_center.domain.entities import (
    NotificationPriority,
    NotificationRecord,
    NotificationStatus,
)
from notification_center.domain.exceptions import ConfigurationError, TransportError
from notification_center.infrastructure.email import OutboundEmail, is_valid_email
from notification_center.utils import get_app_timezone


class RecordingTransport:
    """In-memory transport that records accepted messages."""

    def __init__(
        self,
        *,
        failing: set[str] | None = None,
        exploding: set[str] | None = None,
        configured: bool = True,
        delay: float = 0,
    ) -> None:
        self.sent: list[OutboundEmail] = []
        self.failing = {email.lower() for email in failing or set()}
        self.exploding = {email.lower() for email in exploding or set()}
        self.configured = configured
        self.delay = delay
        self.closed = False
        self.in_flight = 0
        self.peak_in_flight = 0

    def ensure_configured(self) -> None:
        if not self.configured:
            raise ConfigurationError("Email transport is not configured")

    async def send(self, message: OutboundEmail) -> None:
        self.in_flight += 1
        self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        try:
            if self.delay:
                await anyio.sleep(self.delay)
        finally:
            self.in_flight -= 1
        address = message.to.lower()
        if address in self.exploding:
            raise RuntimeError(f"transport crashed for {message.to}")
        if address in self.failing or not is_valid_email(message.to):
            raise TransportError(f"Rejected recipient {message.to}", status_code=422)
        self.sent.append(message)

    async def aclose(self) -> None:
        self.closed = True

    @property
    def recipients(self) -> list[str]:
        return [message.to for message in self.sent]


class FixedClock:
    """Clock returning a controllable, timezone-aware instant."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


def make_record(
    *,
    event_type: str = "order_created",
    recipient_email: str = "customer@example.com",
    subject: str = "Order confirmed",
    status: NotificationStatus = NotificationStatus.PENDING,
    created_at: datetime | None = None,
    **overrides,
) -> NotificationRecord:
    return NotificationRecord(
        id=overrides.pop("id", None),
        event_type=event_type,
        recipient_email=recipient_email,
        subject=subject,
        status=status,
        priority=overrides.pop("priority", NotificationPriority.MEDIUM),
        created_at=created_at,
        metadata=overrides.pop("metadata", {"title": subject, "message": "Thanks!"}),
        **overrides,
    )


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


def build_settings(database_path: Path, **overrides) -> Settings:
    values = {
        "database_url": f"sqlite+aiosqlite:///{database_path}",
        "sendpulse_client_id": "client-id",
        "sendpulse_client_secret": "client-secret",
        "sender_email": "shop@example.com",
        "sender_name": "Example Shop",
        "transport_retry_initial_delay": 0,
        "transport_retry_max_delay": 0,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return build_settings(tmp_path / "notifications.db")


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2024, 5, 1, 9, 0, tzinfo=get_app_timezone()))


@pytest.fixture
async def services(anyio_backend, settings, transport, clock):
    built = await build_services(settings, transport=transport, clock=clock)
    try:
        yield built
    finally:
        await built.aclose()


@pytest.fixture
def record_factory():
    return make_record


@pytest.fixture
def transport_factory():
    return RecordingTransport


@pytest.fixture
def settings_factory(tmp_path: Path):
    def factory(**overrides) -> Settings:
        return build_settings(tmp_path / "notifications.db", **overrides)

    return factory
