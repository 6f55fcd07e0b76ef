"""Tests for re-dispatching notifications left in pending."""

from __future__ import annotations

from datetime import timedelta

import pytest

from notification_center.application.use_cases.notifications import process_pending
from notification_center.domain.entities import NotificationStatus
from notification_center.domain.exceptions import ConfigurationError

pytestmark = pytest.mark.anyio


async def test_oldest_pending_records_are_sent_first(
    services, transport, record_factory, clock
) -> None:
    base = clock()
    await services.store.create(
        record_factory(
            id="newest", recipient_email="c@example.com", created_at=base + timedelta(hours=2)
        )
    )
    await services.store.create(
        record_factory(id="oldest", recipient_email="a@example.com", created_at=base)
    )
    await services.store.legacy.create(
        record_factory(
            id="legacy", recipient_email="b@example.com", created_at=base + timedelta(hours=1)
        )
    )
    await services.store.create(
        record_factory(
            id="scheduled",
            status=NotificationStatus.SCHEDULED,
            created_at=base - timedelta(days=1),
        )
    )

    result = await process_pending(services, limit=2)

    assert (result.total, result.sent, result.failed) == (2, 2, 0)
    assert transport.recipients == ["a@example.com", "b@example.com"]
    assert (await services.store.get("legacy")).status is NotificationStatus.SENT
    assert (await services.store.get("newest")).status is NotificationStatus.PENDING
    assert (await services.store.get("scheduled")).status is NotificationStatus.SCHEDULED


async def test_failures_are_counted_and_do_not_stop_the_run(
    services, transport, record_factory, clock
) -> None:
    transport.failing.add("bounced@example.com")
    transport.exploding.add("crash@example.com")
    for offset, email in enumerate(
        ["bounced@example.com", "crash@example.com", "ok@example.com"]
    ):
        await services.store.create(
            record_factory(
                id=email.split("@")[0],
                recipient_email=email,
                created_at=clock() + timedelta(minutes=offset),
            )
        )

    result = await process_pending(services)

    assert (result.total, result.sent, result.failed) == (3, 1, 2)
    assert len(result.errors) == 1
    assert result.errors[0].startswith("crash: ")
    assert (await services.store.get("bounced")).status is NotificationStatus.FAILED
    assert (await services.store.get("ok")).status is NotificationStatus.SENT


async def test_nothing_pending_is_a_noop(services, transport) -> None:
    result = await process_pending(services)

    assert result.total == 0
    assert transport.sent == []


async def test_unconfigured_transport_is_rejected(services, transport) -> None:
    transport.configured = False

    with pytest.raises(ConfigurationError):
        await process_pending(services)
