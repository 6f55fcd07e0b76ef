"""Tests for broadcasting events to admin recipients."""

from __future__ import annotations

import anyio
import pytest

from notification_center.application.container import build_services
from notification_center.application.use_cases.notifications import (
    BroadcastRequest,
    SendNotificationRequest,
    send_notification,
)
from notification_center.domain.entities import (
    AdminRecipient,
    NotificationFilter,
    NotificationStatus,
)
from notification_center.domain.exceptions import ConfigurationError

pytestmark = pytest.mark.anyio


def _request(event_type: str = "order_created") -> BroadcastRequest:
    return BroadcastRequest(
        event_type=event_type,
        subject="New order #42",
        template_data={"title": "New order", "message": "Order #42 was placed"},
    )


async def _add_admins(services, *emails: str, **fields) -> None:
    for email in emails:
        await services.recipients.upsert(AdminRecipient(id=None, email=email, **fields))


async def test_one_bad_address_does_not_block_the_others(services, transport) -> None:
    await _add_admins(
        services,
        "a@example.com",
        "b@example.com",
        "c@example.com",
        "d@example.com",
        "broken@invalid",
    )

    result = await services.broadcaster.broadcast_to_admins(_request())

    assert result.attempted == 5
    assert result.succeeded == 4
    assert result.failed == 1
    assert sorted(transport.recipients) == [
        "a@example.com",
        "b@example.com",
        "c@example.com",
        "d@example.com",
    ]
    failed = [leg for leg in result.details if not leg.success]
    assert [leg.email for leg in failed] == ["broken@invalid"]
    records = await services.store.list(NotificationFilter(limit=10))
    statuses = sorted(record.status.value for record in records)
    assert statuses == ["failed", "sent", "sent", "sent", "sent"]


async def test_unexpected_leg_errors_are_isolated(services, transport) -> None:
    await _add_admins(services, "ok@example.com", "crash@example.com")
    transport.exploding.add("crash@example.com")

    result = await services.broadcaster.broadcast_to_admins(_request())

    assert result.succeeded == 1
    assert result.failed == 1
    crashed = next(leg for leg in result.details if leg.email == "crash@example.com")
    assert "transport crashed" in crashed.error
    assert crashed.notification_id is not None


async def test_no_active_recipients_is_a_noop(services, transport) -> None:
    await _add_admins(services, "retired@example.com", is_active=False)

    result = await services.broadcaster.broadcast_to_admins(_request())

    assert result.no_recipients is True
    assert result.attempted == 0
    assert transport.sent == []
    assert await services.store.list(NotificationFilter()) == []


async def test_recipients_only_get_subscribed_categories(services, transport) -> None:
    await _add_admins(services, "all@example.com")
    await _add_admins(services, "orders@example.com", notification_categories=["orders"])
    await _add_admins(services, "payments@example.com", notification_categories=["payments"])

    result = await services.broadcaster.broadcast_to_admins(_request("order_created"))

    assert result.attempted == 2
    assert sorted(transport.recipients) == ["all@example.com", "orders@example.com"]


async def test_unconfigured_transport_fails_before_creating_records(
    services, transport
) -> None:
    await _add_admins(services, "a@example.com")
    transport.configured = False

    with pytest.raises(ConfigurationError):
        await services.broadcaster.broadcast_to_admins(_request())

    assert await services.store.list(NotificationFilter()) == []


async def test_notify_admins_option_broadcasts_after_customer_send(
    services, transport
) -> None:
    await _add_admins(services, "ops@example.com")

    outcome = await send_notification(
        services,
        SendNotificationRequest(
            event_type="payment_failed",
            recipient_email="customer@example.com",
            title="Payment failed",
            message="Please retry your payment.",
            notify_admins=True,
        ),
    )

    assert outcome.status is NotificationStatus.SENT
    assert outcome.broadcast is not None
    assert outcome.broadcast.succeeded == 1
    assert transport.recipients == ["customer@example.com", "ops@example.com"]
    admin_email = transport.sent[1]
    assert admin_email.subject == "[Admin] Payment Failed: Payment failed"
    assert "customer@example.com" in admin_email.html


async def test_legs_run_concurrently_up_to_the_configured_limit(
    settings_factory, transport_factory, clock
) -> None:
    slow_transport = transport_factory(delay=0.1)
    services = await build_services(
        settings_factory(fanout_concurrency=2), transport=slow_transport, clock=clock
    )
    try:
        await _add_admins(services, *(f"admin{index}@example.com" for index in range(6)))

        started = anyio.current_time()
        result = await services.broadcaster.broadcast_to_admins(_request())
        elapsed = anyio.current_time() - started
    finally:
        await services.aclose()

    assert result.succeeded == 6
    assert slow_transport.peak_in_flight == 2
    # Six legs with two in flight take at least three rounds of the delay.
    assert elapsed >= 0.3
