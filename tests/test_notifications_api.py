"""Integration tests for the notification and recipient API endpoints."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from main import create_app


@pytest.fixture()
def client(settings, transport):
    """Return a test client bound to a clean application instance."""

    app = create_app(settings, transport=transport)
    with TestClient(app) as test_client:
        yield test_client


def _payload(**overrides) -> dict:
    payload = {
        "event": "order_created",
        "recipient_email": "customer@example.com",
        "recipient_name": "Amina",
        "data": {
            "title": "Order received",
            "message": "We are preparing your order.",
            "action_url": "https://shop.example.com/orders/42",
        },
        "priority": "high",
    }
    payload.update(overrides)
    return payload


def _seed_legacy(client: TestClient, record) -> str:
    services = client.app.state.services
    return client.portal.call(services.store.legacy.create, record)


def test_send_then_throttle_then_bypass(client: TestClient, transport) -> None:
    first = client.post("/notifications", json=_payload())
    assert first.status_code == 200
    body = first.json()
    assert body["success"] is True
    assert body["status"] == "sent"
    assert "error_message" not in body

    throttled = client.post("/notifications", json=_payload())
    assert throttled.status_code == 429
    throttled_body = throttled.json()
    assert throttled_body["canBypass"] is True
    assert throttled_body["lastSentAt"] is not None
    assert "7 days" in throttled_body["error"]

    bypassed = client.post("/notifications", json=_payload(bypass_timeframe=True))
    assert bypassed.status_code == 200
    assert len(transport.sent) == 2

    listing = client.get("/notifications").json()["notifications"]
    assert len(listing) == 2
    assert listing[0]["id"] == bypassed.json()["notification_id"]
    assert listing[0]["priority"] == "high"
    assert listing[0]["channels"] == ["email"]


def test_send_failure_is_reported_in_body(client: TestClient, transport) -> None:
    transport.failing.add("customer@example.com")

    response = client.post("/notifications", json=_payload())

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "failed"
    assert "Rejected recipient" in body["error_message"]


def test_validation_errors_return_400(client: TestClient) -> None:
    response = client.post(
        "/notifications", json=_payload(data={"title": "", "message": "Hi"})
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Title is required"}
    assert client.get("/notifications").json()["notifications"] == []


def test_unconfigured_transport_returns_400_without_record(
    client: TestClient, transport
) -> None:
    transport.configured = False

    response = client.post("/notifications", json=_payload())

    assert response.status_code == 400
    assert "not configured" in response.json()["error"]
    assert client.get("/notifications").json()["notifications"] == []


def test_list_filters_and_legacy_fallback(client: TestClient, record_factory, clock) -> None:
    _seed_legacy(
        client,
        record_factory(id="legacy-1", created_at=clock(), category="orders", platform_module="shop"),
    )
    clock.advance(minutes=1)
    _seed_legacy(
        client,
        record_factory(id="legacy-2", created_at=clock(), category="payments"),
    )

    everything = client.get("/notifications", params={"status": "all", "event": "all"})
    by_category = client.get("/notifications", params={"category": "orders"})
    bad_status = client.get("/notifications", params={"status": "delivered"})

    assert [item["id"] for item in everything.json()["notifications"]] == [
        "legacy-2",
        "legacy-1",
    ]
    assert [item["id"] for item in by_category.json()["notifications"]] == ["legacy-1"]
    assert by_category.json()["notifications"][0]["platform_module"] == "shop"
    assert bad_status.status_code == 400


def test_stats_endpoint(client: TestClient) -> None:
    client.post("/notifications", json=_payload())
    client.post(
        "/notifications",
        json=_payload(
            recipient_email="later@example.com",
            scheduled_at="2030-01-01T10:00:00+03:00",
        ),
    )

    stats = client.get("/notifications/stats").json()["stats"]

    assert stats == {
        "total": 2,
        "sent": 1,
        "failed": 0,
        "pending": 1,
        "by_event": {"order_created": 2},
    }


def test_single_and_bulk_delete(client: TestClient, record_factory, clock) -> None:
    created = client.post("/notifications", json=_payload()).json()
    _seed_legacy(client, record_factory(id="legacy-y", created_at=clock()))

    bulk = client.request(
        "DELETE",
        "/notifications",
        params={"bulk": "true"},
        json={"ids": [created["notification_id"], "legacy-y", "missing"]},
    )
    assert bulk.status_code == 200
    assert bulk.json() == {"success": True, "deletedCount": 2, "totalRequested": 3}

    again = client.request(
        "DELETE", "/notifications", params={"bulk": "true"}, json={"ids": ["legacy-y"]}
    )
    assert again.json()["deletedCount"] == 0

    missing = client.delete("/notifications", params={"id": "missing"})
    assert missing.status_code == 404

    no_id = client.delete("/notifications")
    assert no_id.status_code == 400


def test_bulk_delete_limits(client: TestClient) -> None:
    too_many = client.request(
        "DELETE",
        "/notifications",
        params={"bulk": "true"},
        json={"ids": [f"id-{index}" for index in range(101)]},
    )
    empty = client.request(
        "DELETE", "/notifications", params={"bulk": "true"}, json={"ids": []}
    )

    assert too_many.status_code == 400
    assert "more than 100" in too_many.json()["error"]
    assert empty.status_code == 400


def test_single_delete_removes_record(client: TestClient) -> None:
    created = client.post("/notifications", json=_payload()).json()

    response = client.delete("/notifications", params={"id": created["notification_id"]})

    assert response.status_code == 200
    assert response.json() == {"success": True}
    assert client.get("/notifications").json()["notifications"] == []


def test_bulk_select(client: TestClient) -> None:
    created = client.post("/notifications", json=_payload()).json()

    response = client.post(
        "/notifications/bulk-select",
        json={"ids": [created["notification_id"], "missing"]},
    )

    body = response.json()
    assert response.status_code == 200
    assert [item["id"] for item in body["notifications"]] == [created["notification_id"]]
    assert body["missing"] == ["missing"]


def test_recipient_management_and_broadcast(client: TestClient, transport) -> None:
    created = client.post(
        "/recipients",
        json={"email": "Ops@Example.com", "name": "Ops", "department": "Support"},
    )
    client.post("/recipients", json={"email": "finance@example.com"})
    client.post("/recipients", json={"email": "bounced@example.org"})
    transport.failing.add("bounced@example.org")

    assert created.status_code == 201
    assert created.json()["email"] == "ops@example.com"
    assert created.json()["notification_categories"] == ["all"]

    broadcast = client.post(
        "/notifications/broadcast",
        json={
            "event": "contact_message_received",
            "data": {"title": "New message", "message": "A customer wrote in."},
        },
    )
    body = broadcast.json()
    assert broadcast.status_code == 200
    assert body["attempted"] == 3
    assert body["succeeded"] == 2
    assert body["failed"] == 1

    removed = client.delete("/recipients", params={"id": created.json()["id"]})
    active = client.get("/recipients", params={"active_only": "true"}).json()
    assert removed.status_code == 200
    assert sorted(item["email"] for item in active) == [
        "bounced@example.org",
        "finance@example.com",
    ]
    assert client.delete("/recipients", params={"id": "missing"}).status_code == 404


def test_health(client: TestClient) -> None:
    assert client.get("/health").json() == {"status": "ok"}


def test_process_pending_endpoint(client: TestClient, transport, record_factory, clock) -> None:
    _seed_legacy(client, record_factory(id="legacy-pending", created_at=clock()))

    first = client.post("/notifications/process")
    second = client.post("/notifications/process")

    assert first.status_code == 200
    assert first.json() == {
        "message": "Notification processing complete",
        "processed": 1,
        "failed": 0,
        "total": 1,
        "errors": [],
    }
    assert second.json()["message"] == "No pending notifications"
    assert transport.recipients == ["customer@example.com"]
