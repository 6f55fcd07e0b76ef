"""Tests for the admin recipient registry."""

from __future__ import annotations

import pytest

from notification_center.application.use_cases.recipients import (
    list_recipients,
    remove_recipient,
    save_recipient,
)
from notification_center.domain.exceptions import ValidationError

pytestmark = pytest.mark.anyio


async def test_save_recipient_upserts_on_lowercased_email(services) -> None:
    created = await save_recipient(
        services.recipients, email="Ops@Example.com", name="Ops", department="Support"
    )
    updated = await save_recipient(
        services.recipients,
        email="ops@example.com",
        name="Operations",
        notification_categories=["Orders", "orders", " payments "],
    )

    recipients = await list_recipients(services.recipients)

    assert created.email == "ops@example.com"
    assert created.notification_categories == ["all"]
    assert updated.id == created.id
    assert updated.name == "Operations"
    assert updated.notification_categories == ["orders", "payments"]
    assert len(recipients) == 1


async def test_save_recipient_rejects_invalid_email(services) -> None:
    with pytest.raises(ValidationError, match="Invalid email format"):
        await save_recipient(services.recipients, email="ops@localhost")


async def test_remove_recipient_deactivates_by_default(services) -> None:
    recipient = await save_recipient(services.recipients, email="ops@example.com")

    assert await remove_recipient(services.recipients, recipient.id) is True

    assert await list_recipients(services.recipients, active_only=True) == []
    stored = await services.recipients.get(recipient.id)
    assert stored is not None and stored.is_active is False


async def test_hard_remove_deletes_recipient(services) -> None:
    recipient = await save_recipient(services.recipients, email="ops@example.com")

    assert await remove_recipient(services.recipients, recipient.id, hard=True) is True
    assert await remove_recipient(services.recipients, recipient.id, hard=True) is False
    assert await services.recipients.get(recipient.id) is None
