"""Unit tests for email rendering helpers and settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from notification_center.config import reset_settings_cache
from notification_center.domain.entities import NotificationPriority
from notification_center.infrastructure.email import html_to_text, is_valid_email
from notification_center.infrastructure.templates import (
    DefaultTemplateRenderer,
    build_admin_summary,
)
from notification_center.utils import get_app_timezone


def test_html_to_text_strips_markup_and_truncates() -> None:
    markup = "<style>p {color: red}</style><p>Hello&nbsp;<b>world</b></p>" + "<p>x</p>" * 600

    text = html_to_text(markup)

    assert text.startswith("Hello world x x")
    assert text.endswith("…")
    assert len(text) == 501


def test_html_to_text_drops_scripts_and_decodes_entities() -> None:
    markup = (
        "<html><head><script>track();</script></head>"
        "<body><h1>Fish &amp; Chips</h1><p>Ready at&nbsp;5pm</p></body></html>"
    )

    assert html_to_text(markup) == "Fish & Chips Ready at 5pm…"


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("user@example.com", True),
        (" user@example.com ", True),
        ("user@localhost", False),
        ("user example@example.com", False),
        ("", False),
        (None, False),
    ],
)
def test_is_valid_email(value, expected) -> None:
    assert is_valid_email(value) is expected


def test_renderer_escapes_values_and_flags_urgent_priority(record_factory) -> None:
    record = record_factory(
        metadata={
            "title": "<script>alert(1)</script>",
            "message": "Card declined",
            "action_url": "https://shop.example.com/pay?id=1&retry=1",
        },
        priority=NotificationPriority.URGENT,
    )

    html_content = DefaultTemplateRenderer("Example Shop").render(record)

    assert "<script>" not in html_content
    assert "&lt;script&gt;" in html_content
    assert "Priority: URGENT" in html_content
    assert "https://shop.example.com/pay?id=1&amp;retry=1" in html_content
    assert "Example Shop" in html_content


def test_admin_summary_mentions_customer(record_factory) -> None:
    record = record_factory(id="n-1", recipient_name="Amina")

    summary = build_admin_summary(record)

    assert "Customer Email: customer@example.com" in summary
    assert "Customer Name: Amina" in summary
    assert "Notification ID: n-1" in summary


def test_settings_require_credential_pair(settings_factory) -> None:
    with pytest.raises(ValidationError, match="SENDPULSE_CLIENT_ID"):
        settings_factory(sendpulse_client_secret=None)


def test_settings_fall_back_to_primary_database_for_legacy(settings) -> None:
    assert settings.resolved_legacy_database_url == settings.database_url
    assert settings.email_enabled is True


@pytest.mark.parametrize(
    ("configured", "expected"),
    [("Europe/Berlin", "Europe/Berlin"), ("Mars/Olympus_Mons", "Africa/Dar_es_Salaam")],
)
def test_app_timezone_follows_settings(monkeypatch, configured, expected) -> None:
    monkeypatch.setenv("APP_TIMEZONE", configured)
    reset_settings_cache()
    try:
        assert str(get_app_timezone()) == expected
    finally:
        monkeypatch.delenv("APP_TIMEZONE")
        reset_settings_cache()
