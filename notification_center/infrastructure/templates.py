"""Default HTML bodies for notification emails."""

from __future__ import annotations

from html import escape

from notification_center.domain.entities import NotificationPriority, NotificationRecord
from notification_center.domain.events import display_name

_PRIORITY_COLORS = {
    NotificationPriority.LOW: "#64748b",
    NotificationPriority.MEDIUM: "#2563eb",
    NotificationPriority.HIGH: "#f59e0b",
    NotificationPriority.URGENT: "#dc2626",
}


class DefaultTemplateRenderer:
    """Render a record's template data into a simple branded HTML email."""

    def __init__(self, brand_name: str = "Store Notifications") -> None:
        self.brand_name = brand_name

    def render(self, record: NotificationRecord) -> str:
        data = record.metadata or {}
        title = str(data.get("title") or record.subject)
        message = str(data.get("message") or "")
        action_url = data.get("action_url") or record.action_url
        greeting_name = record.recipient_name or "there"
        event_name = display_name(record.event_type)
        color = _PRIORITY_COLORS.get(record.priority, _PRIORITY_COLORS[NotificationPriority.MEDIUM])

        html_content = (
            "<!DOCTYPE html>"
            '<html><head><meta charset="utf-8"></head>'
            '<body style="margin:0;padding:20px;background-color:#f8fafc;">'
            '<div style="max-width:600px;margin:0 auto;font-family:Arial,sans-serif;">'
            f'<div style="background:#1e293b;color:#ffffff;padding:24px;">'
            f"<h1 style=\"margin:0;font-size:20px;\">{escape(self.brand_name)}</h1>"
            f'<p style="margin:8px 0 0 0;color:#cbd5e1;">{escape(event_name)} Notification</p>'
            "</div>"
            f'<div style="background:#ffffff;padding:24px;border-top:4px solid {color};">'
            f"<p>Hello {escape(greeting_name)},</p>"
            f'<h2 style="color:#1e293b;">{escape(title)}</h2>'
            f'<div style="color:#374151;line-height:1.6;white-space:pre-wrap;">{escape(message)}</div>'
        )
        if record.priority in (NotificationPriority.HIGH, NotificationPriority.URGENT):
            html_content += (
                f'<p style="color:{color};font-weight:bold;">'
                f"Priority: {escape(record.priority.value.upper())}</p>"
            )
        if action_url:
            html_content += (
                f'<p><a href="{escape(str(action_url), quote=True)}" '
                'style="padding:12px 24px;background:#2563eb;color:#ffffff;'
                'text-decoration:none;border-radius:24px;display:inline-block;">'
                "View details</a></p>"
            )
        html_content += (
            "</div>"
            '<p style="text-align:center;color:#64748b;font-size:12px;">'
            "This is an automated message. Please do not reply directly.</p>"
            "</div></body></html>"
        )
        return html_content


def build_admin_summary(record: NotificationRecord) -> str:
    """Return the plain-text body admins receive about a customer notification."""

    event_name = display_name(record.event_type)
    lines = [f"A {event_name.lower()} notification was sent to a customer.", ""]
    lines.append(f"Customer Email: {record.recipient_email}")
    if record.recipient_name:
        lines.append(f"Customer Name: {record.recipient_name}")
    lines.append("")
    lines.append(f"Notification Subject: {record.subject}")
    message = str((record.metadata or {}).get("message") or record.content or "")
    if message:
        preview = message[:100] + ("..." if len(message) > 100 else "")
        lines.append(f"Content Preview: {preview}")
    lines.extend(
        [
            "",
            "System Details:",
            f"- Notification ID: {record.id}",
            f"- Event Type: {record.event_type}",
            f"- Status: {record.status.value}",
        ]
    )
    return "\n".join(lines)


__all__ = ["DefaultTemplateRenderer", "build_admin_summary"]
