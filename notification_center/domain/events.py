"""Catalog of store events that produce notifications."""

from __future__ import annotations

from notification_center.domain.entities import NotificationPriority

EVENT_CATEGORIES: dict[str, frozenset[str]] = {
    "order_created": frozenset({"order_created", "orders"}),
    "admin_order_created": frozenset({"order_created", "orders", "admin_order_created"}),
    "payment_success": frozenset({"payment_success", "payments"}),
    "payment_failed": frozenset({"payment_failed", "payments"}),
    "booking_created": frozenset({"booking_created", "bookings"}),
    "contact_message_received": frozenset({"contact_message_received", "contact"}),
    "user_registered": frozenset({"user_registered", "users"}),
}

EVENT_DISPLAY_NAMES: dict[str, str] = {
    "order_created": "Order Created",
    "admin_order_created": "Admin Order Created",
    "payment_success": "Payment Success",
    "payment_failed": "Payment Failed",
    "booking_created": "Booking Created",
    "contact_message_received": "Contact Message Received",
    "user_registered": "User Registered",
}

_URGENT_ADMIN_EVENTS = frozenset({"payment_failed"})
_HIGH_ADMIN_EVENTS = frozenset({"admin_order_created"})


def categories_for(event_type: str) -> frozenset[str]:
    """Return the recipient categories interested in ``event_type``."""

    return EVENT_CATEGORIES.get(event_type, frozenset({event_type}))


def display_name(event_type: str) -> str:
    known = EVENT_DISPLAY_NAMES.get(event_type)
    if known:
        return known
    return event_type.replace("_", " ").title()


def admin_priority(event_type: str) -> NotificationPriority:
    if event_type in _URGENT_ADMIN_EVENTS:
        return NotificationPriority.URGENT
    if event_type in _HIGH_ADMIN_EVENTS:
        return NotificationPriority.HIGH
    return NotificationPriority.MEDIUM


__all__ = [
    "EVENT_CATEGORIES",
    "EVENT_DISPLAY_NAMES",
    "admin_priority",
    "categories_for",
    "display_name",
]
