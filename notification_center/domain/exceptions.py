"""Errors raised by the notification domain."""

from __future__ import annotations

from datetime import datetime


class NotificationError(Exception):
    """Base class for notification errors."""


class ConfigurationError(NotificationError):
    """Transport or store configuration is missing or invalid."""


class ValidationError(NotificationError):
    """Request input was rejected before anything was persisted."""


class ThrottleError(NotificationError):
    """The recipient already received an email inside the throttle window."""

    def __init__(
        self,
        last_sent_at: datetime | None,
        *,
        can_bypass: bool = True,
        window_days: int = 7,
    ) -> None:
        self.last_sent_at = last_sent_at
        self.can_bypass = can_bypass
        super().__init__(
            f"An email was already sent to this recipient within the last {window_days} days"
        )


class TransportError(NotificationError):
    """The email provider rejected the request or could not be reached."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class PersistenceError(NotificationError):
    """A notification store failed to read or write."""


class SchemaUnavailableError(PersistenceError):
    """The backing table of a store is missing or cannot be queried."""


class NotificationNotFoundError(PersistenceError):
    """No store holds a record with the requested id."""


class InvalidStatusTransitionError(NotificationError):
    """A terminal record was asked to move to a different status."""


__all__ = [
    "ConfigurationError",
    "InvalidStatusTransitionError",
    "NotificationError",
    "NotificationNotFoundError",
    "PersistenceError",
    "SchemaUnavailableError",
    "ThrottleError",
    "TransportError",
    "ValidationError",
]
