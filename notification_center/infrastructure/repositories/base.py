"""Shared plumbing for the notification store adapters."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from datetime import datetime
from typing import Any, TypeVar

from sqlalchemy.exc import OperationalError, ProgrammingError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from notification_center.domain.entities import (
    NON_TERMINAL_STATUSES,
    NotificationPriority,
    NotificationRecord,
    NotificationStats,
    NotificationStatus,
)
from notification_center.domain.exceptions import (
    PersistenceError,
    SchemaUnavailableError,
)
from notification_center.utils import ensure_app_naive_datetime

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")

# Values written by older deployments of the schemas.
STATUS_ALIASES = {"queued": NotificationStatus.PENDING}
PRIORITY_ALIASES = {"normal": NotificationPriority.MEDIUM}


def parse_status(value: str) -> NotificationStatus:
    """Return the status stored as ``value``; raise ``ValueError`` if unknown."""

    return STATUS_ALIASES.get(value) or NotificationStatus(value)


def parse_priority(value: str | None) -> NotificationPriority:
    if value is None:
        return NotificationPriority.MEDIUM
    return PRIORITY_ALIASES.get(value) or NotificationPriority(value)


def stored_status_values(*statuses: NotificationStatus) -> list[str]:
    """Return every column value that reads back as one of ``statuses``."""

    values = [status.value for status in statuses]
    values.extend(alias for alias, status in STATUS_ALIASES.items() if status in statuses)
    return values


def stored_priority_values(priority: NotificationPriority) -> list[str]:
    values = [priority.value]
    values.extend(alias for alias, value in PRIORITY_ALIASES.items() if value is priority)
    return values


class NotificationAdapter:
    """Base class for one physical notification schema.

    Every operation opens its own session so adapters can be shared by
    concurrently running tasks.
    """

    name = "store"

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    @contextmanager
    def _errors(self, operation: str) -> Iterator[None]:
        try:
            yield
        except (OperationalError, ProgrammingError) as exc:
            logger.warning("%s store %s failed: %s", self.name, operation, exc)
            msg = f"{self.name} store is unavailable: {exc.orig or exc}"
            raise SchemaUnavailableError(msg) from exc
        except SQLAlchemyError as exc:
            logger.error("%s store %s failed: %s", self.name, operation, exc)
            msg = f"{self.name} store {operation} failed: {exc}"
            raise PersistenceError(msg) from exc

    def _to_entity(self, model: Any) -> NotificationRecord:
        raise NotImplementedError

    def _read(self, model: ModelT | None) -> NotificationRecord | None:
        """Convert ``model``, skipping rows whose status or priority is unknown."""

        if model is None:
            return None
        try:
            return self._to_entity(model)
        except ValueError as exc:
            logger.warning(
                "Skipping %s notification %s: %s",
                self.name,
                getattr(model, "id", None),
                exc,
            )
            return None

    def _read_all(self, models: Sequence[ModelT]) -> list[NotificationRecord]:
        records = (self._read(model) for model in models)
        return [record for record in records if record is not None]

    @staticmethod
    def _status_values(
        status: NotificationStatus, fields: dict[str, Any]
    ) -> dict[str, Any]:
        """Return the column values that accompany a move to ``status``."""

        values: dict[str, Any] = {"status": status.value}
        if status is NotificationStatus.SENT:
            values["sent_at"] = ensure_app_naive_datetime(fields.get("sent_at"))
            values["error_message"] = None
        elif status is NotificationStatus.FAILED:
            values["error_message"] = fields.get("error_message") or "Unknown error"
            values["failed_at"] = ensure_app_naive_datetime(fields.get("failed_at"))
        return values

    @staticmethod
    def _naive(value: datetime | None) -> datetime | None:
        return ensure_app_naive_datetime(value)


def stats_from_rows(rows: Sequence[Any]) -> NotificationStats:
    """Aggregate ``(event, status, count)`` rows into :class:`NotificationStats`."""

    pending_values = set(stored_status_values(*NON_TERMINAL_STATUSES))
    stats = NotificationStats()
    for event, status, count in rows:
        stats.total += count
        stats.by_event[event] = stats.by_event.get(event, 0) + count
        if status == NotificationStatus.SENT.value:
            stats.sent += count
        elif status == NotificationStatus.FAILED.value:
            stats.failed += count
        elif status in pending_values:
            stats.pending += count
    return stats


__all__ = [
    "NotificationAdapter",
    "parse_priority",
    "parse_status",
    "stats_from_rows",
    "stored_priority_values",
    "stored_status_values",
]
