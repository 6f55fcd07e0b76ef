"""Single read/write contract over the preferred and legacy notification schemas."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime
from typing import Any

from notification_center.domain.entities import (
    BulkDeleteResult,
    NotificationFilter,
    NotificationRecord,
    NotificationStats,
    NotificationStatus,
)
from notification_center.domain.exceptions import (
    InvalidStatusTransitionError,
    NotificationNotFoundError,
    PersistenceError,
    SchemaUnavailableError,
)

from .legacy_notification_adapter import LegacyNotificationAdapter
from .preferred_notification_adapter import PreferredNotificationAdapter

logger = logging.getLogger(__name__)

_EPOCH = datetime.min


class NotificationStore:
    """Route notification operations to the preferred or legacy schema.

    Writes always go to the preferred schema. Reads degrade to the legacy
    schema when the preferred one is empty or unavailable, and results are
    ordered by ``created_at`` (newest first unless ``oldest_first``)
    regardless of origin.
    """

    def __init__(
        self,
        preferred: PreferredNotificationAdapter,
        legacy: LegacyNotificationAdapter,
    ) -> None:
        self.preferred = preferred
        self.legacy = legacy

    async def create(self, record: NotificationRecord) -> str:
        """Persist ``record`` in the preferred schema and return its id."""

        notification_id = await self.preferred.create(record)
        logger.debug(
            "Stored %s notification %s for %s",
            record.status.value,
            notification_id,
            record.recipient_email,
        )
        return notification_id

    async def get(self, notification_id: str) -> NotificationRecord | None:
        for adapter in (self.preferred, self.legacy):
            try:
                record = await adapter.get(notification_id)
            except SchemaUnavailableError:
                continue
            if record is not None:
                return record
        return None

    async def list(self, criteria: NotificationFilter) -> list[NotificationRecord]:
        preferred_rows: Sequence[NotificationRecord] | None
        try:
            preferred_rows = await self.preferred.list(criteria)
        except SchemaUnavailableError:
            logger.info("Preferred notification schema unavailable; reading legacy rows")
            preferred_rows = None

        legacy_rows: Sequence[NotificationRecord] = []
        if (
            not preferred_rows
            or criteria.include_legacy
            or criteria.targets_legacy_only_fields
        ):
            try:
                legacy_rows = await self.legacy.list(criteria)
            except SchemaUnavailableError:
                if preferred_rows is None:
                    raise
                logger.info("Legacy notification schema unavailable; skipping merge")

        combined = [*legacy_rows, *(preferred_rows or [])]
        combined.sort(key=_created_at_key, reverse=not criteria.oldest_first)
        return combined[: criteria.limit]

    async def update_status(
        self,
        notification_id: str,
        status: NotificationStatus,
        **fields: Any,
    ) -> None:
        """Move a record to ``status``.

        Rewriting the status a terminal record already holds is a no-op;
        asking a terminal record for any other status raises
        :class:`InvalidStatusTransitionError`.
        """

        for adapter in (self.preferred, self.legacy):
            try:
                if await adapter.transition(notification_id, status, fields):
                    return
                current = await adapter.get(notification_id)
            except SchemaUnavailableError:
                continue
            if current is None:
                continue
            if current.status is status:
                logger.debug(
                    "Notification %s already %s; ignoring update",
                    notification_id,
                    status.value,
                )
                return
            msg = (
                f"Notification {notification_id} is {current.status.value} and "
                f"cannot become {status.value}"
            )
            raise InvalidStatusTransitionError(msg)

        msg = f"Notification {notification_id} not found"
        raise NotificationNotFoundError(msg)

    async def delete(self, notification_id: str) -> bool:
        """Delete ``notification_id`` from whichever schema holds it."""

        deleted, errors = await self._delete_one(notification_id)
        if errors and not deleted:
            raise PersistenceError("; ".join(errors))
        return deleted

    async def bulk_delete(self, ids: Sequence[str]) -> BulkDeleteResult:
        result = BulkDeleteResult()
        for notification_id in ids:
            deleted, errors = await self._delete_one(notification_id)
            if deleted:
                result.deleted_count += 1
            result.errors.extend(errors)
        return result

    async def summarize(self) -> NotificationStats:
        try:
            stats = await self.preferred.summarize()
        except SchemaUnavailableError:
            logger.info("Preferred notification schema unavailable; summarizing legacy rows")
            return await self.legacy.summarize()
        if stats.total == 0:
            try:
                return await self.legacy.summarize()
            except SchemaUnavailableError:
                return stats
        return stats

    async def _delete_one(self, notification_id: str) -> tuple[bool, list[str]]:
        errors: list[str] = []
        for adapter in (self.preferred, self.legacy):
            try:
                if await adapter.delete(notification_id):
                    return True, errors
            except PersistenceError as exc:
                logger.warning(
                    "Failed to delete notification %s from %s store: %s",
                    notification_id,
                    adapter.name,
                    exc,
                )
                errors.append(f"{adapter.name}: {exc}")
        return False, errors


def _created_at_key(record: NotificationRecord) -> datetime:
    if record.created_at is None:
        return _EPOCH
    return record.created_at.replace(tzinfo=None)


__all__ = ["NotificationStore"]
