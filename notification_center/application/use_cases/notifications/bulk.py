"""Batched delete and select over the notification store."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from notification_center.domain.entities import BulkDeleteReport, BulkSelection
from notification_center.domain.exceptions import ValidationError
from notification_center.infrastructure.repositories import NotificationStore

logger = logging.getLogger(__name__)

DEFAULT_MAX_BATCH = 100


class BulkOperationCoordinator:
    """Apply per-id store operations to a bounded batch of ids."""

    def __init__(self, store: NotificationStore, *, max_batch: int = DEFAULT_MAX_BATCH) -> None:
        self.store = store
        self.max_batch = max_batch

    def _validate(self, ids: Sequence[str] | None) -> list[str]:
        if not ids:
            raise ValidationError("Notification IDs array is required")
        if len(ids) > self.max_batch:
            msg = f"Cannot process more than {self.max_batch} notifications at once"
            raise ValidationError(msg)
        cleaned = [str(notification_id).strip() for notification_id in ids]
        if any(not notification_id for notification_id in cleaned):
            raise ValidationError("Notification IDs must be non-empty strings")
        return cleaned

    async def bulk_delete(self, ids: Sequence[str] | None) -> BulkDeleteReport:
        """Delete every id, preferred schema first; unknown ids count as zero."""

        validated = self._validate(ids)
        outcome = await self.store.bulk_delete(validated)
        logger.info(
            "Bulk delete removed %d of %d notifications", outcome.deleted_count, len(validated)
        )
        return BulkDeleteReport(
            deleted_count=outcome.deleted_count,
            total_requested=len(validated),
            errors=outcome.errors,
        )

    async def bulk_select(self, ids: Sequence[str] | None) -> BulkSelection:
        validated = self._validate(ids)
        selection = BulkSelection()
        for notification_id in validated:
            record = await self.store.get(notification_id)
            if record is None:
                selection.missing_ids.append(notification_id)
            else:
                selection.notifications.append(record)
        return selection


__all__ = ["BulkOperationCoordinator", "DEFAULT_MAX_BATCH"]
