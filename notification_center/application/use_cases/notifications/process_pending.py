"""Use case for re-dispatching notifications left in ``pending``."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from notification_center.domain.entities import (
    NotificationFilter,
    NotificationStatus,
    PendingRunResult,
)

if TYPE_CHECKING:
    from notification_center.application.container import NotificationServices

logger = logging.getLogger(__name__)

DEFAULT_PENDING_BATCH = 50


async def process_pending(
    services: NotificationServices, limit: int = DEFAULT_PENDING_BATCH
) -> PendingRunResult:
    """Send the oldest ``limit`` pending notifications one at a time.

    A record that cannot be sent or whose outcome cannot be stored is counted
    as failed and the run moves on to the next one.
    """

    services.dispatcher.ensure_ready()
    pending = await services.store.list(
        NotificationFilter(
            status=NotificationStatus.PENDING,
            limit=limit,
            oldest_first=True,
            include_legacy=True,
        )
    )
    result = PendingRunResult(total=len(pending))
    if not pending:
        logger.info("No pending notifications to process")
        return result

    for record in pending:
        try:
            outcome = await services.dispatcher.send(record)
        except Exception as exc:
            logger.exception("Failed to process pending notification %s", record.id)
            result.failed += 1
            result.errors.append(f"{record.id}: {exc}")
            continue
        if outcome.succeeded:
            result.sent += 1
        else:
            result.failed += 1

    logger.info(
        "Processed %d pending notifications: %d sent, %d failed",
        result.total,
        result.sent,
        result.failed,
    )
    return result


__all__ = ["DEFAULT_PENDING_BATCH", "process_pending"]
