"""Endpoints for sending, listing and deleting tracked notifications."""

import logging

from fastapi import APIRouter, Body, Depends, Query, status

from notification_center.application.container import NotificationServices
from notification_center.application.use_cases.notifications import (
    BroadcastRequest,
    SendNotificationRequest,
    delete_notification as delete_notification_uc,
    get_notification_stats as get_notification_stats_uc,
    list_notifications as list_notifications_uc,
    process_pending as process_pending_uc,
    send_notification as send_notification_uc,
)
from notification_center.domain.entities import (
    NotificationFilter,
    NotificationPriority,
    NotificationStatus,
)
from notification_center.domain.events import admin_priority
from notification_center.domain.exceptions import ValidationError
from notification_center.interfaces.api.dependencies import get_services
from notification_center.interfaces.api.schemas import (
    BroadcastCreate,
    BroadcastRead,
    BulkDeleteResponse,
    BulkIdsRequest,
    BulkSelectResponse,
    NotificationCreate,
    NotificationList,
    NotificationRead,
    NotificationSendResponse,
    NotificationStatsRead,
    NotificationStatsResponse,
    ProcessPendingResponse,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])
logger = logging.getLogger(__name__)

_ALL = "all"


def _optional_filter(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    if not value or value.lower() == _ALL:
        return None
    return value


def _parse_enum(enum_type, value: str | None, label: str):
    cleaned = _optional_filter(value)
    if cleaned is None:
        return None
    try:
        return enum_type(cleaned.lower())
    except ValueError as exc:
        msg = f"Unknown {label} '{cleaned}'"
        raise ValidationError(msg) from exc


@router.post("", response_model=NotificationSendResponse, response_model_exclude_none=True)
async def send_notification(
    payload: NotificationCreate,
    services: NotificationServices = Depends(get_services),
) -> NotificationSendResponse:
    """Send an email notification, subject to the per-recipient throttle."""

    outcome = await send_notification_uc(
        services,
        SendNotificationRequest(
            event_type=payload.event,
            recipient_email=payload.recipient_email,
            recipient_name=payload.recipient_name,
            title=payload.data.title,
            message=payload.data.message,
            action_url=payload.data.action_url,
            priority=payload.priority,
            bypass_timeframe=payload.bypass_timeframe,
            scheduled_at=payload.scheduled_at,
            notify_admins=payload.notify_admins,
            category=payload.category,
            platform_module=payload.platform_module,
        ),
    )
    return NotificationSendResponse(
        success=True,
        notification_id=outcome.notification_id,
        status=outcome.status,
        error_message=outcome.error_message,
        admin_broadcast=(
            BroadcastRead.model_validate(outcome.broadcast) if outcome.broadcast else None
        ),
    )


@router.get("", response_model=NotificationList)
async def list_notifications(
    status_filter: str | None = Query(None, alias="status"),
    event: str | None = None,
    category: str | None = None,
    platform_module: str | None = None,
    priority: str | None = None,
    limit: int = Query(50, ge=1, le=500),
    services: NotificationServices = Depends(get_services),
) -> NotificationList:
    """Return notifications from both schemas, newest first."""

    criteria = NotificationFilter(
        status=_parse_enum(NotificationStatus, status_filter, "status"),
        event_type=_optional_filter(event),
        priority=_parse_enum(NotificationPriority, priority, "priority"),
        category=_optional_filter(category),
        platform_module=_optional_filter(platform_module),
        limit=limit,
    )
    records = await list_notifications_uc(services, criteria)
    return NotificationList(
        notifications=[NotificationRead.model_validate(record) for record in records]
    )


@router.get("/stats", response_model=NotificationStatsResponse)
async def notification_stats(
    services: NotificationServices = Depends(get_services),
) -> NotificationStatsResponse:
    stats = await get_notification_stats_uc(services)
    return NotificationStatsResponse(stats=NotificationStatsRead.model_validate(stats))


@router.delete("", response_model=BulkDeleteResponse, response_model_exclude_none=True)
async def delete_notifications(
    notification_id: str | None = Query(None, alias="id"),
    bulk: bool = False,
    payload: BulkIdsRequest | None = Body(None),
    services: NotificationServices = Depends(get_services),
) -> BulkDeleteResponse:
    """Delete one notification (``?id=``) or a batch (``?bulk=true`` with ``ids``)."""

    if bulk:
        report = await services.bulk.bulk_delete(payload.ids if payload else [])
        return BulkDeleteResponse(
            success=report.success,
            deletedCount=report.deleted_count,
            totalRequested=report.total_requested,
            errors=report.errors or None,
        )

    if not notification_id:
        raise ValidationError("Notification ID is required")
    await delete_notification_uc(services, notification_id)
    logger.info("Deleted notification %s", notification_id)
    return BulkDeleteResponse(success=True)


@router.post("/bulk-select", response_model=BulkSelectResponse)
async def bulk_select_notifications(
    payload: BulkIdsRequest,
    services: NotificationServices = Depends(get_services),
) -> BulkSelectResponse:
    selection = await services.bulk.bulk_select(payload.ids)
    return BulkSelectResponse(
        notifications=[
            NotificationRead.model_validate(record) for record in selection.notifications
        ],
        missing=selection.missing_ids,
    )


@router.post("/broadcast", response_model=BroadcastRead, status_code=status.HTTP_200_OK)
async def broadcast_to_admins(
    payload: BroadcastCreate,
    services: NotificationServices = Depends(get_services),
) -> BroadcastRead:
    """Send an event to every active admin subscribed to it."""

    if not payload.data.title.strip() or not payload.data.message.strip():
        raise ValidationError("Title and message are required")
    template_data = {"title": payload.data.title, "message": payload.data.message}
    if payload.data.action_url:
        template_data["action_url"] = payload.data.action_url
    result = await services.broadcaster.broadcast_to_admins(
        BroadcastRequest(
            event_type=payload.event,
            subject=payload.data.title,
            template_data=template_data,
            priority=payload.priority or admin_priority(payload.event),
            category=payload.category,
        )
    )
    return BroadcastRead.model_validate(result)


@router.post("/process", response_model=ProcessPendingResponse)
async def process_pending_notifications(
    limit: int = Query(50, ge=1, le=500),
    services: NotificationServices = Depends(get_services),
) -> ProcessPendingResponse:
    """Dispatch the oldest notifications still waiting in ``pending``."""

    result = await process_pending_uc(services, limit)
    if not result.total:
        message = "No pending notifications"
    else:
        message = "Notification processing complete"
    return ProcessPendingResponse(
        message=message,
        processed=result.sent,
        failed=result.failed,
        total=result.total,
        errors=result.errors,
    )
