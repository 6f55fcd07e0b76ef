"""Notification schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from notification_center.domain.entities import NotificationPriority, NotificationStatus


class NotificationData(BaseModel):
    title: str = ""
    message: str = ""
    action_url: str | None = None


class NotificationCreate(BaseModel):
    """Request body for sending a notification email."""

    event: str = ""
    recipient_email: str = ""
    recipient_name: str | None = Field(default=None, max_length=255)
    data: NotificationData = Field(default_factory=NotificationData)
    priority: NotificationPriority = NotificationPriority.MEDIUM
    bypass_timeframe: bool = False
    scheduled_at: datetime | None = None
    notify_admins: bool = False
    category: str | None = None
    platform_module: str | None = None


class BroadcastCreate(BaseModel):
    event: str = Field(..., min_length=1)
    data: NotificationData
    priority: NotificationPriority | None = None
    category: str | None = None


class NotificationRead(BaseModel):
    id: str
    event_type: str
    recipient_email: str
    recipient_name: str | None
    subject: str
    content: str
    channels: list[str]
    status: NotificationStatus
    priority: NotificationPriority
    error_message: str | None
    sent_at: datetime | None
    failed_at: datetime | None
    scheduled_for: datetime | None
    created_at: datetime | None
    updated_at: datetime | None
    metadata: dict[str, Any]
    category: str | None
    platform_module: str | None
    action_url: str | None
    source: str | None

    model_config = ConfigDict(from_attributes=True)


class NotificationList(BaseModel):
    notifications: list[NotificationRead]


class BroadcastLegRead(BaseModel):
    email: str
    success: bool
    notification_id: str | None = None
    error: str | None = None

    model_config = ConfigDict(from_attributes=True)


class BroadcastRead(BaseModel):
    attempted: int
    succeeded: int
    failed: int
    details: list[BroadcastLegRead]

    model_config = ConfigDict(from_attributes=True)


class NotificationSendResponse(BaseModel):
    success: bool
    notification_id: str
    status: NotificationStatus
    error_message: str | None = None
    admin_broadcast: BroadcastRead | None = None


class NotificationStatsRead(BaseModel):
    total: int
    sent: int
    failed: int
    pending: int
    by_event: dict[str, int]

    model_config = ConfigDict(from_attributes=True)


class NotificationStatsResponse(BaseModel):
    stats: NotificationStatsRead


class BulkIdsRequest(BaseModel):
    ids: list[str] = Field(default_factory=list)


class BulkDeleteResponse(BaseModel):
    success: bool
    deletedCount: int | None = None
    totalRequested: int | None = None
    errors: list[str] | None = None


class BulkSelectResponse(BaseModel):
    notifications: list[NotificationRead]
    missing: list[str]


class ProcessPendingResponse(BaseModel):
    message: str
    processed: int
    failed: int
    total: int
    errors: list[str] = Field(default_factory=list)
