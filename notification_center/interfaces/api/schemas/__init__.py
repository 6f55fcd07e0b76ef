"""Pydantic schemas for the HTTP API."""

from .notification import (
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
from .recipient import RecipientCreate, RecipientRead

__all__ = [
    "BroadcastCreate",
    "BroadcastRead",
    "BulkDeleteResponse",
    "BulkIdsRequest",
    "BulkSelectResponse",
    "NotificationCreate",
    "NotificationList",
    "NotificationRead",
    "NotificationSendResponse",
    "NotificationStatsRead",
    "NotificationStatsResponse",
    "ProcessPendingResponse",
    "RecipientCreate",
    "RecipientRead",
]
