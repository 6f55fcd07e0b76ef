"""Use cases for tracked notification emails."""

from .bulk import DEFAULT_MAX_BATCH, BulkOperationCoordinator
from .delete_notification import delete_notification
from .dispatcher import Dispatcher, TemplateRenderer
from .fanout import BroadcastRequest, FanoutBroadcaster
from .list_notifications import get_notification_stats, list_notifications
from .process_pending import DEFAULT_PENDING_BATCH, process_pending
from .send_notification import SendNotificationRequest, send_notification
from .throttle import ThrottlePolicy

__all__ = [
    "BroadcastRequest",
    "BulkOperationCoordinator",
    "DEFAULT_MAX_BATCH",
    "DEFAULT_PENDING_BATCH",
    "Dispatcher",
    "FanoutBroadcaster",
    "SendNotificationRequest",
    "TemplateRenderer",
    "ThrottlePolicy",
    "delete_notification",
    "get_notification_stats",
    "list_notifications",
    "process_pending",
    "send_notification",
]
