"""Adapter for the preferred ``email_notifications`` schema."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any
from uuid import uuid4

from sqlalchemy import delete, func, select, update

from notification_center.domain.entities import (
    NON_TERMINAL_STATUSES,
    NotificationFilter,
    NotificationRecord,
    NotificationStats,
    NotificationStatus,
)
from notification_center.infrastructure.models import EmailNotificationModel
from notification_center.utils import ensure_app_timezone, now_in_app_timezone

from .base import (
    NotificationAdapter,
    parse_priority,
    parse_status,
    stats_from_rows,
    stored_priority_values,
    stored_status_values,
)

_RECIPIENT_NAME_KEY = "recipient_name"


class PreferredNotificationAdapter(NotificationAdapter):
    """Read and write :class:`NotificationRecord` objects in ``email_notifications``."""

    name = "preferred"

    async def create(self, record: NotificationRecord) -> str:
        model = EmailNotificationModel()
        self._apply_entity_to_model(model, record)
        with self._errors("create"):
            async with self.session_factory() as session:
                session.add(model)
                await session.commit()
        return model.id

    async def get(self, notification_id: str) -> NotificationRecord | None:
        with self._errors("get"):
            async with self.session_factory() as session:
                model = await session.get(EmailNotificationModel, notification_id)
        return self._read(model)

    async def list(self, criteria: NotificationFilter) -> Sequence[NotificationRecord]:
        statement = select(EmailNotificationModel)
        if criteria.status is not None:
            statement = statement.where(
                EmailNotificationModel.status.in_(stored_status_values(criteria.status))
            )
        if criteria.event_type:
            statement = statement.where(
                EmailNotificationModel.template_type == criteria.event_type
            )
        # Category and module only live inside template_data here.
        if criteria.category:
            statement = statement.where(
                EmailNotificationModel.template_data["category"].as_string()
                == criteria.category
            )
        if criteria.platform_module:
            statement = statement.where(
                EmailNotificationModel.template_data["platform_module"].as_string()
                == criteria.platform_module
            )
        if criteria.priority is not None:
            statement = statement.where(
                EmailNotificationModel.priority.in_(
                    stored_priority_values(criteria.priority)
                )
            )
        if criteria.recipient_email:
            statement = statement.where(
                func.lower(EmailNotificationModel.recipient_email)
                == criteria.recipient_email.strip().lower()
            )
        if criteria.created_since is not None:
            statement = statement.where(
                EmailNotificationModel.created_at >= self._naive(criteria.created_since)
            )
        if criteria.oldest_first:
            ordering = (
                EmailNotificationModel.created_at.asc(),
                EmailNotificationModel.id.asc(),
            )
        else:
            ordering = (
                EmailNotificationModel.created_at.desc(),
                EmailNotificationModel.id.desc(),
            )
        statement = statement.order_by(*ordering).limit(criteria.limit)

        with self._errors("list"):
            async with self.session_factory() as session:
                models = (await session.scalars(statement)).all()
        return self._read_all(models)

    async def transition(
        self,
        notification_id: str,
        status: NotificationStatus,
        fields: dict[str, Any],
    ) -> bool:
        """Move a non-terminal row to ``status``. Return ``False`` if nothing changed."""

        values = self._status_values(status, fields)
        statement = (
            update(EmailNotificationModel)
            .where(EmailNotificationModel.id == notification_id)
            .where(
                EmailNotificationModel.status.in_(
                    stored_status_values(*NON_TERMINAL_STATUSES)
                )
            )
            .values(**values)
        )
        with self._errors("update"):
            async with self.session_factory() as session:
                result = await session.execute(statement)
                await session.commit()
        return result.rowcount > 0

    async def delete(self, notification_id: str) -> bool:
        statement = delete(EmailNotificationModel).where(
            EmailNotificationModel.id == notification_id
        )
        with self._errors("delete"):
            async with self.session_factory() as session:
                result = await session.execute(statement)
                await session.commit()
        return result.rowcount > 0

    async def summarize(self) -> NotificationStats:
        statement = select(
            EmailNotificationModel.template_type,
            EmailNotificationModel.status,
            func.count(),
        ).group_by(EmailNotificationModel.template_type, EmailNotificationModel.status)
        with self._errors("summarize"):
            async with self.session_factory() as session:
                rows = (await session.execute(statement)).all()
        return stats_from_rows(rows)

    def _apply_entity_to_model(
        self, model: EmailNotificationModel, record: NotificationRecord
    ) -> None:
        template_data = dict(record.metadata or {})
        if record.recipient_name:
            template_data[_RECIPIENT_NAME_KEY] = record.recipient_name
        for key in ("category", "platform_module", "action_url"):
            value = getattr(record, key)
            if value and key not in template_data:
                template_data[key] = value

        model.id = record.id or str(uuid4())
        model.template_type = record.event_type
        model.recipient_email = record.recipient_email
        model.subject = record.subject
        model.status = record.status.value
        model.priority = record.priority.value
        model.sent_at = self._naive(record.sent_at)
        model.scheduled_for = self._naive(record.scheduled_for)
        model.error_message = record.error_message
        model.failed_at = self._naive(record.failed_at)
        model.template_data = template_data
        model.created_at = self._naive(record.created_at or now_in_app_timezone())
        model.updated_at = model.created_at

    @staticmethod
    def _to_entity(model: EmailNotificationModel) -> NotificationRecord:
        metadata = dict(model.template_data or {})
        recipient_name = metadata.pop(_RECIPIENT_NAME_KEY, None)
        return NotificationRecord(
            id=model.id,
            event_type=model.template_type,
            recipient_email=model.recipient_email,
            recipient_name=recipient_name,
            subject=model.subject,
            content="",
            channels=["email"],
            status=parse_status(model.status),
            priority=parse_priority(model.priority),
            error_message=model.error_message,
            sent_at=ensure_app_timezone(model.sent_at),
            failed_at=ensure_app_timezone(model.failed_at),
            scheduled_for=ensure_app_timezone(model.scheduled_for),
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
            metadata=metadata,
            category=metadata.get("category"),
            platform_module=metadata.get("platform_module"),
            action_url=metadata.get("action_url"),
            source="preferred",
        )


__all__ = ["PreferredNotificationAdapter"]
