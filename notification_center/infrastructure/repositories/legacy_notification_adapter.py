"""Adapter for the legacy ``notifications`` schema."""

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
from notification_center.infrastructure.models import LegacyNotificationModel
from notification_center.utils import ensure_app_timezone, now_in_app_timezone

from .base import (
    NotificationAdapter,
    parse_priority,
    parse_status,
    stats_from_rows,
    stored_priority_values,
    stored_status_values,
)


class LegacyNotificationAdapter(NotificationAdapter):
    """Read, transition and delete rows of the original ``notifications`` table."""

    name = "legacy"

    async def create(self, record: NotificationRecord) -> str:
        model = LegacyNotificationModel()
        self._apply_entity_to_model(model, record)
        with self._errors("create"):
            async with self.session_factory() as session:
                session.add(model)
                await session.commit()
        return model.id

    async def get(self, notification_id: str) -> NotificationRecord | None:
        with self._errors("get"):
            async with self.session_factory() as session:
                model = await session.get(LegacyNotificationModel, notification_id)
        return self._read(model)

    async def list(self, criteria: NotificationFilter) -> Sequence[NotificationRecord]:
        statement = select(LegacyNotificationModel)
        if criteria.status is not None:
            statement = statement.where(
                LegacyNotificationModel.status.in_(stored_status_values(criteria.status))
            )
        if criteria.event_type:
            statement = statement.where(
                LegacyNotificationModel.event == criteria.event_type
            )
        if criteria.category:
            statement = statement.where(
                LegacyNotificationModel.category == criteria.category
            )
        if criteria.platform_module:
            statement = statement.where(
                LegacyNotificationModel.platform_module == criteria.platform_module
            )
        if criteria.priority is not None:
            statement = statement.where(
                LegacyNotificationModel.priority.in_(
                    stored_priority_values(criteria.priority)
                )
            )
        if criteria.recipient_email:
            statement = statement.where(
                func.lower(LegacyNotificationModel.recipient_email)
                == criteria.recipient_email.strip().lower()
            )
        if criteria.created_since is not None:
            statement = statement.where(
                LegacyNotificationModel.created_at
                >= self._naive(criteria.created_since)
            )
        if criteria.oldest_first:
            ordering = (
                LegacyNotificationModel.created_at.asc(),
                LegacyNotificationModel.id.asc(),
            )
        else:
            ordering = (
                LegacyNotificationModel.created_at.desc(),
                LegacyNotificationModel.id.desc(),
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
        # No failed_at column here; updated_at records the failure time.
        failed_at = values.pop("failed_at", None)
        if failed_at is not None:
            values["updated_at"] = failed_at
        statement = (
            update(LegacyNotificationModel)
            .where(LegacyNotificationModel.id == notification_id)
            .where(
                LegacyNotificationModel.status.in_(
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
        statement = delete(LegacyNotificationModel).where(
            LegacyNotificationModel.id == notification_id
        )
        with self._errors("delete"):
            async with self.session_factory() as session:
                result = await session.execute(statement)
                await session.commit()
        return result.rowcount > 0

    async def summarize(self) -> NotificationStats:
        statement = select(
            LegacyNotificationModel.event,
            LegacyNotificationModel.status,
            func.count(),
        ).group_by(LegacyNotificationModel.event, LegacyNotificationModel.status)
        with self._errors("summarize"):
            async with self.session_factory() as session:
                rows = (await session.execute(statement)).all()
        return stats_from_rows(rows)

    def _apply_entity_to_model(
        self, model: LegacyNotificationModel, record: NotificationRecord
    ) -> None:
        model.id = record.id or str(uuid4())
        model.event = record.event_type
        model.recipient_email = record.recipient_email
        model.recipient_name = record.recipient_name
        model.subject = record.subject
        model.content = record.content or ""
        model.channels = list(record.channels or ["email"])
        model.status = record.status.value
        model.priority = record.priority.value
        model.error_message = record.error_message
        model.sent_at = self._naive(record.sent_at)
        model.scheduled_at = self._naive(record.scheduled_for)
        model.created_at = self._naive(record.created_at or now_in_app_timezone())
        model.updated_at = self._naive(record.failed_at) or model.created_at
        model.metadata_ = dict(record.metadata or {})
        model.category = record.category
        model.platform_module = record.platform_module
        model.action_url = record.action_url

    @staticmethod
    def _to_entity(model: LegacyNotificationModel) -> NotificationRecord:
        status = parse_status(model.status)
        updated_at = ensure_app_timezone(model.updated_at)
        return NotificationRecord(
            id=model.id,
            event_type=model.event,
            recipient_email=model.recipient_email,
            recipient_name=model.recipient_name,
            subject=model.subject,
            content=model.content or "",
            channels=list(model.channels or ["email"]),
            status=status,
            priority=parse_priority(model.priority),
            error_message=model.error_message,
            sent_at=ensure_app_timezone(model.sent_at),
            failed_at=updated_at if status is NotificationStatus.FAILED else None,
            scheduled_for=ensure_app_timezone(model.scheduled_at),
            created_at=ensure_app_timezone(model.created_at),
            updated_at=updated_at,
            metadata=dict(model.metadata_ or {}),
            category=model.category,
            platform_module=model.platform_module,
            action_url=model.action_url,
            source="legacy",
        )


__all__ = ["LegacyNotificationAdapter"]
