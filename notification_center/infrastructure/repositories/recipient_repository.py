"""Persistence helpers for admin notification recipients."""

from __future__ import annotations

from collections.abc import Sequence
from uuid import uuid4

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from notification_center.domain.entities import ALL_CATEGORIES, AdminRecipient
from notification_center.domain.exceptions import PersistenceError
from notification_center.infrastructure.models import NotificationRecipientModel
from notification_center.utils import ensure_app_timezone, now_in_app_naive_datetime


class RecipientRepository:
    """Provide CRUD operations for :class:`AdminRecipient` objects."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    async def list(self, *, active_only: bool = False) -> Sequence[AdminRecipient]:
        statement = select(NotificationRecipientModel).order_by(
            NotificationRecipientModel.created_at.asc(), NotificationRecipientModel.email
        )
        if active_only:
            statement = statement.where(NotificationRecipientModel.is_active.is_(True))
        try:
            async with self.session_factory() as session:
                models = (await session.scalars(statement)).all()
        except SQLAlchemyError as exc:
            msg = f"Failed to load notification recipients: {exc}"
            raise PersistenceError(msg) from exc
        return [self._to_entity(model) for model in models]

    async def list_active(self) -> Sequence[AdminRecipient]:
        return await self.list(active_only=True)

    async def get(self, recipient_id: str) -> AdminRecipient | None:
        try:
            async with self.session_factory() as session:
                model = await session.get(NotificationRecipientModel, recipient_id)
        except SQLAlchemyError as exc:
            msg = f"Failed to load notification recipient {recipient_id}: {exc}"
            raise PersistenceError(msg) from exc
        return self._to_entity(model) if model is not None else None

    async def upsert(self, recipient: AdminRecipient) -> AdminRecipient:
        """Insert ``recipient`` or update the row that already uses its email."""

        email = recipient.email.strip().lower()
        try:
            async with self.session_factory() as session:
                model = (
                    await session.scalars(
                        select(NotificationRecipientModel).where(
                            func.lower(NotificationRecipientModel.email) == email
                        )
                    )
                ).first()
                if model is None:
                    model = NotificationRecipientModel(
                        id=recipient.id or str(uuid4()),
                        created_at=now_in_app_naive_datetime(),
                    )
                    session.add(model)
                model.email = email
                model.name = recipient.name
                model.is_active = recipient.is_active
                model.department = recipient.department
                model.notification_categories = list(
                    recipient.notification_categories or [ALL_CATEGORIES]
                )
                model.updated_at = now_in_app_naive_datetime()
                await session.commit()
        except SQLAlchemyError as exc:
            msg = f"Failed to save notification recipient {email}: {exc}"
            raise PersistenceError(msg) from exc
        return self._to_entity(model)

    async def deactivate(self, recipient_id: str) -> AdminRecipient | None:
        try:
            async with self.session_factory() as session:
                model = await session.get(NotificationRecipientModel, recipient_id)
                if model is None:
                    return None
                model.is_active = False
                model.updated_at = now_in_app_naive_datetime()
                await session.commit()
        except SQLAlchemyError as exc:
            msg = f"Failed to deactivate notification recipient {recipient_id}: {exc}"
            raise PersistenceError(msg) from exc
        return self._to_entity(model)

    async def delete(self, recipient_id: str) -> bool:
        try:
            async with self.session_factory() as session:
                result = await session.execute(
                    delete(NotificationRecipientModel).where(
                        NotificationRecipientModel.id == recipient_id
                    )
                )
                await session.commit()
        except SQLAlchemyError as exc:
            msg = f"Failed to delete notification recipient {recipient_id}: {exc}"
            raise PersistenceError(msg) from exc
        return result.rowcount > 0

    @staticmethod
    def _to_entity(model: NotificationRecipientModel) -> AdminRecipient:
        return AdminRecipient(
            id=model.id,
            email=model.email,
            name=model.name,
            is_active=bool(model.is_active),
            department=model.department,
            notification_categories=list(
                model.notification_categories or [ALL_CATEGORIES]
            ),
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
        )


__all__ = ["RecipientRepository"]
