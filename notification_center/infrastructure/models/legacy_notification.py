"""SQLAlchemy model for the legacy ``notifications`` table."""

from uuid import uuid4

from sqlalchemy import JSON, Column, DateTime, String, Text

from notification_center.infrastructure.database import Base
from notification_center.utils import now_in_app_naive_datetime


def _new_id() -> str:
    return str(uuid4())


class LegacyNotificationModel(Base):
    """Original multi-channel notification schema.

    Rows are still read, transitioned and deleted, but new records are never
    written here.
    """

    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=_new_id)
    event = Column(String(80), nullable=False, index=True)
    recipient_email = Column(String(320), nullable=False, index=True)
    recipient_name = Column(String(255), nullable=True)
    subject = Column(String(255), nullable=False)
    content = Column(Text, nullable=False, default="")
    channels = Column(JSON, nullable=False, default=lambda: ["email"])
    status = Column(String(20), nullable=False, default="pending", index=True)
    priority = Column(String(20), nullable=False, default="medium")
    error_message = Column(Text, nullable=True)
    sent_at = Column(DateTime(), nullable=True)
    scheduled_at = Column(DateTime(), nullable=True)
    created_at = Column(
        DateTime(), nullable=False, default=now_in_app_naive_datetime, index=True
    )
    updated_at = Column(
        DateTime(),
        nullable=False,
        default=now_in_app_naive_datetime,
        onupdate=now_in_app_naive_datetime,
    )
    metadata_ = Column("metadata", JSON, nullable=False, default=dict)
    category = Column(String(80), nullable=True, index=True)
    platform_module = Column(String(80), nullable=True, index=True)
    action_url = Column(String(2048), nullable=True)


__all__ = ["LegacyNotificationModel"]
