"""SQLAlchemy model for the preferred ``email_notifications`` table."""

from uuid import uuid4

from sqlalchemy import JSON, Column, DateTime, String, Text

from notification_center.infrastructure.database import Base
from notification_center.utils import now_in_app_naive_datetime


def _new_id() -> str:
    return str(uuid4())


class EmailNotificationModel(Base):
    """Current notification schema keyed by template type."""

    __tablename__ = "email_notifications"

    id = Column(String(36), primary_key=True, default=_new_id)
    template_type = Column(String(80), nullable=False, index=True)
    recipient_email = Column(String(320), nullable=False, index=True)
    subject = Column(String(255), nullable=False)
    status = Column(String(20), nullable=False, default="pending", index=True)
    priority = Column(String(20), nullable=False, default="medium")
    sent_at = Column(DateTime(), nullable=True)
    scheduled_for = Column(DateTime(), nullable=True)
    created_at = Column(
        DateTime(), nullable=False, default=now_in_app_naive_datetime, index=True
    )
    updated_at = Column(
        DateTime(),
        nullable=False,
        default=now_in_app_naive_datetime,
        onupdate=now_in_app_naive_datetime,
    )
    error_message = Column(Text, nullable=True)
    failed_at = Column(DateTime(), nullable=True)
    template_data = Column(JSON, nullable=False, default=dict)


__all__ = ["EmailNotificationModel"]
