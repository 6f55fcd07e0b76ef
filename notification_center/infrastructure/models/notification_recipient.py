"""SQLAlchemy model for admin notification recipients."""

from uuid import uuid4

from sqlalchemy import JSON, Boolean, Column, DateTime, String

from notification_center.infrastructure.database import Base
from notification_center.utils import now_in_app_naive_datetime


class NotificationRecipientModel(Base):
    """Database representation of an admin broadcast recipient."""

    __tablename__ = "notification_recipients"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    email = Column(String(320), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    department = Column(String(120), nullable=True)
    notification_categories = Column(JSON, nullable=False, default=lambda: ["all"])
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    updated_at = Column(
        DateTime(),
        nullable=False,
        default=now_in_app_naive_datetime,
        onupdate=now_in_app_naive_datetime,
    )


__all__ = ["NotificationRecipientModel"]
