"""Admin recipient schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class RecipientCreate(BaseModel):
    email: EmailStr
    name: str | None = Field(default=None, max_length=255)
    is_active: bool = True
    department: str | None = Field(default=None, max_length=120)
    notification_categories: list[str] = Field(default_factory=lambda: ["all"])


class RecipientRead(BaseModel):
    id: str
    email: EmailStr
    name: str | None
    is_active: bool
    department: str | None
    notification_categories: list[str]
    created_at: datetime | None
    updated_at: datetime | None

    model_config = ConfigDict(from_attributes=True)
