"""Use cases for the admin recipient registry."""

from __future__ import annotations

from collections.abc import Sequence

from notification_center.domain.entities import ALL_CATEGORIES, AdminRecipient
from notification_center.domain.exceptions import ValidationError
from notification_center.infrastructure.email import is_valid_email
from notification_center.infrastructure.repositories import RecipientRepository


def _normalize_categories(categories: Sequence[str] | None) -> list[str]:
    cleaned: list[str] = []
    for category in categories or []:
        value = category.strip().lower()
        if value and value not in cleaned:
            cleaned.append(value)
    return cleaned or [ALL_CATEGORIES]


async def list_recipients(
    repository: RecipientRepository, *, active_only: bool = False
) -> Sequence[AdminRecipient]:
    return await repository.list(active_only=active_only)


async def save_recipient(
    repository: RecipientRepository,
    *,
    email: str,
    name: str | None = None,
    is_active: bool = True,
    department: str | None = None,
    notification_categories: Sequence[str] | None = None,
) -> AdminRecipient:
    """Create or update the recipient identified by ``email``."""

    normalized = (email or "").strip().lower()
    if not normalized:
        raise ValidationError("Email is required")
    if not is_valid_email(normalized):
        raise ValidationError("Invalid email format")

    recipient = AdminRecipient(
        id=None,
        email=normalized,
        name=name.strip() if name else None,
        is_active=is_active,
        department=department.strip() if department else None,
        notification_categories=_normalize_categories(notification_categories),
    )
    return await repository.upsert(recipient)


async def remove_recipient(
    repository: RecipientRepository, recipient_id: str, *, hard: bool = False
) -> bool:
    """Deactivate (or delete when ``hard``) a recipient. Return ``False`` if unknown."""

    if hard:
        return await repository.delete(recipient_id)
    return await repository.deactivate(recipient_id) is not None


__all__ = ["list_recipients", "remove_recipient", "save_recipient"]
