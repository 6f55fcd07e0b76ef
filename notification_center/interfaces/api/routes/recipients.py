"""Endpoints for managing admin notification recipients."""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from notification_center.application.container import NotificationServices
from notification_center.application.use_cases.recipients import (
    list_recipients as list_recipients_uc,
    remove_recipient as remove_recipient_uc,
    save_recipient as save_recipient_uc,
)
from notification_center.interfaces.api.dependencies import get_services
from notification_center.interfaces.api.schemas import RecipientCreate, RecipientRead

router = APIRouter(prefix="/recipients", tags=["recipients"])


@router.get("", response_model=list[RecipientRead])
async def list_recipients(
    active_only: bool = False,
    services: NotificationServices = Depends(get_services),
) -> list[RecipientRead]:
    recipients = await list_recipients_uc(services.recipients, active_only=active_only)
    return [RecipientRead.model_validate(recipient) for recipient in recipients]


@router.post("", response_model=RecipientRead, status_code=status.HTTP_201_CREATED)
async def save_recipient(
    payload: RecipientCreate,
    services: NotificationServices = Depends(get_services),
) -> RecipientRead:
    """Create a recipient or update the one that already uses the email."""

    recipient = await save_recipient_uc(
        services.recipients,
        email=payload.email,
        name=payload.name,
        is_active=payload.is_active,
        department=payload.department,
        notification_categories=payload.notification_categories,
    )
    return RecipientRead.model_validate(recipient)


@router.delete("", status_code=status.HTTP_200_OK)
async def remove_recipient(
    recipient_id: str = Query(..., alias="id"),
    hard: bool = False,
    services: NotificationServices = Depends(get_services),
) -> dict[str, bool]:
    """Deactivate a recipient, or delete it when ``hard`` is set."""

    if not await remove_recipient_uc(services.recipients, recipient_id, hard=hard):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Recipient not found"
        )
    return {"success": True}
