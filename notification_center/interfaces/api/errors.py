"""Translate domain errors into JSON error responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from notification_center.domain.exceptions import (
    ConfigurationError,
    InvalidStatusTransitionError,
    NotificationError,
    NotificationNotFoundError,
    PersistenceError,
    ThrottleError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: tuple[tuple[type[NotificationError], int], ...] = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (ConfigurationError, status.HTTP_400_BAD_REQUEST),
    (NotificationNotFoundError, status.HTTP_404_NOT_FOUND),
    (InvalidStatusTransitionError, status.HTTP_409_CONFLICT),
    (PersistenceError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


async def _throttle_error_handler(request: Request, exc: ThrottleError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={
            "error": str(exc),
            "canBypass": exc.can_bypass,
            "lastSentAt": exc.last_sent_at.isoformat() if exc.last_sent_at else None,
        },
    )


async def _notification_error_handler(
    request: Request, exc: NotificationError
) -> JSONResponse:
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    for error_type, mapped in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            status_code = mapped
            break
    if status_code >= 500:
        logger.error("Request to %s failed: %s", request.url.path, exc)
    return JSONResponse(status_code=status_code, content={"error": str(exc)})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ThrottleError, _throttle_error_handler)
    app.add_exception_handler(NotificationError, _notification_error_handler)


__all__ = ["register_exception_handlers"]
