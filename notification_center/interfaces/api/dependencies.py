"""FastAPI dependency utilities."""

from fastapi import HTTPException, Request, status

from notification_center.application.container import NotificationServices


def get_services(request: Request) -> NotificationServices:
    """Return the services created by the application lifespan."""

    services = getattr(request.app.state, "services", None)
    if services is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Notification services are not ready",
        )
    return services
