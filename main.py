from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from notification_center.application.container import build_services
from notification_center.config import Settings, get_settings
from notification_center.infrastructure.email import EmailTransport
from notification_center.interfaces.api.errors import register_exception_handlers
from notification_center.interfaces.api.routes import register_routes
from notification_center.logging_config import configure_logging


def create_app(
    settings: Settings | None = None,
    *,
    transport: EmailTransport | None = None,
) -> FastAPI:
    """Create and configure the notification service application."""

    settings = settings or get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Build stores and transport on startup and release them on shutdown."""

        services = await build_services(settings, transport=transport)
        app.state.services = services
        try:
            yield
        finally:
            await services.aclose()
            app.state.services = None

    app = FastAPI(title="Notification Center", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health", tags=["health"])
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    register_exception_handlers(app)
    register_routes(app)
    return app


app = create_app()
