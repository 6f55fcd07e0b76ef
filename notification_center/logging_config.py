"""Central logging configuration for the notification service."""

from __future__ import annotations

from logging.config import dictConfig

_configured = False


def _default_config(level: str) -> dict:
    fmt = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": fmt,
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "level": level,
            },
        },
        "root": {
            "level": level,
            "handlers": ["console"],
        },
        "loggers": {
            "httpx": {"level": "WARNING"},
            "sqlalchemy.engine": {"level": "WARNING"},
        },
    }


def configure_logging(level: str = "INFO") -> None:
    """Configure application logging once per process."""

    global _configured
    if _configured:
        return

    dictConfig(_default_config(level.upper()))
    _configured = True


__all__ = ["configure_logging"]
