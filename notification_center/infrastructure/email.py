"""Transport-neutral email primitives."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Protocol

from bs4 import BeautifulSoup

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
TEXT_PREVIEW_LENGTH = 500

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class OutboundEmail:
    to: str
    subject: str
    html: str
    to_name: str | None = None


class EmailTransport(Protocol):
    """Delivery backend used by the dispatcher."""

    def ensure_configured(self) -> None:
        """Raise ``ConfigurationError`` when the transport cannot send."""

    async def send(self, message: OutboundEmail) -> None:
        """Deliver ``message`` or raise ``TransportError``."""

    async def aclose(self) -> None:
        """Release network resources."""


def is_valid_email(value: str | None) -> bool:
    return bool(value) and EMAIL_PATTERN.match(value.strip()) is not None


def html_to_text(markup: str, *, limit: int = TEXT_PREVIEW_LENGTH) -> str:
    """Return a plain-text preview of ``markup`` for the text/plain part."""

    soup = BeautifulSoup(markup, "html.parser")
    for element in soup(["style", "script"]):
        element.decompose()
    text = soup.get_text(separator=" ", strip=True)
    text = _WHITESPACE.sub(" ", text).strip()
    return f"{text[:limit]}…"


__all__ = [
    "EMAIL_PATTERN",
    "EmailTransport",
    "OutboundEmail",
    "html_to_text",
    "is_valid_email",
]
