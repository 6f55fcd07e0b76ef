"""Email delivery through the SendPulse SMTP REST API."""

from __future__ import annotations

import base64
import json
import logging
import time
from collections.abc import Callable
from typing import Any, NamedTuple

import anyio
import httpx
from cachetools import TLRUCache
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)

from notification_center.config import Settings
from notification_center.domain.exceptions import ConfigurationError, TransportError

from .email import OutboundEmail, html_to_text, is_valid_email

logger = logging.getLogger(__name__)

_TOKEN_CACHE_KEY = "sendpulse-access-token"
_DEFAULT_TOKEN_LIFETIME = 3600


class _AccessToken(NamedTuple):
    value: str
    ttl: float


def _token_expiry(_key: str, token: _AccessToken, now: float) -> float:
    return now + token.ttl


def _extract_error_details(response: httpx.Response) -> str | None:
    """Return a human readable description for a SendPulse error payload."""

    body = response.text.strip()
    if not body:
        return None
    try:
        parsed = json.loads(body)
    except json.JSONDecodeError:
        return body[:500]

    if isinstance(parsed, dict):
        for key in ("message", "error_description", "error"):
            value = parsed.get(key)
            if value:
                return str(value)
        return json.dumps(parsed)[:500]
    return str(parsed)[:500]


class SendPulseTransport:
    """Send HTML email with an OAuth client-credentials token.

    The access token is cached until ``token_refresh_ratio`` of its lifetime
    has elapsed. Concurrent senders share a single refresh.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        client: httpx.AsyncClient | None = None,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self.settings = settings
        self._client = client or httpx.AsyncClient(
            base_url=settings.sendpulse_api_base_url,
            timeout=settings.transport_timeout_seconds,
        )
        self._token_cache: TLRUCache[str, _AccessToken] = TLRUCache(
            maxsize=1, ttu=_token_expiry, timer=timer
        )
        self._token_lock = anyio.Lock()

    def ensure_configured(self) -> None:
        if not self.settings.email_enabled:
            msg = (
                "Email transport is not configured: set SENDPULSE_CLIENT_ID and "
                "SENDPULSE_CLIENT_SECRET"
            )
            raise ConfigurationError(msg)

    async def send(self, message: OutboundEmail) -> None:
        self.ensure_configured()
        if not is_valid_email(message.to):
            raise TransportError("No valid recipient emails found")

        payload = self._build_payload(message)
        response = await self._request_with_retry(
            "POST",
            "/smtp/emails",
            payload=payload,
            authorized=True,
        )
        if response.status_code == httpx.codes.UNAUTHORIZED:
            # Token revoked early; refresh once and try again.
            self._token_cache.pop(_TOKEN_CACHE_KEY, None)
            response = await self._request_with_retry(
                "POST", "/smtp/emails", payload=payload, authorized=True
            )
        if not response.is_success:
            details = _extract_error_details(response)
            logger.error(
                "SendPulse API responded with status %s: %s",
                response.status_code,
                details,
            )
            msg = f"SendPulse API error {response.status_code}: {details or response.reason_phrase}"
            raise TransportError(msg, status_code=response.status_code)
        logger.info("Email '%s' accepted for %s", message.subject, message.to)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _access_token(self) -> str:
        cached = self._token_cache.get(_TOKEN_CACHE_KEY)
        if cached is not None:
            return cached.value
        async with self._token_lock:
            cached = self._token_cache.get(_TOKEN_CACHE_KEY)
            if cached is not None:
                return cached.value
            response = await self._request_with_retry(
                "POST",
                "/oauth/access_token",
                form={
                    "grant_type": "client_credentials",
                    "client_id": self.settings.sendpulse_client_id,
                    "client_secret": self.settings.sendpulse_client_secret,
                },
            )
            if not response.is_success:
                details = _extract_error_details(response)
                logger.error(
                    "SendPulse authentication failed with status %s: %s",
                    response.status_code,
                    details,
                )
                msg = "Failed to authenticate with SendPulse API"
                raise TransportError(msg, status_code=response.status_code)

            try:
                data = response.json()
                token = data.get("access_token")
                lifetime = float(data.get("expires_in") or _DEFAULT_TOKEN_LIFETIME)
            except (ValueError, AttributeError, TypeError) as exc:
                logger.error(
                    "SendPulse returned an unreadable token response: %s",
                    response.text[:200],
                )
                msg = "SendPulse API returned an invalid token response"
                raise TransportError(msg, status_code=response.status_code) from exc
            if not token:
                raise TransportError("SendPulse API returned no access token")
            cached = _AccessToken(str(token), lifetime * self.settings.token_refresh_ratio)
            self._token_cache[_TOKEN_CACHE_KEY] = cached
            return cached.value

    async def _request_with_retry(
        self,
        method: str,
        url: str,
        *,
        payload: dict[str, Any] | None = None,
        form: dict[str, Any] | None = None,
        authorized: bool = False,
    ) -> httpx.Response:
        """Send one request, retrying network failures with backoff.

        ``payload`` is sent as JSON and ``form`` as a url-encoded body.
        """

        settings = self.settings
        retrying = AsyncRetrying(
            stop=stop_after_attempt(settings.transport_max_retries + 1),
            wait=wait_exponential(
                multiplier=settings.transport_retry_initial_delay,
                max=settings.transport_retry_max_delay,
            )
            + wait_random(0, settings.transport_retry_initial_delay * 0.1),
            retry=retry_if_exception_type(httpx.TransportError),
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    headers = {}
                    if authorized:
                        headers["Authorization"] = f"Bearer {await self._access_token()}"
                    return await self._client.request(
                        method, url, json=payload, data=form, headers=headers
                    )
        except httpx.TransportError as exc:
            logger.warning("SendPulse request to %s failed: %s", url, exc)
            msg = f"Network error talking to SendPulse: {exc}"
            raise TransportError(msg) from exc
        except httpx.HTTPError as exc:
            logger.warning("SendPulse request to %s failed: %s", url, exc)
            msg = f"SendPulse request failed: {exc}"
            raise TransportError(msg) from exc
        msg = "SendPulse request was not attempted"
        raise TransportError(msg)

    def _build_payload(self, message: OutboundEmail) -> dict[str, Any]:
        settings = self.settings
        recipient: dict[str, str] = {"email": message.to.strip()}
        if message.to_name:
            recipient["name"] = message.to_name
        return {
            "email": {
                "subject": message.subject,
                "from": {"name": settings.sender_name, "email": settings.sender_email},
                "to": [recipient],
                "html": base64.b64encode(message.html.encode("utf-8")).decode("ascii"),
                "text": html_to_text(message.html),
                "reply_to": {"email": settings.reply_to_email or settings.sender_email},
            }
        }


__all__ = ["SendPulseTransport"]
