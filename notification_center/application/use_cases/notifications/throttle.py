"""Per-recipient limit on manually sent emails."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from datetime import datetime, timedelta

import anyio

from notification_center.domain.entities import NotificationFilter, ThrottleDecision
from notification_center.domain.exceptions import ThrottleError
from notification_center.infrastructure.repositories import NotificationStore
from notification_center.utils import now_in_app_timezone

logger = logging.getLogger(__name__)


class ThrottlePolicy:
    """Allow one email per recipient inside a rolling window.

    Every stored record counts, whatever its event type or outcome, so a
    bypassed send becomes the new anchor of the window. Checks made through
    :meth:`reserve` are serialized per recipient within this process.
    """

    def __init__(
        self,
        store: NotificationStore,
        *,
        window: timedelta = timedelta(days=7),
        clock: Callable[[], datetime] = now_in_app_timezone,
    ) -> None:
        self.store = store
        self.window = window
        self.clock = clock
        self._locks: dict[str, anyio.Lock] = {}
        self._waiters: dict[str, int] = {}

    async def check(self, recipient_email: str) -> ThrottleDecision:
        since = self.clock() - self.window
        recent = await self.store.list(
            NotificationFilter(
                recipient_email=recipient_email.strip().lower(),
                created_since=since,
                limit=1,
            )
        )
        if not recent:
            return ThrottleDecision(allowed=True)
        return ThrottleDecision(
            allowed=False, last_sent_at=recent[0].created_at, can_bypass=True
        )

    async def enforce(self, recipient_email: str) -> ThrottleDecision:
        """Return the decision for ``recipient_email`` or raise :class:`ThrottleError`."""

        decision = await self.check(recipient_email)
        if not decision.allowed:
            logger.info(
                "Throttled email to %s; last email at %s",
                recipient_email,
                decision.last_sent_at,
            )
            raise ThrottleError(
                decision.last_sent_at,
                can_bypass=decision.can_bypass,
                window_days=self.window.days,
            )
        return decision

    @asynccontextmanager
    async def reserve(
        self, recipient_email: str, *, bypass: bool = False
    ) -> AsyncIterator[ThrottleDecision]:
        """Hold the recipient's slot while the caller stores its record.

        Raises :class:`ThrottleError` on entry unless ``bypass`` is set.
        """

        key = recipient_email.strip().lower()
        lock = self._locks.setdefault(key, anyio.Lock())
        self._waiters[key] = self._waiters.get(key, 0) + 1
        try:
            async with lock:
                if bypass:
                    logger.info("Throttle bypassed for %s", key)
                    yield ThrottleDecision(allowed=True)
                else:
                    yield await self.enforce(key)
        finally:
            self._waiters[key] -= 1
            if not self._waiters[key]:
                del self._waiters[key]
                del self._locks[key]


__all__ = ["ThrottlePolicy"]
