"""Notification delivery stub.

In-memory stub implementation of the delivery port for tests and dry runs.
Records every delivery instead of pushing it anywhere.

Developer Golden Rules:
1. Track every delivery for verification
2. Configurable failure to exercise fire-and-forget error logging
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone

import structlog

from pushwatch.application.ports.notification_delivery import NotificationDeliveryProtocol
from pushwatch.domain.models.entity import EntityRef

log = structlog.get_logger()


@dataclass
class DeliveredNotification:
    """Record of one delivery call.

    Attributes:
        targets: Target ids, or None for every target.
        title: Notification title.
        body: Notification body.
        entity: Entity the notification was about.
        delivered_at: When the call was made.
    """

    targets: list[str] | None
    title: str
    body: str
    entity: EntityRef | None = None
    delivered_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class NotificationDeliveryStub(NotificationDeliveryProtocol):
    """Delivery port stub that records deliveries in memory."""

    def __init__(self, fail_with: Exception | None = None) -> None:
        """Initialize the stub.

        Args:
            fail_with: Exception raised by every deliver call, if set.
        """
        self._fail_with = fail_with
        self._delivered: list[DeliveredNotification] = []
        self._event = asyncio.Event()

    @property
    def delivered(self) -> list[DeliveredNotification]:
        return list(self._delivered)

    async def deliver(
        self,
        targets: list[str] | None,
        title: str,
        body: str,
        entity: EntityRef | None = None,
    ) -> None:
        """Record the notification, or raise the configured failure."""
        if self._fail_with is not None:
            raise self._fail_with
        self._delivered.append(
            DeliveredNotification(targets=targets, title=title, body=body, entity=entity)
        )
        self._event.set()
        log.debug("stub_notification_delivered", targets=targets, title=title)

    async def wait_for_delivery(self, count: int = 1, timeout: float = 1.0) -> None:
        """Wait until at least `count` notifications were delivered.

        Raises:
            TimeoutError: Fewer deliveries arrived within the timeout.
        """

        async def _wait() -> None:
            while len(self._delivered) < count:
                self._event.clear()
                await self._event.wait()

        await asyncio.wait_for(_wait(), timeout)

    def clear(self) -> None:
        """Forget recorded deliveries."""
        self._delivered.clear()
