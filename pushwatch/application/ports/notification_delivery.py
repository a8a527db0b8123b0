"""Notification delivery port.

Protocol for pushing one rendered notification to a set of targets.

Developer Golden Rules:
1. targets=None means every target
2. FIRE-AND-FORGET - callers never await a result or retry
3. Delivery failures are logged by the adapter, never raised for transport errors
"""

from abc import abstractmethod
from typing import Protocol

from pushwatch.domain.models.entity import EntityRef


class NotificationDeliveryProtocol(Protocol):
    """Protocol for push notification delivery."""

    @abstractmethod
    async def deliver(
        self,
        targets: list[str] | None,
        title: str,
        body: str,
        entity: EntityRef | None = None,
    ) -> None:
        """Deliver one notification.

        Args:
            targets: Explicit target identifiers, or None for all targets.
            title: Notification title.
            body: Notification body.
            entity: Entity the notification is about (used for icons).
        """
        ...
