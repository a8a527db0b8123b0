"""Application services - Use case orchestration.

This module contains the services that turn raw entity property changes
into batched notifications.

Available services:
- EntityChangeBuffer: Per-entity pending changes with trailing-edge debounce
- NotificationComposer: Renders a drained batch and resolves its targets
- AggregationRouter: Wires event source, buffers, composer and delivery
"""

from pushwatch.application.services.aggregation_router import AggregationRouter
from pushwatch.application.services.change_buffer import EntityChangeBuffer
from pushwatch.application.services.entity_subscription import EntitySubscription
from pushwatch.application.services.notification_composer import (
    Notification,
    NotificationComposer,
    humanize_duration,
)

__all__: list[str] = [
    "AggregationRouter",
    "EntityChangeBuffer",
    "EntitySubscription",
    "Notification",
    "NotificationComposer",
    "humanize_duration",
]
