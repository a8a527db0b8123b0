"""Application ports - Abstract interfaces for infrastructure adapters.

This module defines the contracts that infrastructure adapters must implement.
Ports enable dependency inversion and make the application layer testable.

Available ports:
- EntityEventSourceProtocol: Real-time entity property changes
- NotificationDeliveryProtocol: Push delivery of rendered notifications
- TargetDirectoryProtocol: Target name to identifier resolution
- TimerScheduler: Delayed callbacks for debounced flushes
"""

from pushwatch.application.ports.entity_event_source import (
    EntityEventSourceProtocol,
    PropertyCallback,
    PropertyKind,
)
from pushwatch.application.ports.notification_delivery import NotificationDeliveryProtocol
from pushwatch.application.ports.target_directory import TargetDirectoryProtocol
from pushwatch.application.ports.timer_scheduler import TimerHandle, TimerScheduler

__all__: list[str] = [
    "EntityEventSourceProtocol",
    "NotificationDeliveryProtocol",
    "PropertyCallback",
    "PropertyKind",
    "TargetDirectoryProtocol",
    "TimerHandle",
    "TimerScheduler",
]
