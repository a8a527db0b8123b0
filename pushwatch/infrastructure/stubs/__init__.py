"""In-memory stubs for every application port.

Used by the unit tests and by dry runs that should not reach real services.
"""

from pushwatch.infrastructure.stubs.entity_event_source_stub import EntityEventSourceStub
from pushwatch.infrastructure.stubs.manual_scheduler_stub import (
    ManualTimerHandle,
    ManualTimerScheduler,
)
from pushwatch.infrastructure.stubs.notification_delivery_stub import (
    DeliveredNotification,
    NotificationDeliveryStub,
)
from pushwatch.infrastructure.stubs.target_directory_stub import TargetDirectoryStub

__all__: list[str] = [
    "DeliveredNotification",
    "EntityEventSourceStub",
    "ManualTimerHandle",
    "ManualTimerScheduler",
    "NotificationDeliveryStub",
    "TargetDirectoryStub",
]
