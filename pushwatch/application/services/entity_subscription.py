"""Per-entity subscription state.

One EntitySubscription exists per distinct entity referenced in the watch
configuration. It is created once by the router, lives for the process
lifetime and is only mutated by router callbacks and buffer flushes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from pushwatch.application.services.change_buffer import EntityChangeBuffer
from pushwatch.domain.models.change_record import ChangeProperty, ChangeRecord
from pushwatch.domain.models.entity import EntityRef
from pushwatch.domain.models.target import ALL_TARGETS
from pushwatch.domain.services.countdown_inference import CountdownInferenceEngine

__all__ = ["ALL_TARGETS", "EntitySubscription"]


@dataclass
class EntitySubscription:
    """Everything tracked for one entity.

    Attributes:
        entity: Latest known reference (name may be learned after creation).
        buffer: Pending changes and the debounce timer.
        countdown: Topic countdown inference state.
        target_for: Property to target identifier or ALL_TARGETS.
            Last configuration write per property wins.
        last_video_state_change: Most recent VideoState record, kept across
            flushes for elapsed-time phrases.
        last_online_state_change: Most recent OnlineState record, likewise.
        last_observed_at: Latest observation time, keeps timestamps
            non-decreasing per entity.
    """

    entity: EntityRef
    buffer: EntityChangeBuffer
    countdown: CountdownInferenceEngine
    target_for: dict[ChangeProperty, str] = field(default_factory=dict)
    last_video_state_change: ChangeRecord | None = None
    last_online_state_change: ChangeRecord | None = None
    last_observed_at: datetime | None = None

    @property
    def entity_id(self) -> int:
        return self.entity.entity_id

    def subscribes_to(self, prop: ChangeProperty) -> bool:
        """Whether changes of this property are pushed for this entity."""
        return prop in self.target_for

    def stamp(self, now: datetime) -> datetime:
        """Observation time for a new record, never earlier than the last one."""
        if self.last_observed_at is not None and now < self.last_observed_at:
            now = self.last_observed_at
        self.last_observed_at = now
        return now
