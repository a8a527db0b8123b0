"""Change record value type.

A ChangeRecord describes one observed change for one entity. Records are
queued per entity and rendered into a single notification body when the
entity's debounce window closes.

Two shapes exist:
- Value changes (online state, video state, rank, topic) carry before/after.
- Synthetic countdown events carry a pre-formatted message only.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from pushwatch.domain.errors.invariant import ChangeRecordInvariantError

ChangeValue = int | str


class ChangeProperty(str, Enum):
    """Property tag of a change record.

    Values:
        ONLINE_STATE: Entity went on or off (collapsed from video state).
        VIDEO_STATE: Any video state transition.
        RANK: Rank movement.
        TOPIC: Topic text change.
        COUNTDOWN_STARTED: Synthetic, a topic countdown was detected.
        COUNTDOWN_COMPLETED: Synthetic, a detected countdown concluded.
    """

    ONLINE_STATE = "online_state"
    VIDEO_STATE = "video_state"
    RANK = "rank"
    TOPIC = "topic"
    COUNTDOWN_STARTED = "countdown_started"
    COUNTDOWN_COMPLETED = "countdown_completed"

    @property
    def is_synthetic(self) -> bool:
        """Whether records of this property carry a message instead of values."""
        return self in _SYNTHETIC_PROPERTIES


_SYNTHETIC_PROPERTIES = frozenset(
    {ChangeProperty.COUNTDOWN_STARTED, ChangeProperty.COUNTDOWN_COMPLETED}
)


@dataclass(frozen=True, eq=True)
class ChangeRecord:
    """One observed change, immutable after creation.

    Attributes:
        property: Which property changed.
        observed_at: When the change was observed (timezone-aware).
        before: Previous value, absent for synthetic records and for the
            first observation of a property.
        after: New value, absent for synthetic records.
        message: Pre-formatted text, present only for synthetic records.
    """

    property: ChangeProperty
    observed_at: datetime
    before: ChangeValue | None = None
    after: ChangeValue | None = None
    message: str | None = None

    def __post_init__(self) -> None:
        """Enforce that exactly one payload shape is populated."""
        if self.property.is_synthetic:
            if self.message is None:
                raise ChangeRecordInvariantError(
                    f"{self.property.value} records require a message"
                )
            if self.before is not None or self.after is not None:
                raise ChangeRecordInvariantError(
                    f"{self.property.value} records cannot carry before/after values"
                )
        elif self.message is not None:
            raise ChangeRecordInvariantError(
                f"{self.property.value} records cannot carry a message"
            )

    @classmethod
    def value_change(
        cls,
        property: ChangeProperty,
        before: ChangeValue | None,
        after: ChangeValue | None,
        observed_at: datetime,
    ) -> ChangeRecord:
        """Create a before/after change record."""
        return cls(property=property, observed_at=observed_at, before=before, after=after)

    @classmethod
    def synthetic(
        cls, property: ChangeProperty, message: str, observed_at: datetime
    ) -> ChangeRecord:
        """Create a message-only change record (countdown events)."""
        return cls(property=property, observed_at=observed_at, message=message)
