"""Event kinds accepted in the watch configuration.

A watch configuration lists, per target and entity, which kinds of events
should be pushed. Each concrete kind maps to exactly one ChangeProperty;
ALL expands to every concrete kind.
"""

from __future__ import annotations

from enum import Enum

from pushwatch.domain.models.change_record import ChangeProperty


class EventKind(str, Enum):
    """Configuration literal for a family of pushed events.

    Values:
        ALL: Every event kind below.
        ON_OFF: Only whether the entity is generally on or off.
        VIDEO_STATES: Every video state transition.
        RANK: Rank changes.
        TOPIC: Topic changes.
        COUNTDOWN_START: A topic countdown was detected.
        COUNTDOWN_COMPLETE: A detected topic countdown concluded.
    """

    ALL = "All"
    ON_OFF = "OnOff"
    VIDEO_STATES = "VideoStates"
    RANK = "Rank"
    TOPIC = "Topic"
    COUNTDOWN_START = "CountdownStart"
    COUNTDOWN_COMPLETE = "CountdownComplete"

    def properties(self) -> tuple[ChangeProperty, ...]:
        """Concrete change properties this kind routes.

        Returns:
            One property for a concrete kind, every property for ALL.
        """
        if self is EventKind.ALL:
            return tuple(_KIND_TO_PROPERTY.values())
        return (_KIND_TO_PROPERTY[self],)


_KIND_TO_PROPERTY: dict[EventKind, ChangeProperty] = {
    EventKind.ON_OFF: ChangeProperty.ONLINE_STATE,
    EventKind.VIDEO_STATES: ChangeProperty.VIDEO_STATE,
    EventKind.RANK: ChangeProperty.RANK,
    EventKind.TOPIC: ChangeProperty.TOPIC,
    EventKind.COUNTDOWN_START: ChangeProperty.COUNTDOWN_STARTED,
    EventKind.COUNTDOWN_COMPLETE: ChangeProperty.COUNTDOWN_COMPLETED,
}
