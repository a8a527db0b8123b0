"""Domain value types for pushwatch."""

from pushwatch.domain.models.change_record import ChangeProperty, ChangeRecord, ChangeValue
from pushwatch.domain.models.entity import EntityRef
from pushwatch.domain.models.event_kind import EventKind
from pushwatch.domain.models.target import ALL_TARGETS, is_all_targets
from pushwatch.domain.models.video_state import VideoState, is_offline, video_state_label

__all__: list[str] = [
    "ChangeProperty",
    "ChangeRecord",
    "ChangeValue",
    "ALL_TARGETS",
    "EntityRef",
    "EventKind",
    "VideoState",
    "is_offline",
    "is_all_targets",
    "video_state_label",
]
