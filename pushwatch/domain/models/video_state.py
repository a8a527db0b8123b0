"""Video state codes reported by the real-time client."""

from __future__ import annotations

from enum import IntEnum


class VideoState(IntEnum):
    """Well-known broadcast video states.

    OFFLINE is the offline sentinel: the online/offline edge is derived from
    transitions into and out of it.
    """

    FREE_CHAT = 0
    AWAY = 2
    PRIVATE = 12
    GROUP_SHOW = 13
    CLUB_SHOW = 14
    ONLINE = 90
    OFFLINE = 127


_LABELS: dict[int, str] = {
    VideoState.FREE_CHAT: "FreeChat",
    VideoState.AWAY: "Away",
    VideoState.PRIVATE: "Private",
    VideoState.GROUP_SHOW: "GroupShow",
    VideoState.CLUB_SHOW: "ClubShow",
    VideoState.ONLINE: "Online",
    VideoState.OFFLINE: "Offline",
}


def video_state_label(value: object) -> str:
    """Human-readable name for a video state code.

    Unknown codes render as their raw value.
    """
    if isinstance(value, int) and value in _LABELS:
        return _LABELS[value]
    return str(value)


def is_offline(value: object) -> bool:
    """Whether a video state value is the offline sentinel."""
    return value == VideoState.OFFLINE
