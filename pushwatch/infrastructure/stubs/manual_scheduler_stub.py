"""Manually advanced timer scheduler.

Deterministic replacement for the event loop's call_later in tests:
timers fire only when advance() moves the fake clock past their deadline.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any


@dataclass
class ManualTimerHandle:
    """A scheduled callback on the manual scheduler."""

    deadline: float
    callback: Callable[..., Any]
    args: tuple[Any, ...] = field(default_factory=tuple)
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualTimerScheduler:
    """TimerScheduler whose clock only moves when advance() is called."""

    def __init__(self) -> None:
        self._now = 0.0
        self._handles: list[ManualTimerHandle] = []

    @property
    def now(self) -> float:
        return self._now

    @property
    def pending_count(self) -> int:
        return sum(1 for handle in self._handles if not handle.cancelled)

    def call_later(
        self, delay: float, callback: Callable[..., Any], *args: Any
    ) -> ManualTimerHandle:
        handle = ManualTimerHandle(deadline=self._now + delay, callback=callback, args=args)
        self._handles.append(handle)
        return handle

    def advance(self, seconds: float) -> int:
        """Move the clock forward and fire every timer that came due.

        Timers fire in deadline order. Timers scheduled by a firing callback
        fire in the same call if they come due within the window.

        Returns:
            Number of callbacks fired.
        """
        target = self._now + seconds
        fired = 0
        while True:
            due = [h for h in self._handles if not h.cancelled and h.deadline <= target]
            if not due:
                break
            handle = min(due, key=lambda h: h.deadline)
            self._handles.remove(handle)
            self._now = handle.deadline
            handle.callback(*handle.args)
            fired += 1
        self._now = target
        self._handles = [h for h in self._handles if not h.cancelled]
        return fired
