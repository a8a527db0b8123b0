"""Timer scheduler port.

Minimal subset of the asyncio event loop used by the change buffers to
schedule debounced flushes. asyncio.AbstractEventLoop satisfies it, and
tests substitute a manually advanced scheduler.
"""

from collections.abc import Callable
from typing import Any, Protocol


class TimerHandle(Protocol):
    """A pending timer that can be cancelled."""

    def cancel(self) -> None:
        """Cancel the timer; a cancelled timer never fires."""
        ...


class TimerScheduler(Protocol):
    """Schedules callbacks after a delay."""

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        """Schedule callback(*args) after delay seconds.

        Returns:
            Handle that cancels the scheduled call.
        """
        ...
