"""Entity change buffer with trailing-edge debounce.

Accumulates change records for one entity and collapses bursts of changes
into a single flush. Every enqueue restarts the debounce timer, so the
buffer flushes only once the entity has been quiet for a full interval.

A steady stream of changes postpones the flush indefinitely. There is no
upper bound on postponements; the interval is the only tuning knob.

Developer Golden Rules:
1. FIFO - records are drained in the order they were enqueued
2. One timer per buffer - never a shared or global debounce
3. An empty flush is a no-op
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable

import structlog

from pushwatch.application.ports.timer_scheduler import TimerHandle, TimerScheduler
from pushwatch.config.push_settings import DEFAULT_DEBOUNCE_SECONDS
from pushwatch.domain.models.change_record import ChangeRecord

log = structlog.get_logger()

FlushHandler = Callable[[list[ChangeRecord]], None]


class EntityChangeBuffer:
    """Ordered queue of pending changes for one entity plus its debounce timer.

    Attributes:
        _entity_id: Entity this buffer belongs to (log context).
        _on_flush: Receives the drained records, oldest first.
        _debounce_seconds: Quiet period before flushing.
        _scheduler: Timer source; the running event loop when not injected.
        _pending: Queued records, oldest first.
        _timer: Handle of the pending flush, None when none is scheduled.
    """

    def __init__(
        self,
        entity_id: int,
        on_flush: FlushHandler,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        scheduler: TimerScheduler | None = None,
    ) -> None:
        """Initialize an empty buffer.

        Args:
            entity_id: Entity this buffer belongs to.
            on_flush: Called with the drained records when the timer fires.
            debounce_seconds: Quiet period before flushing.
            scheduler: Timer source. Defaults to the running asyncio loop.
        """
        if debounce_seconds <= 0:
            raise ValueError(f"debounce_seconds must be positive, got {debounce_seconds}")
        self._entity_id = entity_id
        self._on_flush = on_flush
        self._debounce_seconds = debounce_seconds
        self._scheduler = scheduler
        self._pending: list[ChangeRecord] = []
        self._timer: TimerHandle | None = None

    @property
    def flush_scheduled(self) -> bool:
        """True while a debounce timer is pending."""
        return self._timer is not None

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    @property
    def pending_changes(self) -> list[ChangeRecord]:
        """Snapshot of the queued records, oldest first."""
        return list(self._pending)

    @property
    def debounce_seconds(self) -> float:
        return self._debounce_seconds

    def enqueue(self, record: ChangeRecord) -> None:
        """Queue a record and (re)start the debounce timer.

        Args:
            record: The change to queue.
        """
        self._pending.append(record)
        rescheduled = self._timer is not None
        if self._timer is not None:
            self._timer.cancel()
        self._timer = self._get_scheduler().call_later(self._debounce_seconds, self._on_timer)

        log.debug(
            "flush_rescheduled" if rescheduled else "change_enqueued",
            entity_id=self._entity_id,
            property=record.property.value,
            pending=len(self._pending),
        )

    def flush(self) -> list[ChangeRecord]:
        """Drain every queued record and hand them to the flush handler.

        Returns:
            The drained records, oldest first. Empty if nothing was queued.
        """
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

        if not self._pending:
            log.debug("flush_skipped_empty", entity_id=self._entity_id)
            return []

        drained = self._pending
        self._pending = []
        log.info("buffer_flushed", entity_id=self._entity_id, changes=len(drained))
        self._on_flush(drained)
        return drained

    def cancel(self) -> None:
        """Cancel a pending flush without delivering (process teardown)."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_timer(self) -> None:
        self._timer = None
        self.flush()

    def _get_scheduler(self) -> TimerScheduler:
        if self._scheduler is None:
            return asyncio.get_running_loop()
        return self._scheduler
