"""Unit tests for the in-memory port stubs."""

from __future__ import annotations

import asyncio

import pytest

from pushwatch.application.ports.entity_event_source import PropertyKind
from pushwatch.domain.models import EntityRef
from pushwatch.infrastructure.stubs import (
    EntityEventSourceStub,
    ManualTimerScheduler,
    NotificationDeliveryStub,
    TargetDirectoryStub,
)


class TestManualTimerScheduler:
    """Tests for the manually advanced scheduler."""

    def test_fires_in_deadline_order(self) -> None:
        scheduler = ManualTimerScheduler()
        fired: list[str] = []
        scheduler.call_later(3, fired.append, "late")
        scheduler.call_later(1, fired.append, "early")

        assert scheduler.advance(5) == 2
        assert fired == ["early", "late"]
        assert scheduler.now == 5

    def test_cancelled_timers_never_fire(self) -> None:
        scheduler = ManualTimerScheduler()
        fired: list[int] = []
        handle = scheduler.call_later(1, fired.append, 1)
        handle.cancel()

        assert scheduler.advance(2) == 0
        assert scheduler.pending_count == 0

    def test_timers_scheduled_while_firing(self) -> None:
        scheduler = ManualTimerScheduler()
        fired: list[float] = []

        def chain() -> None:
            fired.append(scheduler.now)
            scheduler.call_later(1, lambda: fired.append(scheduler.now))

        scheduler.call_later(1, chain)

        assert scheduler.advance(5) == 2
        assert fired == [1, 2]


class TestEntityEventSourceStub:
    """Tests for the event source stub."""

    def test_emit_reaches_matching_listeners(self) -> None:
        source = EntityEventSourceStub(names={7: "gina"})
        received: list[tuple] = []
        source.add_listener(7, PropertyKind.RANK, lambda *args: received.append(args))

        source.emit(7, PropertyKind.RANK, 3, 2)
        source.emit(7, PropertyKind.TOPIC, "a", "b")
        source.emit(8, PropertyKind.RANK, 3, 2)

        assert received == [(EntityRef(7, "gina"), 3, 2)]

    def test_records_queries(self) -> None:
        source = EntityEventSourceStub()

        source.query_entity(7)

        assert source.queried == [7]


class TestNotificationDeliveryStub:
    """Tests for the delivery stub."""

    @pytest.mark.asyncio
    async def test_records_and_clears(self) -> None:
        delivery = NotificationDeliveryStub()

        await delivery.deliver(["a"], "title", "body")

        assert delivery.delivered[0].targets == ["a"]
        delivery.clear()
        assert delivery.delivered == []

    @pytest.mark.asyncio
    async def test_configured_failure_is_raised(self) -> None:
        delivery = NotificationDeliveryStub(fail_with=RuntimeError("down"))

        with pytest.raises(RuntimeError, match="down"):
            await delivery.deliver(None, "t", "b")

    @pytest.mark.asyncio
    async def test_wait_for_delivery_times_out(self) -> None:
        delivery = NotificationDeliveryStub()

        with pytest.raises(asyncio.TimeoutError):
            await delivery.wait_for_delivery(timeout=0.01)


class TestTargetDirectoryStub:
    """Tests for the target directory stub."""

    @pytest.mark.asyncio
    async def test_returns_a_copy(self) -> None:
        directory = TargetDirectoryStub({"Phone": "abc"})

        listed = await directory.list_targets()
        listed["Tablet"] = "x"

        assert await directory.list_targets() == {"Phone": "abc"}
