"""Unit tests for router bootstrap wiring."""

from __future__ import annotations

import pytest

from pushwatch.application.ports.entity_event_source import PropertyKind
from pushwatch.bootstrap.router import build_router, get_join_client
from pushwatch.config.push_settings import PushSettings
from pushwatch.config.watch_config import parse_watch_config
from pushwatch.domain.errors import SettingsError, WatchConfigurationError
from pushwatch.domain.models import ChangeProperty
from pushwatch.infrastructure.adapters.join.join_client import JoinClient
from pushwatch.infrastructure.stubs import (
    EntityEventSourceStub,
    ManualTimerScheduler,
    NotificationDeliveryStub,
    TargetDirectoryStub,
)


class TestGetJoinClient:
    """Tests for Join client construction from settings."""

    def test_requires_api_key(self) -> None:
        with pytest.raises(SettingsError, match="JOIN_API_KEY"):
            get_join_client(PushSettings())

    def test_builds_client(self) -> None:
        assert isinstance(get_join_client(PushSettings(join_api_key="k")), JoinClient)


class TestBuildRouter:
    """Tests for build_router."""

    @pytest.mark.asyncio
    async def test_resolves_and_configures(
        self,
        source: EntityEventSourceStub,
        delivery: NotificationDeliveryStub,
        directory: TargetDirectoryStub,
        scheduler: ManualTimerScheduler,
    ) -> None:
        config = parse_watch_config({"Tablet": {3111899: ["Rank"]}})

        router = await build_router(
            PushSettings(), config, source, delivery, directory, scheduler=scheduler
        )

        assert router.tracked_entity_ids == [3111899]
        assert source.listener_count(3111899, PropertyKind.RANK) == 1
        subscription = router.get_subscription(3111899)
        assert subscription is not None
        assert subscription.target_for == {ChangeProperty.RANK: "dev-tablet"}

    @pytest.mark.asyncio
    async def test_unknown_target_registers_nothing(
        self,
        source: EntityEventSourceStub,
        delivery: NotificationDeliveryStub,
        directory: TargetDirectoryStub,
    ) -> None:
        config = parse_watch_config({"Laptop": {3111899: ["Rank"]}})

        with pytest.raises(WatchConfigurationError, match="Laptop"):
            await build_router(PushSettings(), config, source, delivery, directory)

        assert source.listener_count(3111899, PropertyKind.RANK) == 0

    @pytest.mark.asyncio
    async def test_settings_reach_the_composer_and_buffers(
        self,
        source: EntityEventSourceStub,
        delivery: NotificationDeliveryStub,
        directory: TargetDirectoryStub,
        scheduler: ManualTimerScheduler,
    ) -> None:
        settings = PushSettings(
            debounce_seconds=1.0, rank_ceiling=250, title_template="{entity_id}"
        )
        config = parse_watch_config({"Phone": {3111899: ["Rank"]}})
        await build_router(settings, config, source, delivery, directory, scheduler=scheduler)

        source.emit(3111899, PropertyKind.RANK, 10, 0)
        scheduler.advance(1.0)
        await delivery.wait_for_delivery()

        notification = delivery.delivered[0]
        assert notification.title == "3111899"
        assert notification.body.endswith("Has moved from rank 10 to rank over 250.\n")
