"""Bootstrap wiring for the aggregation router.

Builds a ready-to-run router: resolves the watch configuration against the
target directory, constructs the composer from settings and registers every
listener on the event source. Any configuration problem raises before a
single listener is registered.
"""

from __future__ import annotations

import asyncio

import structlog

from pushwatch.application.ports.entity_event_source import EntityEventSourceProtocol
from pushwatch.application.ports.notification_delivery import NotificationDeliveryProtocol
from pushwatch.application.ports.target_directory import TargetDirectoryProtocol
from pushwatch.application.ports.timer_scheduler import TimerScheduler
from pushwatch.application.services.aggregation_router import AggregationRouter
from pushwatch.application.services.notification_composer import NotificationComposer
from pushwatch.bootstrap.event_loop import install_invariant_handler
from pushwatch.config.push_settings import PushSettings
from pushwatch.config.watch_config import WatchConfiguration
from pushwatch.domain.errors.configuration import SettingsError
from pushwatch.infrastructure.adapters.join.join_client import JoinClient

log = structlog.get_logger()


def get_join_client(settings: PushSettings) -> JoinClient:
    """Create the Join client from settings.

    Raises:
        SettingsError: No Join API key is configured.
    """
    if not settings.join_api_key:
        raise SettingsError("JOIN_API_KEY is required to deliver through Join")
    return JoinClient(settings.join_api_key)


async def build_router(
    settings: PushSettings,
    watch_config: WatchConfiguration,
    source: EntityEventSourceProtocol,
    delivery: NotificationDeliveryProtocol,
    directory: TargetDirectoryProtocol,
    scheduler: TimerScheduler | None = None,
) -> AggregationRouter:
    """Build and configure a router.

    The running loop gets the invariant exception handler, so a broken
    invariant raised from a debounce timer stops the loop.

    Args:
        settings: Engine settings.
        watch_config: Parsed watch configuration (resolved here if needed).
        source: Real-time entity event source.
        delivery: Notification delivery port.
        directory: Target directory used to resolve target names.
        scheduler: Timer source for debounce (running loop if None).

    Returns:
        A configured router with all listeners registered.

    Raises:
        WatchConfigurationError: The configuration does not match the directory.
        TargetDirectoryError: The directory could not be listed.
    """
    if not watch_config.resolved:
        watch_config = watch_config.resolve_targets(await directory.list_targets())

    composer = NotificationComposer(
        rank_ceiling=settings.rank_ceiling,
        title_template=settings.title_template,
    )
    router = AggregationRouter(
        source=source,
        delivery=delivery,
        composer=composer,
        debounce_seconds=settings.debounce_seconds,
        countdown_placeholder=settings.countdown_placeholder,
        scheduler=scheduler,
    )
    router.configure(watch_config)
    install_invariant_handler(asyncio.get_running_loop())
    log.info(
        "router_ready",
        entities=router.tracked_entity_ids,
        debounce_seconds=settings.debounce_seconds,
    )
    return router
