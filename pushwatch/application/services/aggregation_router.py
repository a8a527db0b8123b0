"""Aggregation router.

Top-level coordinator of the engine. Builds one EntitySubscription per
configured entity, registers the event source listeners exactly once per
entity, filters raw property changes into change records, feeds topic
changes through the countdown inference engine, and hands flushed batches
to the composer and the delivery port.

Filter policy:
- Video state: only real transitions. OnlineState records only on edges
  into or out of the offline sentinel; VideoState records on every change.
- Rank: only real changes, except a first observation of rank 0.
- Topic: only non-empty changes. Every topic change is also fed to the
  countdown engine, whether or not countdown events are pushed.

Concurrency: callbacks and timer firings run on one asyncio event loop, so
subscriptions need no locks. Deliveries are fire-and-forget tasks.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import datetime
from uuid import uuid4

import structlog

from pushwatch.application.ports.entity_event_source import (
    EntityEventSourceProtocol,
    PropertyKind,
)
from pushwatch.application.ports.notification_delivery import NotificationDeliveryProtocol
from pushwatch.application.ports.timer_scheduler import TimerScheduler
from pushwatch.application.services.change_buffer import EntityChangeBuffer
from pushwatch.application.services.entity_subscription import EntitySubscription
from pushwatch.application.services.notification_composer import (
    Notification,
    NotificationComposer,
)
from pushwatch.config.push_settings import DEFAULT_DEBOUNCE_SECONDS
from pushwatch.config.watch_config import WatchConfiguration
from pushwatch.domain.errors.configuration import WatchConfigurationError
from pushwatch.domain.errors.invariant import InvariantViolationError
from pushwatch.domain.models.change_record import ChangeProperty, ChangeRecord, ChangeValue
from pushwatch.domain.models.entity import EntityRef
from pushwatch.domain.models.video_state import is_offline
from pushwatch.domain.services.countdown_inference import (
    DEFAULT_COUNTDOWN_PLACEHOLDER,
    DEFAULT_DECREMENT_THRESHOLD,
    CountdownInferenceEngine,
)

log = structlog.get_logger()


def _local_now() -> datetime:
    return datetime.now().astimezone()


class AggregationRouter:
    """Wires the event source, change buffers, composer and delivery port.

    Subscriptions are kept in an explicit entity_id -> EntitySubscription
    map owned by the router; nothing is attached to objects owned by the
    event source.
    """

    def __init__(
        self,
        source: EntityEventSourceProtocol,
        delivery: NotificationDeliveryProtocol,
        composer: NotificationComposer | None = None,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        countdown_threshold: int = DEFAULT_DECREMENT_THRESHOLD,
        countdown_placeholder: str = DEFAULT_COUNTDOWN_PLACEHOLDER,
        scheduler: TimerScheduler | None = None,
        clock: Callable[[], datetime] = _local_now,
    ) -> None:
        """Initialize the router.

        Args:
            source: Real-time entity event source.
            delivery: Notification delivery port.
            composer: Renders batches; a default composer when omitted.
            debounce_seconds: Quiet period before a batch is sent.
            countdown_threshold: Decrements needed to detect a countdown.
            countdown_placeholder: "Countdown reached" topic token.
            scheduler: Timer source for the buffers (running loop if None).
            clock: Source of observation times.
        """
        self._source = source
        self._delivery = delivery
        self._composer = composer or NotificationComposer()
        self._debounce_seconds = debounce_seconds
        self._countdown_threshold = countdown_threshold
        self._countdown_placeholder = countdown_placeholder
        self._scheduler = scheduler
        self._clock = clock
        self._subscriptions: dict[int, EntitySubscription] = {}
        self._deliveries: set[asyncio.Task[None]] = set()

    @property
    def tracked_entity_ids(self) -> list[int]:
        return list(self._subscriptions)

    def get_subscription(self, entity_id: int) -> EntitySubscription | None:
        return self._subscriptions.get(entity_id)

    def configure(self, config: WatchConfiguration) -> None:
        """Create subscriptions and routes for a validated watch configuration.

        Listeners are registered once per entity no matter how many targets
        reference it. For a property routed more than once, the last route
        in configuration order wins.

        Args:
            config: Validated watch configuration with resolved targets.

        Raises:
            WatchConfigurationError: Targets were not resolved.
        """
        if not config.resolved:
            raise WatchConfigurationError(
                "Watch configuration targets must be resolved before routing"
            )
        for route in config.routes:
            subscription = self._ensure_subscription(route.entity_id)
            for kind in route.event_kinds:
                for prop in kind.properties():
                    subscription.target_for[prop] = route.target_id

        log.info(
            "router_configured",
            entities=len(self._subscriptions),
            routes=len(config.routes),
        )

    def on_connected(self) -> None:
        """Re-query every tracked entity after the source (re)connects."""
        for entity_id in self._subscriptions:
            self._source.query_entity(entity_id)
        log.info("tracked_entities_queried", entities=len(self._subscriptions))

    def on_video_state(
        self, entity: EntityRef, before: ChangeValue | None, after: ChangeValue | None
    ) -> None:
        """Handle a video state change."""
        if before == after:
            return
        subscription = self._subscription_for(entity)

        if subscription.subscribes_to(ChangeProperty.ONLINE_STATE):
            if is_offline(before) != is_offline(after):
                record = self._record(subscription, ChangeProperty.ONLINE_STATE, before, after)
                if subscription.last_online_state_change is None:
                    subscription.last_online_state_change = record
                subscription.buffer.enqueue(record)

        if subscription.subscribes_to(ChangeProperty.VIDEO_STATE):
            record = self._record(subscription, ChangeProperty.VIDEO_STATE, before, after)
            if subscription.last_video_state_change is None:
                subscription.last_video_state_change = record
            subscription.buffer.enqueue(record)

    def on_rank(
        self, entity: EntityRef, before: ChangeValue | None, after: ChangeValue | None
    ) -> None:
        """Handle a rank change."""
        if before == after:
            return
        if before is None and after == 0:
            return
        subscription = self._subscription_for(entity)
        if subscription.subscribes_to(ChangeProperty.RANK):
            subscription.buffer.enqueue(
                self._record(subscription, ChangeProperty.RANK, before, after)
            )

    def on_topic(
        self, entity: EntityRef, before: ChangeValue | None, after: ChangeValue | None
    ) -> None:
        """Handle a topic change and feed the countdown engine."""
        if before == after:
            return
        subscription = self._subscription_for(entity)

        if after and subscription.subscribes_to(ChangeProperty.TOPIC):
            subscription.buffer.enqueue(
                self._record(subscription, ChangeProperty.TOPIC, before, after)
            )

        before_text = None if before is None else str(before)
        after_text = None if after is None else str(after)
        observed_at = subscription.stamp(self._clock())
        for record in subscription.countdown.observe(before_text, after_text, observed_at):
            if subscription.subscribes_to(record.property):
                subscription.buffer.enqueue(record)

    def flush_all(self) -> None:
        """Flush every buffer immediately, ignoring pending debounce timers.

        Must be called on the running event loop. A non-empty buffer flushed
        without one raises ``RuntimeError`` and nothing is delivered.
        """
        for subscription in self._subscriptions.values():
            subscription.buffer.flush()

    async def shutdown(self) -> None:
        """Cancel pending flushes and wait for in-flight deliveries."""
        for subscription in self._subscriptions.values():
            subscription.buffer.cancel()
        if self._deliveries:
            await asyncio.gather(*self._deliveries, return_exceptions=True)
        log.info("router_shutdown", entities=len(self._subscriptions))

    def _ensure_subscription(self, entity_id: int) -> EntitySubscription:
        subscription = self._subscriptions.get(entity_id)
        if subscription is not None:
            return subscription

        entity = EntityRef(entity_id)
        buffer = EntityChangeBuffer(
            entity_id,
            on_flush=lambda changes: self._flush(entity_id, changes),
            debounce_seconds=self._debounce_seconds,
            scheduler=self._scheduler,
        )
        countdown = CountdownInferenceEngine(
            entity_id,
            threshold=self._countdown_threshold,
            placeholder=self._countdown_placeholder,
        )
        subscription = EntitySubscription(entity=entity, buffer=buffer, countdown=countdown)
        self._subscriptions[entity_id] = subscription

        self._source.add_listener(entity_id, PropertyKind.VIDEO_STATE, self.on_video_state)
        self._source.add_listener(entity_id, PropertyKind.RANK, self.on_rank)
        self._source.add_listener(entity_id, PropertyKind.TOPIC, self.on_topic)
        log.debug("entity_subscribed", entity_id=entity_id)
        return subscription

    def _subscription_for(self, entity: EntityRef) -> EntitySubscription:
        subscription = self._subscriptions.get(entity.entity_id)
        if subscription is None:
            raise InvariantViolationError(
                f"Change received for untracked entity {entity.entity_id}"
            )
        if entity.name != subscription.entity.name:
            subscription.entity = entity
        return subscription

    def _record(
        self,
        subscription: EntitySubscription,
        prop: ChangeProperty,
        before: ChangeValue | None,
        after: ChangeValue | None,
    ) -> ChangeRecord:
        return ChangeRecord.value_change(prop, before, after, subscription.stamp(self._clock()))

    def _flush(self, entity_id: int, changes: list[ChangeRecord]) -> None:
        # Raises RuntimeError outside a running loop, before any state changes
        loop = asyncio.get_running_loop()
        subscription = self._subscriptions[entity_id]
        with structlog.contextvars.bound_contextvars(
            flush_id=str(uuid4()), entity_id=entity_id
        ):
            notification = self._composer.render(subscription, changes)
            self._dispatch(loop, notification)

    def _dispatch(self, loop: asyncio.AbstractEventLoop, notification: Notification) -> None:
        task = loop.create_task(
            self._delivery.deliver(
                notification.targets,
                notification.title,
                notification.body,
                entity=notification.entity,
            )
        )
        self._deliveries.add(task)
        task.add_done_callback(self._delivery_done)
        log.info(
            "notification_dispatched",
            entity_id=notification.entity.entity_id,
            targets=notification.targets,
        )

    def _delivery_done(self, task: asyncio.Task[None]) -> None:
        self._deliveries.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            log.error("notification_delivery_failed", error=str(error))
