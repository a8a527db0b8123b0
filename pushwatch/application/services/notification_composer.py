"""Notification composer.

Renders the drained change records of one entity into a single
notification: one title, one body listing the newest change first, and the
resolved set of delivery targets.

Target resolution:
- Every record resolves to the target configured for its property.
- Any record resolving to ALL_TARGETS makes the whole batch go to every
  target (targets=None).
- Otherwise the batch goes once to the union of resolved targets.

A record whose property has no configured target is a wiring bug and is
raised as RoutingInvariantError; it is never dropped.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

import structlog

from pushwatch.application.services.entity_subscription import EntitySubscription
from pushwatch.config.push_settings import DEFAULT_RANK_CEILING, DEFAULT_TITLE_TEMPLATE
from pushwatch.domain.errors.invariant import (
    RoutingInvariantError,
    UnknownChangePropertyError,
)
from pushwatch.domain.models.change_record import ChangeProperty, ChangeRecord
from pushwatch.domain.models.entity import EntityRef
from pushwatch.domain.models.target import ALL_TARGETS
from pushwatch.domain.models.video_state import is_offline, video_state_label

log = structlog.get_logger()


@dataclass(frozen=True, eq=True)
class Notification:
    """A rendered notification ready for delivery.

    Attributes:
        targets: Explicit target identifiers, or None for every target.
        title: Notification title.
        body: One timestamped line per change, newest first.
        entity: Entity the notification is about.
    """

    targets: list[str] | None
    title: str
    body: str
    entity: EntityRef


def _round_half_up(value: float) -> int:
    return int(value + 0.5)


def humanize_duration(delta: timedelta) -> str:
    """Render a duration as a rough relative-time phrase.

    Args:
        delta: The duration; the sign is ignored.

    Returns:
        Phrases like "a few seconds", "5 minutes", "an hour", "3 days".
    """
    seconds = abs(delta.total_seconds())
    minutes = seconds / 60
    hours = minutes / 60
    days = hours / 24

    if seconds < 45:
        return "a few seconds"
    if seconds < 90:
        return "a minute"
    if minutes < 45:
        return f"{_round_half_up(minutes)} minutes"
    if minutes < 90:
        return "an hour"
    if hours < 22:
        return f"{_round_half_up(hours)} hours"
    if hours < 36:
        return "a day"
    if days < 26:
        return f"{_round_half_up(days)} days"
    if days < 45:
        return "a month"
    if days < 320:
        return f"{_round_half_up(days / 30)} months"
    if days < 548:
        return "a year"
    return f"{_round_half_up(days / 365)} years"


class NotificationComposer:
    """Turns a drained batch of change records into one Notification."""

    def __init__(
        self,
        rank_ceiling: int = DEFAULT_RANK_CEILING,
        title_template: str = DEFAULT_TITLE_TEMPLATE,
    ) -> None:
        """Initialize the composer.

        Args:
            rank_ceiling: Rank 0 is rendered as "over {rank_ceiling}".
            title_template: Title format, receives name and entity_id.
        """
        self._rank_ceiling = rank_ceiling
        self._title_template = title_template

    def render(
        self, subscription: EntitySubscription, changes: list[ChangeRecord]
    ) -> Notification:
        """Render a batch of changes for one entity.

        Records are processed oldest first so elapsed-time phrases chain
        correctly; each line is prepended, so the body lists newest first.
        Updates the subscription's last video/online state pointers.

        Args:
            subscription: The entity's subscription.
            changes: Drained records, oldest first.

        Returns:
            The rendered notification.

        Raises:
            RoutingInvariantError: A record's property has no target.
            UnknownChangePropertyError: A record's property cannot be rendered.
        """
        body = ""
        resolved: list[str] = []

        for change in changes:
            if not isinstance(change.property, ChangeProperty):
                raise UnknownChangePropertyError(change.property)
            target = self._resolve_target(subscription, change.property)
            if target not in resolved:
                resolved.append(target)
            line = self._render_line(subscription, change)
            body = f"[{change.observed_at.strftime('%H:%M:%S')}] {line}\n" + body

        targets = None if ALL_TARGETS in resolved else resolved
        entity = subscription.entity
        title = self._title_template.format(name=entity.name, entity_id=entity.entity_id)

        log.debug(
            "notification_composed",
            entity_id=entity.entity_id,
            changes=len(changes),
            targets=targets,
        )
        return Notification(targets=targets, title=title, body=body, entity=entity)

    def _resolve_target(self, subscription: EntitySubscription, prop: ChangeProperty) -> str:
        target = subscription.target_for.get(prop)
        if target is None:
            raise RoutingInvariantError(subscription.entity_id, prop.value)
        return target

    def _render_line(self, subscription: EntitySubscription, change: ChangeRecord) -> str:
        prop = change.property
        if prop is ChangeProperty.VIDEO_STATE:
            return self._render_video_state(subscription, change)
        if prop is ChangeProperty.ONLINE_STATE:
            return self._render_online_state(subscription, change)
        if prop is ChangeProperty.RANK:
            return self._render_rank(change)
        if prop is ChangeProperty.TOPIC:
            return f"New topic: {change.after}"
        if prop in (ChangeProperty.COUNTDOWN_STARTED, ChangeProperty.COUNTDOWN_COMPLETED):
            return str(change.message)
        raise UnknownChangePropertyError(prop)

    def _render_video_state(self, subscription: EntitySubscription, change: ChangeRecord) -> str:
        line = f"Is now in state {video_state_label(change.after)}"
        prior = subscription.last_video_state_change
        if prior is not None and prior.observed_at != change.observed_at:
            line += (
                f" after {self._elapsed(prior.observed_at, change.observed_at)}"
                f" in state {video_state_label(prior.after)}"
            )
        subscription.last_video_state_change = change
        return line + "."

    def _render_online_state(self, subscription: EntitySubscription, change: ChangeRecord) -> str:
        went_off = is_offline(change.after)
        line = "Is now off" if went_off else "Is now on"
        prior = subscription.last_online_state_change
        if prior is not None and prior.observed_at != change.observed_at:
            line += f" after {self._elapsed(prior.observed_at, change.observed_at)}"
            line += " on" if went_off else " off"
        subscription.last_online_state_change = change
        return line + "."

    def _render_rank(self, change: ChangeRecord) -> str:
        if change.before is None:
            before = ""
        elif change.before == 0:
            before = f" from rank over {self._rank_ceiling}"
        else:
            before = f" from rank {change.before}"
        after = f"over {self._rank_ceiling}" if change.after == 0 else str(change.after)
        return f"Has moved{before} to rank {after}."

    @staticmethod
    def _elapsed(earlier: datetime, later: datetime) -> str:
        return humanize_duration(later - earlier)
