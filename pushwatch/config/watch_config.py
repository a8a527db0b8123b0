"""Watch configuration: which events of which entities go to which targets.

Shape (YAML):

    All Devices:            # target name, or the every-target literal
      3111899: [All]        # entity id -> non-empty list of event kinds
    Phone:
      3111899: [Topic, CountdownStart]
      218274: [OnOff]

Validation is eager and fatal: any malformed section raises
WatchConfigurationError before a single listener is registered.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import structlog
import yaml

from pushwatch.domain.errors.configuration import WatchConfigurationError
from pushwatch.domain.models.event_kind import EventKind
from pushwatch.domain.models.target import ALL_TARGETS

log = structlog.get_logger()

_VALID_KINDS = ", ".join(kind.value for kind in EventKind)


@dataclass(frozen=True, eq=True)
class WatchRoute:
    """One (target, entity, event kinds) entry of the watch configuration.

    Attributes:
        target_name: Target name as written in the configuration.
        target_id: Resolved delivery target identifier (ALL_TARGETS for the
            every-target literal). Equals target_name until resolved.
        entity_id: Entity to watch.
        event_kinds: Requested event kinds, in configuration order.
    """

    target_name: str
    target_id: str
    entity_id: int
    event_kinds: tuple[EventKind, ...]


@dataclass(frozen=True, eq=True)
class WatchConfiguration:
    """Validated watch configuration.

    Attributes:
        routes: Entries in configuration order.
        resolved: Whether target names were resolved to identifiers.
    """

    routes: tuple[WatchRoute, ...]
    resolved: bool = False

    @property
    def entity_ids(self) -> list[int]:
        """Distinct entity ids, in first-seen order."""
        seen: dict[int, None] = {}
        for route in self.routes:
            seen.setdefault(route.entity_id, None)
        return list(seen)

    @property
    def target_names(self) -> list[str]:
        """Distinct target names, in first-seen order."""
        seen: dict[str, None] = {}
        for route in self.routes:
            seen.setdefault(route.target_name, None)
        return list(seen)

    def resolve_targets(self, directory: dict[str, str]) -> WatchConfiguration:
        """Resolve target names against the target directory.

        Args:
            directory: Target display name -> target identifier.

        Returns:
            A resolved copy of this configuration.

        Raises:
            WatchConfigurationError: A target name is unknown, or the
                directory itself contains a target named like the
                every-target literal.
        """
        if ALL_TARGETS in directory:
            raise WatchConfigurationError(
                f"A delivery target is named {ALL_TARGETS!r}, which is reserved "
                "for sending to every target"
            )

        routes = []
        for route in self.routes:
            if route.target_name == ALL_TARGETS:
                target_id = ALL_TARGETS
            elif route.target_name in directory:
                target_id = directory[route.target_name]
            else:
                raise WatchConfigurationError(
                    "Unknown delivery target", target=route.target_name
                )
            routes.append(replace(route, target_id=target_id))

        log.debug("watch_targets_resolved", targets=len(self.target_names))
        return WatchConfiguration(routes=tuple(routes), resolved=True)


def _parse_entity_id(target: str, key: Any) -> int:
    if isinstance(key, bool):
        raise WatchConfigurationError("Entity id must be an integer", target=target, entity=str(key))
    try:
        return int(str(key).strip())
    except ValueError:
        raise WatchConfigurationError(
            "Entity id must be an integer", target=target, entity=str(key)
        ) from None


def _parse_event_kinds(target: str, entity: str, value: Any) -> tuple[EventKind, ...]:
    if not isinstance(value, list):
        raise WatchConfigurationError(
            "Event kinds must be given as a list", target=target, entity=entity
        )
    if not value:
        raise WatchConfigurationError("Event kind list is empty", target=target, entity=entity)

    kinds: list[EventKind] = []
    for item in value:
        try:
            kinds.append(EventKind(item))
        except ValueError:
            raise WatchConfigurationError(
                f"Unknown event kind {item!r}, expected one of: {_VALID_KINDS}",
                target=target,
                entity=entity,
            ) from None
    return tuple(kinds)


def parse_watch_config(raw: Any) -> WatchConfiguration:
    """Validate a raw watch configuration mapping.

    Args:
        raw: Mapping of target name -> mapping of entity id -> event kinds.

    Returns:
        The validated, not yet resolved, configuration.

    Raises:
        WatchConfigurationError: The configuration is malformed.
    """
    if not isinstance(raw, dict):
        raise WatchConfigurationError("Watch configuration must be a mapping of targets")
    if not raw:
        raise WatchConfigurationError("Watch configuration lists no targets")

    routes: list[WatchRoute] = []
    for target, entities in raw.items():
        target = str(target)
        if not isinstance(entities, dict) or not entities:
            raise WatchConfigurationError(
                "Target must map entity ids to event kind lists", target=target
            )
        for entity_key, kinds in entities.items():
            entity_id = _parse_entity_id(target, entity_key)
            routes.append(
                WatchRoute(
                    target_name=target,
                    target_id=target,
                    entity_id=entity_id,
                    event_kinds=_parse_event_kinds(target, str(entity_key), kinds),
                )
            )

    return WatchConfiguration(routes=tuple(routes))


def load_watch_config(path: str | Path) -> WatchConfiguration:
    """Load and validate a watch configuration YAML file.

    Args:
        path: Path to the YAML file.

    Returns:
        The validated, not yet resolved, configuration.

    Raises:
        WatchConfigurationError: The file is missing, unparsable or malformed.
    """
    path = Path(path)
    try:
        with path.open(encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except OSError as e:
        raise WatchConfigurationError(f"Cannot read watch configuration {path}: {e}") from e
    except yaml.YAMLError as e:
        raise WatchConfigurationError(f"Invalid YAML in {path}: {e}") from e

    config = parse_watch_config(raw)
    log.info(
        "watch_config_loaded",
        path=str(path),
        targets=len(config.target_names),
        entities=len(config.entity_ids),
    )
    return config
