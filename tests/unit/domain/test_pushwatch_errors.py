"""Unit tests for the pushwatch error hierarchy."""

from __future__ import annotations

import pytest

from pushwatch.domain.errors import (
    ChangeRecordInvariantError,
    ConfigurationError,
    InvariantViolationError,
    RoutingInvariantError,
    SettingsError,
    TargetDirectoryError,
    UnknownChangePropertyError,
    WatchConfigurationError,
)
from pushwatch.domain.exceptions import PushWatchError


class TestHierarchy:
    """Every domain error is catchable as PushWatchError."""

    @pytest.mark.parametrize(
        "error_class",
        [SettingsError, WatchConfigurationError, TargetDirectoryError],
    )
    def test_configuration_errors(self, error_class: type[Exception]) -> None:
        assert issubclass(error_class, ConfigurationError)
        assert issubclass(error_class, PushWatchError)

    @pytest.mark.parametrize(
        "error_class",
        [ChangeRecordInvariantError, RoutingInvariantError, UnknownChangePropertyError],
    )
    def test_invariant_errors(self, error_class: type[Exception]) -> None:
        assert issubclass(error_class, InvariantViolationError)
        assert issubclass(error_class, PushWatchError)


class TestMessages:
    """Tests for error message formatting."""

    def test_watch_configuration_error_without_location(self) -> None:
        error = WatchConfigurationError("Watch configuration lists no targets")

        assert str(error) == "Watch configuration lists no targets"
        assert error.target is None
        assert error.entity is None

    def test_watch_configuration_error_with_location(self) -> None:
        error = WatchConfigurationError("Event kind list is empty", target="Phone", entity="42")

        assert str(error) == "Event kind list is empty (target='Phone', entity='42')"
        assert error.target == "Phone"
        assert error.entity == "42"

    def test_routing_invariant_error(self) -> None:
        error = RoutingInvariantError(3111899, "rank")

        assert error.entity_id == 3111899
        assert error.property_name == "rank"
        assert str(error) == "No delivery target configured for property 'rank' on entity 3111899"

    def test_unknown_change_property_error(self) -> None:
        error = UnknownChangePropertyError("tips")

        assert error.property_name == "tips"
        assert str(error) == "Don't know how to render property: 'tips'"
