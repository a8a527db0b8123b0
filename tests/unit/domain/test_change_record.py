"""Unit tests for ChangeRecord and its payload-shape invariant."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from pushwatch.domain.errors import ChangeRecordInvariantError, InvariantViolationError
from pushwatch.domain.models.change_record import ChangeProperty, ChangeRecord

NOW = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class TestChangeProperty:
    """Tests for property tags."""

    @pytest.mark.parametrize(
        "prop",
        [ChangeProperty.COUNTDOWN_STARTED, ChangeProperty.COUNTDOWN_COMPLETED],
    )
    def test_countdown_properties_are_synthetic(self, prop: ChangeProperty) -> None:
        assert prop.is_synthetic is True

    @pytest.mark.parametrize(
        "prop",
        [
            ChangeProperty.ONLINE_STATE,
            ChangeProperty.VIDEO_STATE,
            ChangeProperty.RANK,
            ChangeProperty.TOPIC,
        ],
    )
    def test_value_properties_are_not_synthetic(self, prop: ChangeProperty) -> None:
        assert prop.is_synthetic is False


class TestChangeRecord:
    """Tests for record construction."""

    def test_value_change_carries_before_and_after(self) -> None:
        record = ChangeRecord.value_change(ChangeProperty.RANK, 12, 7, NOW)

        assert record.property is ChangeProperty.RANK
        assert record.before == 12
        assert record.after == 7
        assert record.message is None
        assert record.observed_at == NOW

    def test_value_change_allows_missing_before(self) -> None:
        record = ChangeRecord.value_change(ChangeProperty.TOPIC, None, "hello", NOW)

        assert record.before is None
        assert record.after == "hello"

    def test_synthetic_carries_message_only(self) -> None:
        record = ChangeRecord.synthetic(ChangeProperty.COUNTDOWN_STARTED, "go", NOW)

        assert record.message == "go"
        assert record.before is None
        assert record.after is None

    def test_synthetic_without_message_is_rejected(self) -> None:
        with pytest.raises(ChangeRecordInvariantError, match="require a message"):
            ChangeRecord(property=ChangeProperty.COUNTDOWN_COMPLETED, observed_at=NOW)

    def test_synthetic_with_values_is_rejected(self) -> None:
        with pytest.raises(ChangeRecordInvariantError, match="before/after"):
            ChangeRecord(
                property=ChangeProperty.COUNTDOWN_STARTED,
                observed_at=NOW,
                after=3,
                message="go",
            )

    def test_value_record_with_message_is_rejected(self) -> None:
        with pytest.raises(ChangeRecordInvariantError, match="cannot carry a message"):
            ChangeRecord(
                property=ChangeProperty.TOPIC,
                observed_at=NOW,
                after="x",
                message="x",
            )

    def test_invariant_error_is_an_invariant_violation(self) -> None:
        with pytest.raises(InvariantViolationError):
            ChangeRecord(property=ChangeProperty.COUNTDOWN_STARTED, observed_at=NOW)

    def test_records_are_immutable(self) -> None:
        record = ChangeRecord.value_change(ChangeProperty.RANK, 1, 2, NOW)

        with pytest.raises(AttributeError):
            record.after = 3  # type: ignore[misc]

    def test_records_compare_by_value(self) -> None:
        first = ChangeRecord.value_change(ChangeProperty.RANK, 1, 2, NOW)
        second = ChangeRecord.value_change(ChangeProperty.RANK, 1, 2, NOW)

        assert first == second
