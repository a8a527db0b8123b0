"""
Pytest configuration and shared fixtures for pushwatch tests.

Testing Standards:
- All async tests use pytest.mark.asyncio (auto mode enabled in pyproject.toml)
- Timers are driven by ManualTimerScheduler unless a test exercises the real loop
- Unit tests go in tests/unit/<layer>/
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime, timedelta, timezone

import pytest
import structlog

from pushwatch.infrastructure.stubs import (
    EntityEventSourceStub,
    ManualTimerScheduler,
    NotificationDeliveryStub,
    TargetDirectoryStub,
)


class FakeClock:
    """Settable wall clock for observation timestamps."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> datetime:
        self.now = self.now + timedelta(seconds=seconds)
        return self.now


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from pushwatch import __version__

    return __version__


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def scheduler() -> ManualTimerScheduler:
    return ManualTimerScheduler()


@pytest.fixture
def source() -> EntityEventSourceStub:
    return EntityEventSourceStub(names={3111899: "alice", 218274: "bella"})


@pytest.fixture
def delivery() -> NotificationDeliveryStub:
    return NotificationDeliveryStub()


@pytest.fixture
def directory() -> TargetDirectoryStub:
    return TargetDirectoryStub({"Phone": "dev-phone", "Tablet": "dev-tablet"})


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    """Undo any structlog configuration a test applied."""
    yield
    structlog.reset_defaults()
